"""
Signal Engine

Directional momentum: compares the current feed price with the
reference sample (most recent sample at least 15 minutes old).
"""

from enum import Enum
from typing import Optional

from btc15_momentum.data.price_history import PriceSample


class TradeSignal(str, Enum):
    UP = "UP"
    DOWN = "DOWN"


def compute_signal(current_price: float, reference: Optional[PriceSample]) -> Optional[TradeSignal]:
    """
    Args:
        current_price: Latest feed price
        reference: Reference sample, or None when history is too short

    Returns:
        UP if price rose strictly, DOWN otherwise (ties included),
        None if there is no reference sample
    """
    if reference is None:
        return None
    return TradeSignal.UP if current_price > reference.price else TradeSignal.DOWN
