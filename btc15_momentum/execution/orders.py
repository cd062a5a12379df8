"""
Order data structures (OrderPayload, DryRunResult).
"""

import json
from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class OrderPayload:
    """
    Order sent to the CLOB for one cycle.

    Field order is the wire/signing order.
    """

    market_id: str
    outcome: Literal["Yes", "No"]
    side: Literal["buy"]
    size: float  # USDC notional
    price: float  # Limit price
    expiration: int  # epoch seconds

    def to_dict(self) -> dict:
        return {
            "market_id": self.market_id,
            "outcome": self.outcome,
            "side": self.side,
            "size": self.size,
            "price": self.price,
            "expiration": self.expiration,
        }

    def canonical(self) -> str:
        """Compact JSON used as the signed message."""
        return json.dumps(self.to_dict(), separators=(",", ":"))


@dataclass(frozen=True)
class DryRunResult:
    """Result of a submit in dry-run mode: nothing left the process."""

    payload: OrderPayload
    status: str = "dry-run"

    def to_dict(self) -> dict:
        return {"status": self.status, "payload": self.payload.to_dict()}
