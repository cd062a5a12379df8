"""
Allocation policy: bet size from USDC balance and configured limits.
"""

from btc15_momentum.core.config import Config


def compute_allocation(balance: float, max_bet_percent: float) -> float:
    """Fraction of balance to bet, floored at zero."""
    return max(balance * max_bet_percent, 0.0)


class AllocationPolicy:
    """
    Bet sizing.

    The minimum-balance floor is a precondition checked by the cycle
    (meets_minimum) before compute_allocation is invoked. A non-positive
    allocation means no order is placed.
    """

    def __init__(self, config: Config):
        self.max_bet_percent = config.trading.max_bet_percent
        self.min_usdc_balance = config.trading.min_usdc_balance

    def meets_minimum(self, balance: float) -> bool:
        return balance >= self.min_usdc_balance

    def compute_allocation(self, balance: float) -> float:
        return compute_allocation(balance, self.max_bet_percent)
