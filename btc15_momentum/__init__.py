"""
BTC 15-minute Momentum Trader for Polymarket

Once per 15-minute interval, compares the Chainlink BTC/USD price with the
price 15 minutes earlier and buys the matching outcome ("Yes" for up, "No"
for down) on the market opening at the next boundary.

Components:
- Scheduler: Fires exactly once per interval, one minute before the boundary
- Price History: Durable 24h cache of feed samples for the momentum lookback
- Signal Engine: UP/DOWN from current price vs reference sample
- Allocation Policy: Bet size from USDC balance and configured limits
- Market Selector: Picks the market starting at the next boundary
- Order Pipeline: Builds, signs and submits (or simulates) the order
- Audit Log: Append-only JSONL trade log
"""

__version__ = "0.1.0"

from btc15_momentum.core.config import Config
from btc15_momentum.core.scheduler import IntervalScheduler

__all__ = [
    "Config",
    "IntervalScheduler",
]
