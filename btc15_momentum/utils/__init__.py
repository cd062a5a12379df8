"""Utilities: interval arithmetic, state store."""

from btc15_momentum.utils.intervals import interval_key, next_boundary
from btc15_momentum.utils.state_store import StateStore

__all__ = [
    "interval_key",
    "next_boundary",
    "StateStore",
]
