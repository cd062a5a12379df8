"""Core system components: config, errors, cycle outcomes, scheduler."""

from btc15_momentum.core.config import Config
from btc15_momentum.core.errors import ConfigurationError, TraderError
from btc15_momentum.core.outcomes import CycleFailed, CycleSkipped, CycleSubmitted, SkipReason
from btc15_momentum.core.scheduler import IntervalScheduler

__all__ = [
    "Config",
    "ConfigurationError",
    "TraderError",
    "CycleFailed",
    "CycleSkipped",
    "CycleSubmitted",
    "SkipReason",
    "IntervalScheduler",
]
