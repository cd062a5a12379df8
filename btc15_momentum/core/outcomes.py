"""
Trading cycle outcomes.

Every cycle attempt ends in exactly one of: CycleSkipped, CycleSubmitted,
CycleFailed. Each converts to a single audit record.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class SkipReason(str, Enum):
    INSUFFICIENT_HISTORY = "insufficient_history"
    NO_SIGNAL = "no_signal"
    BALANCE_BELOW_MINIMUM = "balance_below_minimum"
    ZERO_ALLOCATION = "zero_allocation"
    NO_MATCHING_MARKET = "no_matching_market"


SKIP_MESSAGES = {
    SkipReason.INSUFFICIENT_HISTORY: "Insufficient price history to compute signal.",
    SkipReason.NO_SIGNAL: "Signal unavailable.",
    SkipReason.BALANCE_BELOW_MINIMUM: "Balance below minimum, skipping trade.",
    SkipReason.ZERO_ALLOCATION: "Allocation computed as 0, skipping.",
    SkipReason.NO_MATCHING_MARKET: "No matching market found for next interval.",
}


@dataclass(frozen=True)
class CycleSkipped:
    reason: SkipReason
    details: Dict[str, Any] = field(default_factory=dict)

    status = "skipped"

    @property
    def message(self) -> str:
        return SKIP_MESSAGES[self.reason]

    def to_record(self) -> dict:
        return {"outcome": self.status, "reason": self.reason.value, **self.details}


@dataclass(frozen=True)
class CycleSubmitted:
    signal: str
    market_id: str
    allocation: float
    result: Any
    details: Dict[str, Any] = field(default_factory=dict)

    status = "submitted"
    message = "Order result."

    def to_record(self) -> dict:
        result = self.result.to_dict() if hasattr(self.result, "to_dict") else self.result
        return {
            "outcome": self.status,
            "signal": self.signal,
            "marketId": self.market_id,
            "allocation": self.allocation,
            "orderResult": result,
            **self.details,
        }


@dataclass(frozen=True)
class CycleFailed:
    error: str
    error_type: str = "Exception"
    details: Dict[str, Any] = field(default_factory=dict)

    status = "failed"
    message = "Trading cycle failed."

    @classmethod
    def from_exception(cls, exc: BaseException, details: Optional[Dict[str, Any]] = None) -> "CycleFailed":
        return cls(error=str(exc), error_type=type(exc).__name__, details=dict(details or {}))

    def to_record(self) -> dict:
        return {"outcome": self.status, "error": self.error, "errorType": self.error_type, **self.details}
