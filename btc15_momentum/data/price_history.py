"""
Price History Store

Durable cache of timestamped BTC/USD samples used for momentum lookback.
Append-then-evict: entries keep insertion order and are never sorted.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from btc15_momentum.utils.intervals import HOUR_MS, to_epoch_ms
from btc15_momentum.utils.state_store import StateStore

logger = logging.getLogger(__name__)

HISTORY_VERSION = 1
DEFAULT_RETENTION_MS = 24 * HOUR_MS


@dataclass(frozen=True)
class PriceSample:
    """One observation of the feed."""

    timestamp: int  # epoch millis
    price: float

    def to_dict(self) -> dict:
        return {"timestamp": self.timestamp, "price": self.price}


@dataclass
class PriceHistory:
    """Persisted cache document."""

    version: int = HISTORY_VERSION
    entries: List[PriceSample] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "entries": [e.to_dict() for e in self.entries],
        }


def _parse_entry(item) -> Optional[PriceSample]:
    if not isinstance(item, dict):
        return None
    try:
        return PriceSample(timestamp=int(item["timestamp"]), price=float(item["price"]))
    except (KeyError, TypeError, ValueError):
        return None


class PriceHistoryStore:
    """
    Load, record and query the price cache.

    The file is read once and rewritten once per trading cycle; a single
    writer process is assumed.
    """

    def __init__(
        self,
        store: StateStore,
        path: str = "price_cache.json",
        retention_ms: int = DEFAULT_RETENTION_MS,
        audit=None,
    ):
        """
        Args:
            store: Durable file store
            path: Cache document name (relative to the store's data dir) or absolute path
            retention_ms: Entries older than now - retention_ms are evicted on record
            audit: Optional AuditLog notified when the cache is reset
        """
        self.store = store
        self.path = path
        self.retention_ms = retention_ms
        self.audit = audit

    def load(self) -> PriceHistory:
        """Read the cache. Missing or unparseable documents yield an empty history."""
        try:
            raw = self.store.read_text(self.path)
        except (OSError, UnicodeDecodeError) as e:
            self._report_reset(f"unreadable: {e}")
            return PriceHistory()

        if raw is None:
            return PriceHistory()

        try:
            parsed = json.loads(raw)
            if not isinstance(parsed, dict):
                raise ValueError(f"expected an object, got {type(parsed).__name__}")
        except ValueError as e:
            self._report_reset(str(e))
            return PriceHistory()

        raw_entries = parsed.get("entries")
        if not isinstance(raw_entries, list):
            raw_entries = []

        entries = []
        for item in raw_entries:
            sample = _parse_entry(item)
            if sample is not None:
                entries.append(sample)

        dropped = len(raw_entries) - len(entries)
        if dropped:
            logger.warning(f"[PriceHistory] Dropped {dropped} malformed entries")

        version = parsed.get("version")
        return PriceHistory(
            version=version if isinstance(version, int) else HISTORY_VERSION,
            entries=entries,
        )

    def record(self, history: PriceHistory, price: float, now_ms: Optional[int] = None) -> PriceSample:
        """
        Append a sample, evict expired entries and persist the result.

        Returns:
            The newly created sample
        """
        now_ms = to_epoch_ms() if now_ms is None else now_ms
        sample = PriceSample(timestamp=now_ms, price=float(price))
        history.entries.append(sample)

        cutoff = now_ms - self.retention_ms
        history.entries = [e for e in history.entries if e.timestamp >= cutoff]

        self.store.write_document(self.path, history.to_dict())
        return sample

    @staticmethod
    def find_approx(history: PriceHistory, target_age_ms: int, now_ms: Optional[int] = None) -> Optional[PriceSample]:
        """
        Most recent sample that is at least target_age_ms old.

        Sampling is once per minute, so an exact match is not expected;
        the closest sample from below is used instead.
        """
        now_ms = to_epoch_ms() if now_ms is None else now_ms
        target = now_ms - target_age_ms
        best: Optional[PriceSample] = None
        for entry in history.entries:
            if entry.timestamp <= target and (best is None or entry.timestamp > best.timestamp):
                best = entry
        return best

    def _report_reset(self, reason: str):
        logger.warning(f"[PriceHistory] Failed to parse price cache, resetting: {reason}")
        if self.audit is not None:
            self.audit.record(
                "Failed to parse price cache, resetting.",
                level=logging.WARNING,
                event="price_cache_reset",
                error=reason,
            )
