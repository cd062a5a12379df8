"""
Audit Log

Append-only structured record of every notable decision and error.
Each record is one JSON line: {"timestamp": ISO-8601, "message": ..., **fields}.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from btc15_momentum.utils.state_store import StateStore

logger = logging.getLogger(__name__)


class AuditLog:
    """
    Trade log sink.

    Writes never raise back into the caller: a failed write is reported
    on the console logger and the record is dropped.
    """

    def __init__(self, store: StateStore, path: str = "trade_log.jsonl"):
        self.store = store
        self.path = path

    def record(self, message: str, level: int = logging.INFO, **fields) -> Optional[dict]:
        """
        Append one audit record.

        Returns:
            The record written, or None if it could not be written
        """
        line = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "message": message,
            **fields,
        }
        logger.log(level, f"[Audit] {message} {fields}" if fields else f"[Audit] {message}")
        try:
            self.store.append_jsonl(self.path, line)
        except Exception as e:  # noqa: BLE001
            logger.warning(f"[Audit] Failed to write record '{message}': {e}")
            return None
        return line
