"""
Market listing and selection.

Fetches active BTC markets from the Polymarket Gamma API and picks the one
whose start time matches the upcoming 15-minute boundary.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import requests

from btc15_momentum.core.config import Config
from btc15_momentum.utils.intervals import as_utc, next_boundary

logger = logging.getLogger(__name__)

# Field spellings seen across Gamma API versions, in order of preference.
START_TIME_FIELDS = ("start_time", "startTime", "start_date", "startDate")
MARKET_ID_FIELDS = ("id", "market_id", "marketId")

# Numeric timestamps above this are treated as epoch milliseconds.
_EPOCH_MS_THRESHOLD = 10**11


def first_present(market: Dict[str, Any], names) -> Any:
    """Value of the first field in names that is present and not None."""
    for name in names:
        value = market.get(name)
        if value is not None:
            return value
    return None


def market_id(market: Dict[str, Any]) -> Optional[str]:
    value = first_present(market, MARKET_ID_FIELDS)
    return None if value is None else str(value)


def _from_epoch(value: float) -> datetime:
    if abs(value) >= _EPOCH_MS_THRESHOLD:
        value = value / 1000.0
    return datetime.fromtimestamp(value, tz=timezone.utc)


def parse_start_time(market: Dict[str, Any]) -> Optional[datetime]:
    """
    Market start time as an aware UTC datetime.

    Accepts ISO-8601 strings (Z suffix, offsets, or naive = UTC) and epoch
    seconds or milliseconds. Returns None if missing or unparseable.
    """
    raw = first_present(market, START_TIME_FIELDS)
    if raw is None or raw == "" or isinstance(raw, bool):
        return None

    try:
        if isinstance(raw, (int, float)):
            return _from_epoch(raw)

        if isinstance(raw, str):
            text = raw.strip()
            try:
                return _from_epoch(float(text))
            except ValueError:
                pass
            if text.endswith("Z") or text.endswith("z"):
                text = text[:-1] + "+00:00"
            return as_utc(datetime.fromisoformat(text))
    except (ValueError, OverflowError, OSError):
        return None

    return None


class MarketSelector:
    """Selects the market that opens at the next interval boundary."""

    def __init__(self, interval_minutes: int = 15, window_sec: int = 60):
        self.interval_minutes = interval_minutes
        self.window = timedelta(seconds=window_sec)

    def acceptance_window(self, now: datetime):
        boundary = next_boundary(now, self.interval_minutes)
        return boundary - self.window, boundary + self.window

    def select(self, markets: List[Dict[str, Any]], now: datetime) -> Optional[Dict[str, Any]]:
        """
        First market (input order) starting within boundary ± window.

        Markets with missing or unparseable start times are skipped.
        """
        window_start, window_end = self.acceptance_window(now)
        for market in markets:
            start = parse_start_time(market)
            if start is None:
                continue
            if window_start <= start <= window_end:
                return market
        return None


class GammaMarketLister:
    """Active-market listing from the Gamma API."""

    def __init__(self, config: Config, session: Optional[requests.Session] = None):
        self.base_url = config.polymarket.api_base.rstrip("/")
        self.timeout = config.polymarket.http_timeout_sec
        self.tag = config.polymarket.market_tag
        self.limit = config.polymarket.market_limit
        self.session = session or requests.Session()

    def list_active_markets(self) -> List[Dict[str, Any]]:
        resp = self.session.get(
            f"{self.base_url}/markets",
            params={"active": "true", "limit": self.limit, "tag": self.tag},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        data = resp.json()

        if isinstance(data, list):
            markets = data
        elif isinstance(data, dict):
            markets = data.get("markets") or []
        else:
            markets = []

        logger.debug(f"[Markets] Fetched {len(markets)} active markets")
        return [m for m in markets if isinstance(m, dict)]
