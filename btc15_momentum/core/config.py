"""
Configuration management for the BTC 15-minute momentum trader.

Defaults match the production bot. Supports loading from YAML/dict and
environment variable overrides (a .env file is loaded by main before Config).
"""

import os
from dataclasses import dataclass, field
from typing import Literal


DEFAULT_CHAINLINK_BTC_USD_FEED = "0xc907E116054Ad103354f2D350FD2514433D57F6f"
DEFAULT_USDC_ADDRESS = "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174"


@dataclass
class ChainConfig:
    """Polygon RPC, wallet and on-chain contract addresses."""

    rpc_url: str = ""  # RPC_URL (required)
    private_key: str = ""  # PRIVATE_KEY (required)
    chainlink_feed: str = DEFAULT_CHAINLINK_BTC_USD_FEED  # BTC/USD aggregator
    usdc_address: str = DEFAULT_USDC_ADDRESS  # USDC.e on Polygon
    rpc_timeout_sec: float = 10.0


@dataclass
class PolymarketConfig:
    """Venue endpoints and credentials."""

    api_base: str = "https://gamma-api.polymarket.com"
    clob_base: str = "https://clob.polymarket.com"
    api_key: str = ""
    api_secret: str = ""
    http_timeout_sec: float = 10.0
    market_tag: str = "BTC"
    market_limit: int = 200


@dataclass
class TradingConfig:
    """Sizing and order parameters."""

    live_mode: bool = False  # Dry run unless explicitly enabled
    max_bet_percent: float = 0.05  # 5% of USDC balance per cycle
    min_usdc_balance: float = 10.0  # Skip the cycle below this balance
    slippage_bps: float = 50.0  # Carried for future pricing, not used by decisions
    order_price: float = 1.0  # Limit price sent for both outcomes
    order_ttl_sec: int = 60  # Expiration = cycle start + TTL


@dataclass
class ScheduleConfig:
    """Interval and trigger timing."""

    interval_minutes: int = 15
    trigger_lead_minutes: int = 1  # Fire one minute before the boundary
    trigger_jitter_sec: int = 5  # ...within the first 5 seconds of that minute
    tick_seconds: int = 60
    market_window_sec: int = 60  # Accept markets starting boundary ± 60s


@dataclass
class HistoryConfig:
    """Price history retention and momentum lookback."""

    retention_hours: int = 24
    reference_age_minutes: int = 15


@dataclass
class StateConfig:
    """Durable files. Relative paths resolve against data_dir."""

    data_dir: str = "."
    price_cache_path: str = "price_cache.json"
    trade_log_path: str = "trade_log.jsonl"


@dataclass
class MonitoringConfig:
    """Console logging."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


def _env_flag(value: str) -> bool:
    return value.strip().lower() == "true"


@dataclass
class Config:
    """
    Complete system configuration.

    Environment variables (override config file):
    - RPC_URL, PRIVATE_KEY: Polygon RPC endpoint and wallet key
    - CHAINLINK_BTC_USD_FEED, USDC_ADDRESS: contract addresses
    - LIVE_MODE: "true" to submit orders, anything else is a dry run
    - MAX_BET_PERCENT, MIN_USDC_BALANCE, SLIPPAGE_BPS: sizing
    - PRICE_CACHE_PATH, TRADE_LOG_PATH: durable files
    - POLYMARKET_API_BASE, POLYMARKET_CLOB_BASE: venue endpoints
    - POLYMARKET_API_KEY, POLYMARKET_API_SECRET: venue credentials
    - LOG_LEVEL: console log level
    """

    chain: ChainConfig = field(default_factory=ChainConfig)
    polymarket: PolymarketConfig = field(default_factory=PolymarketConfig)
    trading: TradingConfig = field(default_factory=TradingConfig)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    state: StateConfig = field(default_factory=StateConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    def __post_init__(self):
        """Load environment variable overrides."""
        env = os.environ

        if env.get("RPC_URL"):
            self.chain.rpc_url = env["RPC_URL"]
        if env.get("PRIVATE_KEY"):
            self.chain.private_key = env["PRIVATE_KEY"]
        if env.get("CHAINLINK_BTC_USD_FEED"):
            self.chain.chainlink_feed = env["CHAINLINK_BTC_USD_FEED"]
        if env.get("USDC_ADDRESS"):
            self.chain.usdc_address = env["USDC_ADDRESS"]

        if env.get("LIVE_MODE") is not None:
            self.trading.live_mode = _env_flag(env["LIVE_MODE"])
        if env.get("MAX_BET_PERCENT"):
            self.trading.max_bet_percent = float(env["MAX_BET_PERCENT"])
        if env.get("MIN_USDC_BALANCE"):
            self.trading.min_usdc_balance = float(env["MIN_USDC_BALANCE"])
        if env.get("SLIPPAGE_BPS"):
            self.trading.slippage_bps = float(env["SLIPPAGE_BPS"])

        if env.get("PRICE_CACHE_PATH"):
            self.state.price_cache_path = env["PRICE_CACHE_PATH"]
        if env.get("TRADE_LOG_PATH"):
            self.state.trade_log_path = env["TRADE_LOG_PATH"]

        if env.get("POLYMARKET_API_BASE"):
            self.polymarket.api_base = env["POLYMARKET_API_BASE"]
        if env.get("POLYMARKET_CLOB_BASE"):
            self.polymarket.clob_base = env["POLYMARKET_CLOB_BASE"]
        if env.get("POLYMARKET_API_KEY"):
            self.polymarket.api_key = env["POLYMARKET_API_KEY"]
        if env.get("POLYMARKET_API_SECRET"):
            self.polymarket.api_secret = env["POLYMARKET_API_SECRET"]

        if env.get("LOG_LEVEL"):
            self.monitoring.log_level = env["LOG_LEVEL"].upper()

    @property
    def has_venue_credentials(self) -> bool:
        return bool(self.polymarket.api_key and self.polymarket.api_secret)

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """Load config from YAML file."""
        import yaml

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Load config from dictionary."""
        from dataclasses import is_dataclass, fields

        def build(dc_type, data):
            if not is_dataclass(dc_type):
                return data
            kwargs = {}
            for f in fields(dc_type):
                if f.name in data:
                    val = data[f.name]
                    sub_type = f.default_factory if callable(f.default_factory) else None
                    if is_dataclass(sub_type) and isinstance(val, dict):
                        kwargs[f.name] = build(sub_type, val)
                    else:
                        kwargs[f.name] = val
            return dc_type(**kwargs)

        return build(cls, data)

    def validate(self) -> list[str]:
        """
        Validate configuration parameters.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        # Required connection parameters
        if not self.chain.rpc_url:
            errors.append("RPC_URL environment variable required")

        if not self.chain.private_key:
            errors.append("PRIVATE_KEY environment variable required")

        if self.trading.live_mode and not self.has_venue_credentials:
            errors.append("POLYMARKET_API_KEY and POLYMARKET_API_SECRET required for live trading")

        # Validate ranges
        if not (0.0 <= self.trading.max_bet_percent <= 1.0):
            errors.append("trading.max_bet_percent must be in [0, 1]")

        if self.trading.min_usdc_balance < 0:
            errors.append("trading.min_usdc_balance must be >= 0")

        interval = self.schedule.interval_minutes
        if interval <= 0 or 60 % interval != 0:
            errors.append("schedule.interval_minutes must divide 60")
        elif not (0 < self.schedule.trigger_lead_minutes < interval):
            errors.append("schedule.trigger_lead_minutes must be in (0, interval_minutes)")

        if not (0 <= self.schedule.trigger_jitter_sec < 60):
            errors.append("schedule.trigger_jitter_sec must be in [0, 60)")

        if self.history.reference_age_minutes * 60 >= self.history.retention_hours * 3600:
            errors.append("history.reference_age_minutes must be shorter than the retention window")

        return errors
