"""
Tests for Config - defaults, environment overrides, YAML loading, validation.
"""
import pytest

from btc15_momentum.core.config import DEFAULT_CHAINLINK_BTC_USD_FEED, Config


class TestDefaults:

    def test_defaults(self):
        config = Config()
        assert config.trading.live_mode is False
        assert config.trading.max_bet_percent == 0.05
        assert config.trading.min_usdc_balance == 10.0
        assert config.trading.slippage_bps == 50.0
        assert config.trading.order_price == 1.0
        assert config.chain.chainlink_feed == DEFAULT_CHAINLINK_BTC_USD_FEED
        assert config.history.retention_hours == 24
        assert config.history.reference_age_minutes == 15
        assert config.schedule.interval_minutes == 15
        assert config.state.price_cache_path == "price_cache.json"
        assert config.state.trade_log_path == "trade_log.jsonl"


class TestEnvOverrides:

    def test_env_values(self, monkeypatch):
        monkeypatch.setenv("RPC_URL", "https://polygon-rpc.com")
        monkeypatch.setenv("PRIVATE_KEY", "0xabc")
        monkeypatch.setenv("LIVE_MODE", "true")
        monkeypatch.setenv("MAX_BET_PERCENT", "0.1")
        monkeypatch.setenv("MIN_USDC_BALANCE", "25")
        monkeypatch.setenv("POLYMARKET_API_KEY", "k")
        monkeypatch.setenv("POLYMARKET_API_SECRET", "s")
        monkeypatch.setenv("TRADE_LOG_PATH", "/var/log/trades.jsonl")

        config = Config()

        assert config.chain.rpc_url == "https://polygon-rpc.com"
        assert config.chain.private_key == "0xabc"
        assert config.trading.live_mode is True
        assert config.trading.max_bet_percent == 0.1
        assert config.trading.min_usdc_balance == 25.0
        assert config.has_venue_credentials
        assert config.state.trade_log_path == "/var/log/trades.jsonl"

    @pytest.mark.parametrize("value", ["false", "1", "yes", ""])
    def test_live_mode_only_on_true(self, monkeypatch, value):
        monkeypatch.setenv("LIVE_MODE", value)
        assert Config().trading.live_mode is False


class TestLoading:

    def test_from_dict(self):
        config = Config.from_dict({
            "trading": {"max_bet_percent": 0.02, "live_mode": True},
            "polymarket": {"market_tag": "BTC", "market_limit": 50},
        })
        assert config.trading.max_bet_percent == 0.02
        assert config.trading.live_mode is True
        assert config.trading.min_usdc_balance == 10.0
        assert config.polymarket.market_limit == 50

    def test_env_wins_over_file(self, monkeypatch, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("trading:\n  max_bet_percent: 0.02\nchain:\n  rpc_url: http://file\n")
        monkeypatch.setenv("RPC_URL", "http://env")

        config = Config.from_yaml(str(path))

        assert config.trading.max_bet_percent == 0.02
        assert config.chain.rpc_url == "http://env"

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert Config.from_yaml(str(path)).trading.max_bet_percent == 0.05


class TestValidate:

    def test_valid(self, config):
        assert config.validate() == []

    def test_missing_connection_parameters(self):
        errors = Config().validate()
        assert any("RPC_URL" in e for e in errors)
        assert any("PRIVATE_KEY" in e for e in errors)

    def test_live_mode_requires_credentials(self, config):
        config.trading.live_mode = True
        assert any("POLYMARKET_API_KEY" in e for e in config.validate())

        config.polymarket.api_key = "k"
        config.polymarket.api_secret = "s"
        assert config.validate() == []

    def test_ranges(self, config):
        config.trading.max_bet_percent = 1.5
        config.schedule.interval_minutes = 7
        errors = config.validate()
        assert any("max_bet_percent" in e for e in errors)
        assert any("interval_minutes" in e for e in errors)
