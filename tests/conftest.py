"""
Pytest fixtures for the test suite.
"""
import json
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from btc15_momentum.core.config import Config
from btc15_momentum.utils.state_store import StateStore

CONFIG_ENV_VARS = [
    "RPC_URL",
    "PRIVATE_KEY",
    "CHAINLINK_BTC_USD_FEED",
    "USDC_ADDRESS",
    "LIVE_MODE",
    "MAX_BET_PERCENT",
    "MIN_USDC_BALANCE",
    "SLIPPAGE_BPS",
    "PRICE_CACHE_PATH",
    "TRADE_LOG_PATH",
    "POLYMARKET_API_BASE",
    "POLYMARKET_CLOB_BASE",
    "POLYMARKET_API_KEY",
    "POLYMARKET_API_SECRET",
    "LOG_LEVEL",
]

# Throwaway key, never funded.
TEST_PRIVATE_KEY = "0x" + "11" * 32


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of Config()."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config(tmp_path):
    cfg = Config()
    cfg.chain.rpc_url = "http://localhost:8545"
    cfg.chain.private_key = TEST_PRIVATE_KEY
    cfg.state.data_dir = str(tmp_path)
    return cfg


@pytest.fixture
def state_store(tmp_path):
    return StateStore(tmp_path)


@pytest.fixture
def now():
    """A tick inside the 12:15 trigger window."""
    return datetime(2025, 1, 6, 12, 14, 3, tzinfo=timezone.utc)


@pytest.fixture
def sample_market():
    return {
        "id": "btc-updown-15m-1736165700",
        "question": "Bitcoin Up or Down - 12:15 UTC",
        "startDate": "2025-01-06T12:15:00Z",
        "outcomes": ["Yes", "No"],
    }


@pytest.fixture
def mock_signer():
    signer = MagicMock()
    signer.address = "0x19E7E376E7C213B7E7e7e46cc70A5dD086DAff2A"
    signer.sign.return_value = "0xsignature"
    return signer


@pytest.fixture
def mock_submitter():
    submitter = MagicMock()
    submitter.submit.return_value = {"orderID": "abc123", "status": "live"}
    return submitter


def read_jsonl(path):
    """Records of a JSONL file, oldest first."""
    path = Path(path)
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]
