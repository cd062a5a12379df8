"""
Order Pipeline

Builds the cycle's order, then either simulates it (dry run) or signs it
with the wallet and submits it to the Polymarket CLOB (live).
No retries: a failed submit propagates and the interval is missed.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional, Union

import requests
from eth_account import Account
from eth_account.messages import encode_defunct

from btc15_momentum.core.config import Config
from btc15_momentum.core.errors import ConfigurationError
from btc15_momentum.data.markets import market_id
from btc15_momentum.execution.orders import DryRunResult, OrderPayload
from btc15_momentum.signals.engine import TradeSignal
from btc15_momentum.utils.intervals import as_utc

logger = logging.getLogger(__name__)

OUTCOME_FOR_SIGNAL = {
    TradeSignal.UP: "Yes",
    TradeSignal.DOWN: "No",
}


class WalletSigner:
    """EIP-191 personal-message signer for the trading wallet."""

    def __init__(self, private_key: str):
        self._account = Account.from_key(private_key)

    @property
    def address(self) -> str:
        return self._account.address

    def sign(self, message: str) -> str:
        signed = self._account.sign_message(encode_defunct(text=message))
        return "0x" + bytes(signed.signature).hex()


class ClobOrderSubmitter:
    """POST /orders on the CLOB API."""

    def __init__(self, config: Config, session: Optional[requests.Session] = None):
        self.base_url = config.polymarket.clob_base.rstrip("/")
        self.timeout = config.polymarket.http_timeout_sec
        self.session = session or requests.Session()

    def submit(self, body: str, headers: Dict[str, str]) -> Any:
        """Post the exact bytes that were signed."""
        resp = self.session.post(
            f"{self.base_url}/orders",
            data=body.encode("utf-8"),
            headers={**headers, "Content-Type": "application/json"},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()


class OrderPipeline:
    """
    Order construction and submission.

    Live submission needs venue credentials, a signer and a submitter;
    dry runs need none of them.
    """

    def __init__(
        self,
        config: Config,
        signer: Optional[WalletSigner] = None,
        submitter: Optional[ClobOrderSubmitter] = None,
    ):
        self.config = config
        self.signer = signer
        self.submitter = submitter

    def build(self, market: Dict[str, Any], signal: TradeSignal, size: float, cycle_start: datetime) -> OrderPayload:
        """Deterministic payload for (market, signal, size) at cycle_start."""
        mid = market_id(market)
        if mid is None:
            raise ValueError("market has no id")

        # TODO: confirm pricing with the venue; both outcomes currently buy at the max price.
        return OrderPayload(
            market_id=mid,
            outcome=OUTCOME_FOR_SIGNAL[signal],
            side="buy",
            size=size,
            price=self.config.trading.order_price,
            expiration=int(as_utc(cycle_start).timestamp()) + self.config.trading.order_ttl_sec,
        )

    def submit(self, payload: OrderPayload, live_mode: bool) -> Union[DryRunResult, Any]:
        """
        Submit or simulate an order.

        Returns:
            DryRunResult when not live, otherwise the venue response verbatim

        Raises:
            ConfigurationError: live mode without credentials, signer or submitter
        """
        if not live_mode:
            logger.info(f"[OrderPipeline] Dry run - skipping order placement: {payload.to_dict()}")
            return DryRunResult(payload=payload)

        if not self.config.has_venue_credentials:
            raise ConfigurationError("Missing POLYMARKET_API_KEY or POLYMARKET_API_SECRET for live trading.")
        if self.signer is None or self.submitter is None:
            raise ConfigurationError("Live trading requires a wallet signer and an order submitter.")

        body = payload.canonical()
        signature = self.signer.sign(body)
        headers = {
            "x-api-key": self.config.polymarket.api_key,
            "x-api-secret": self.config.polymarket.api_secret,
            "x-wallet-address": self.signer.address,
            "x-wallet-signature": signature,
        }

        logger.info(f"[OrderPipeline] Submitting {payload.outcome} order on {payload.market_id} size={payload.size}")
        return self.submitter.submit(body, headers)
