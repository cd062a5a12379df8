"""
Main entry point for the BTC 15-minute momentum trader.

Orchestrates: Scheduler → Price history → Signal → Allocation → Market → Order.
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from btc15_momentum.core.config import Config
from btc15_momentum.core.outcomes import CycleFailed, CycleSkipped, CycleSubmitted, SkipReason
from btc15_momentum.core.scheduler import IntervalScheduler
from btc15_momentum.data.markets import MarketSelector, market_id
from btc15_momentum.data.price_history import PriceHistoryStore
from btc15_momentum.execution.router import OrderPipeline
from btc15_momentum.monitoring.audit import AuditLog
from btc15_momentum.risk.engine import AllocationPolicy
from btc15_momentum.signals.engine import compute_signal
from btc15_momentum.utils.intervals import HOUR_MS, MINUTE_MS, as_utc, to_epoch_ms, utc_now
from btc15_momentum.utils.state_store import StateStore

logger = logging.getLogger(__name__)


class MomentumTrader:
    """
    Main orchestrator.

    Collaborators are injected so the cycle can run against doubles:
    feed.get_current_price(), balances.get_balance(account),
    markets.list_active_markets(), and an OrderPipeline.
    """

    def __init__(
        self,
        config: Config,
        feed,
        balances,
        markets,
        pipeline: OrderPipeline,
        wallet_address: str,
        state_store: Optional[StateStore] = None,
    ):
        self.config = config
        self.feed = feed
        self.balances = balances
        self.markets = markets
        self.pipeline = pipeline
        self.wallet_address = wallet_address

        self.state_store = state_store or StateStore(config.state.data_dir)
        self.audit = AuditLog(self.state_store, config.state.trade_log_path)
        self.history_store = PriceHistoryStore(
            self.state_store,
            config.state.price_cache_path,
            retention_ms=config.history.retention_hours * HOUR_MS,
            audit=self.audit,
        )
        self.allocation = AllocationPolicy(config)
        self.selector = MarketSelector(
            interval_minutes=config.schedule.interval_minutes,
            window_sec=config.schedule.market_window_sec,
        )
        self.scheduler = IntervalScheduler(config, self.run_cycle)

    def run_cycle(self, now: Optional[datetime] = None):
        """
        Execute one trading cycle and write its audit record.

        Returns:
            CycleSkipped or CycleSubmitted

        Raises:
            Whatever a collaborator raised, after recording a CycleFailed
        """
        now = as_utc(now) if now is not None else utc_now()
        try:
            outcome = self._trade(now)
        except Exception as e:
            self._audit_outcome(CycleFailed.from_exception(e), level=logging.ERROR)
            raise
        self._audit_outcome(outcome)
        return outcome

    def _trade(self, now: datetime):
        now_ms = to_epoch_ms(now)

        history = self.history_store.load()
        current_price = self.feed.get_current_price()
        past = self.history_store.find_approx(
            history, self.config.history.reference_age_minutes * MINUTE_MS, now_ms=now_ms
        )
        self.history_store.record(history, current_price, now_ms=now_ms)

        if past is None:
            return CycleSkipped(SkipReason.INSUFFICIENT_HISTORY, {"currentPrice": current_price})

        signal = compute_signal(current_price, past)
        # compute_signal only abstains without a reference, which is handled above.
        if signal is None:
            return CycleSkipped(SkipReason.NO_SIGNAL, {"currentPrice": current_price})

        balance = self.balances.get_balance(self.wallet_address)
        if not self.allocation.meets_minimum(balance):
            return CycleSkipped(SkipReason.BALANCE_BELOW_MINIMUM, {"balance": balance})

        allocation = self.allocation.compute_allocation(balance)
        if allocation <= 0:
            return CycleSkipped(SkipReason.ZERO_ALLOCATION, {"balance": balance})

        market = self.selector.select(self.markets.list_active_markets(), now)
        if market is None:
            return CycleSkipped(SkipReason.NO_MATCHING_MARKET, {"signal": signal.value})

        mid = market_id(market)
        logger.info(
            f"[Cycle] Placing order: market={mid} signal={signal.value} "
            f"allocation={allocation:.2f} price={current_price} past={past.price}"
        )

        payload = self.pipeline.build(market, signal, allocation, now)
        result = self.pipeline.submit(payload, self.config.trading.live_mode)

        return CycleSubmitted(
            signal=signal.value,
            market_id=mid,
            allocation=allocation,
            result=result,
            details={"currentPrice": current_price, "pastPrice": past.price},
        )

    def _audit_outcome(self, outcome, level: int = logging.INFO):
        self.audit.record(outcome.message, level=level, **outcome.to_record())

    def run(self):
        """Run the trading system (blocks indefinitely)."""
        self.audit.record(
            "Scheduler started.",
            liveMode=self.config.trading.live_mode,
            wallet=self.wallet_address,
        )
        try:
            self.scheduler.run_forever()
        except KeyboardInterrupt:
            logger.info("[Main] Shutdown signal received")
            self.scheduler.stop()


def build_trader(config: Config) -> MomentumTrader:
    """Wire the live collaborators (web3, eth_account, requests)."""
    from btc15_momentum.data.chain import ChainlinkFeedReader, UsdcBalanceReader, connect
    from btc15_momentum.data.markets import GammaMarketLister
    from btc15_momentum.execution.router import ClobOrderSubmitter, WalletSigner

    w3 = connect(config)
    signer = WalletSigner(config.chain.private_key)

    return MomentumTrader(
        config,
        feed=ChainlinkFeedReader(w3, config.chain.chainlink_feed),
        balances=UsdcBalanceReader(w3, config.chain.usdc_address),
        markets=GammaMarketLister(config),
        pipeline=OrderPipeline(config, signer=signer, submitter=ClobOrderSubmitter(config)),
        wallet_address=signer.address,
    )


def setup_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="BTC 15-minute momentum trader")
    parser.add_argument("--config", type=str, default="", help="Path to YAML config file")
    parser.add_argument("--dry-run", action="store_true", help="Never submit orders, even if LIVE_MODE=true")
    parser.add_argument("--once", action="store_true", help="Run a single trading cycle now and exit")
    args = parser.parse_args(argv)

    # Load .env if present (before Config)
    load_dotenv(dotenv_path=Path.cwd() / ".env")

    if args.config:
        config = Config.from_yaml(args.config)
    else:
        config = Config()

    if args.dry_run:
        config.trading.live_mode = False

    setup_logging(config.monitoring.log_level)

    errors = config.validate()
    if errors:
        logger.error("[Main] Configuration validation failed:")
        for err in errors:
            logger.error(f"  - {err}")
        sys.exit(1)

    trader = build_trader(config)
    logger.info(f"[Main] Wallet {trader.wallet_address} live_mode={config.trading.live_mode}")

    if args.once:
        outcome = trader.run_cycle()
        logger.info(f"[Main] Cycle outcome: {outcome.status}")
        return

    trader.run()


if __name__ == "__main__":
    main()
