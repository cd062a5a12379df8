"""Order Pipeline: payload construction, signing, dry-run/live submission."""

from btc15_momentum.execution.router import OrderPipeline
from btc15_momentum.execution.orders import OrderPayload, DryRunResult

__all__ = ["OrderPipeline", "OrderPayload", "DryRunResult"]
