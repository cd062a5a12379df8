"""Market data: price history cache, on-chain readers, market selection."""
