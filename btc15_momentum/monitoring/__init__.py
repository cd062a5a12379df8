"""Monitoring: append-only audit log."""

from btc15_momentum.monitoring.audit import AuditLog

__all__ = ["AuditLog"]
