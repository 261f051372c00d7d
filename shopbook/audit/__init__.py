"""Audit logging package."""

from shopbook.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
