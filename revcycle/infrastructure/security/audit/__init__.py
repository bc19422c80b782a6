"""Security audit trail."""

from revcycle.infrastructure.security.audit.audit_logger import AuditLogger

__all__ = ["AuditLogger"]
