"""Domain entities."""

from revcycle.domain.entities.audit_log import AuditLogEntry, AuditLogPage, RequestContext
from revcycle.domain.entities.role import Permission, Role
from revcycle.domain.entities.user import AuthenticatedUser

__all__ = [
    "AuditLogEntry",
    "AuditLogPage",
    "AuthenticatedUser",
    "Permission",
    "RequestContext",
    "Role",
]
