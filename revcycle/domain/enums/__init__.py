"""Domain enumerations."""

from revcycle.domain.enums.audit import (
    DATA_ACCESS_RESOURCE_TYPES,
    ELEVATED_SEVERITIES,
    SECURITY_EVENT_TYPES,
    AuditEventType,
    AuditResourceType,
    AuditSeverity,
)
from revcycle.domain.enums.security import (
    MaskingLevel,
    PermissionAction,
    PermissionCategory,
    UserRole,
)

__all__ = [
    "DATA_ACCESS_RESOURCE_TYPES",
    "ELEVATED_SEVERITIES",
    "SECURITY_EVENT_TYPES",
    "AuditEventType",
    "AuditResourceType",
    "AuditSeverity",
    "MaskingLevel",
    "PermissionAction",
    "PermissionCategory",
    "UserRole",
]
