"""In-memory repository implementations."""

from revcycle.infrastructure.persistence.memory.audit_log_repository import (
    InMemoryAuditLogRepository,
)
from revcycle.infrastructure.persistence.memory.role_repository import (
    InMemoryPermissionRepository,
    InMemoryRoleRepository,
)

__all__ = [
    "InMemoryAuditLogRepository",
    "InMemoryPermissionRepository",
    "InMemoryRoleRepository",
]
