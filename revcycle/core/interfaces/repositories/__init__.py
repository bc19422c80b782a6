"""Repository interfaces."""

from revcycle.core.interfaces.repositories.audit_log_repository_interface import (
    IAuditLogRepository,
)
from revcycle.core.interfaces.repositories.role_repository_interface import (
    IPermissionRepository,
    IRoleRepository,
)

__all__ = ["IAuditLogRepository", "IPermissionRepository", "IRoleRepository"]
