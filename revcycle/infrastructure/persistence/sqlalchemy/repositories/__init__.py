"""SQLAlchemy repository implementations."""

from revcycle.infrastructure.persistence.sqlalchemy.repositories.audit_log_repository import (
    SQLAlchemyAuditLogRepository,
)
from revcycle.infrastructure.persistence.sqlalchemy.repositories.role_repository import (
    SQLAlchemyPermissionRepository,
    SQLAlchemyRoleRepository,
)

__all__ = [
    "SQLAlchemyAuditLogRepository",
    "SQLAlchemyPermissionRepository",
    "SQLAlchemyRoleRepository",
]
