"""SQLAlchemy models."""

from revcycle.infrastructure.persistence.sqlalchemy.models.audit_log import AuditLogModel
from revcycle.infrastructure.persistence.sqlalchemy.models.base import Base
from revcycle.infrastructure.persistence.sqlalchemy.models.role import (
    PermissionModel,
    RoleModel,
    role_permissions,
)

__all__ = ["AuditLogModel", "Base", "PermissionModel", "RoleModel", "role_permissions"]
