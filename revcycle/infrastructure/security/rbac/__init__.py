"""Role-based access control."""

from revcycle.infrastructure.security.rbac.permission_catalog import (
    DEFAULT_PERMISSIONS,
    DEFAULT_ROLES,
    ROLE_PERMISSION_MAP,
    build_permission_name,
)
from revcycle.infrastructure.security.rbac.rbac_manager import RBACManager

__all__ = [
    "DEFAULT_PERMISSIONS",
    "DEFAULT_ROLES",
    "ROLE_PERMISSION_MAP",
    "RBACManager",
    "build_permission_name",
]
