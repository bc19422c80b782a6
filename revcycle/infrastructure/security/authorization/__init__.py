"""Authorization checks and enforcement."""

from revcycle.infrastructure.security.authorization.authorization_manager import (
    AuthorizationManager,
    has_permission,
)
from revcycle.infrastructure.security.rbac.permission_catalog import build_permission_name

__all__ = ["AuthorizationManager", "build_permission_name", "has_permission"]
