"""
Authorization checks for authenticated users.

Combines the user's flattened permission list, role-based checks from the
RBAC manager, administrator override and resource ownership. Every ``check``
has an ``enforce`` counterpart that raises ``PermissionDeniedError`` instead
of returning False.
"""

import logging

from revcycle.core.exceptions.security_exceptions import PermissionDeniedError
from revcycle.domain.entities.user import AuthenticatedUser
from revcycle.domain.enums.security import PermissionAction, PermissionCategory, UserRole
from revcycle.infrastructure.security.rbac.permission_catalog import build_permission_name
from revcycle.infrastructure.security.rbac.rbac_manager import RBACManager

logger = logging.getLogger(__name__)

WILDCARD = "*"


def has_permission(user: AuthenticatedUser | None, permission_name: str) -> bool:
    """
    Check the user's own permission list.

    ``CATEGORY:*`` grants everything in a category and ``*:*`` grants
    everything.
    """
    if user is None or not user.permissions:
        return False

    granted = set(user.permissions)
    if permission_name in granted:
        logger.debug(f"User {user.id} has permission {permission_name}")
        return True

    category = permission_name.split(":", 1)[0]
    if f"{category}:{WILDCARD}" in granted or f"{WILDCARD}:{WILDCARD}" in granted:
        logger.debug(f"User {user.id} has wildcard permission for {permission_name}")
        return True

    return False


class AuthorizationManager:
    """Permission checks and enforcement built on an ``RBACManager``."""

    def __init__(self, rbac_manager: RBACManager):
        self.rbac = rbac_manager

    def has_permission(self, user: AuthenticatedUser | None, permission_name: str) -> bool:
        return has_permission(user, permission_name)

    async def has_permission_for_action(
        self,
        user: AuthenticatedUser | None,
        category: str | PermissionCategory,
        action: str | PermissionAction,
        resource: str | None = None,
    ) -> bool:
        """
        Check an action against the user's permission list, then the user's role.

        The permission list is checked for ``CATEGORY:ACTION[:RESOURCE]`` and,
        when a resource is given, for ``CATEGORY:ACTION``. If neither is
        present the role-based check decides.
        """
        if user is None:
            return False

        if has_permission(user, build_permission_name(category, action, resource)):
            return True
        if resource and has_permission(user, build_permission_name(category, action)):
            return True

        return await self.rbac.check_permission_for_action(user.role_id, category, action, resource)

    async def is_administrator(self, user: AuthenticatedUser | None) -> bool:
        if user is None:
            return False
        role = await self.rbac.get_role(user.role_id)
        return bool(role and role.name == UserRole.ADMINISTRATOR.value)

    async def can_access_resource(
        self,
        user: AuthenticatedUser | None,
        category: str | PermissionCategory,
        action: str | PermissionAction,
        resource_id: str,
        owner_id: str | None = None,
    ) -> bool:
        """
        Check access to one resource.

        Administrators and the resource's owner are always allowed; anyone
        else needs the action permission for that resource.
        """
        if user is None:
            return False
        if await self.is_administrator(user):
            return True
        if owner_id is not None and owner_id == user.id:
            return True
        return await self.has_permission_for_action(user, category, action, resource_id)

    def enforce_permission(
        self,
        user: AuthenticatedUser | None,
        permission_name: str,
        error_message: str | None = None,
    ) -> None:
        message = error_message or f"Missing required permission: {permission_name}"
        if not has_permission(user, permission_name):
            self._deny(user, message, permission=permission_name)
            raise PermissionDeniedError.insufficient_permissions(
                message, [permission_name], user_id=user.id if user else None
            )
        self._grant(user, permission=permission_name)

    async def enforce_permission_for_action(
        self,
        user: AuthenticatedUser | None,
        category: str | PermissionCategory,
        action: str | PermissionAction,
        resource: str | None = None,
        error_message: str | None = None,
    ) -> None:
        permission_name = build_permission_name(category, action, resource)
        message = error_message or f"Missing required permission: {permission_name}"
        if not await self.has_permission_for_action(user, category, action, resource):
            self._deny(user, message, permission=permission_name)
            raise PermissionDeniedError.insufficient_permissions(
                message, [permission_name], user_id=user.id if user else None
            )
        self._grant(user, permission=permission_name)

    async def enforce_resource_access(
        self,
        user: AuthenticatedUser | None,
        category: str | PermissionCategory,
        action: str | PermissionAction,
        resource_id: str,
        owner_id: str | None = None,
        resource_type: str | None = None,
        error_message: str | None = None,
    ) -> None:
        resource_type = resource_type or build_permission_name(category, action).split(":", 1)[0]
        message = error_message or f"Access denied to {resource_type.lower()} {resource_id}"
        if not await self.can_access_resource(user, category, action, resource_id, owner_id):
            self._deny(user, message, resource_type=resource_type, resource_id=resource_id)
            raise PermissionDeniedError.resource_access_denied(
                message, resource_type, resource_id, user_id=user.id if user else None
            )
        self._grant(user, resource_type=resource_type, resource_id=resource_id)

    async def enforce_administrator(
        self, user: AuthenticatedUser | None, error_message: str | None = None
    ) -> None:
        message = error_message or "Administrator role required"
        if not await self.is_administrator(user):
            self._deny(user, message, role=UserRole.ADMINISTRATOR.value)
            raise PermissionDeniedError.role_required(
                message, [UserRole.ADMINISTRATOR.value], user_id=user.id if user else None
            )
        self._grant(user, role=UserRole.ADMINISTRATOR.value)

    def _deny(self, user: AuthenticatedUser | None, message: str, **context: str) -> None:
        logger.warning(
            f"Authorization denied: {message}",
            extra={"user_id": user.id if user else None, **context},
        )

    def _grant(self, user: AuthenticatedUser | None, **context: str) -> None:
        logger.info(
            "Authorization granted",
            extra={"user_id": user.id if user else None, **context},
        )
