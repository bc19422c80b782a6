"""
Role-Based Access Control manager.

Answers "does role X hold permission Y" from an in-process cache of roles
(keyed by ID, with permissions loaded) and permissions (keyed by name). Both
caches fill on demand and are dropped together by ``clear_cache``. Each
process has its own cache, so another process will serve its cached copy of a
role until that process clears its cache or restarts.
"""

import asyncio
import logging

from revcycle.core.config.settings import Settings, get_settings
from revcycle.core.exceptions.security_exceptions import RoleNotFoundError
from revcycle.core.interfaces.repositories.role_repository_interface import (
    IPermissionRepository,
    IRoleRepository,
)
from revcycle.domain.entities.role import Permission, Role
from revcycle.domain.entities.user import AuthenticatedUser
from revcycle.domain.enums.security import PermissionAction, PermissionCategory
from revcycle.infrastructure.security.rbac.permission_catalog import (
    DEFAULT_PERMISSIONS,
    DEFAULT_ROLES,
    build_permission_name,
    categories_for_role,
)

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system"


class RBACManager:
    """
    Cached role and permission lookups plus bootstrap of the default roles.

    One instance is created at process start and shared by the
    authorization manager and anything else that checks permissions.
    """

    def __init__(
        self,
        role_repository: IRoleRepository,
        permission_repository: IPermissionRepository,
        settings: Settings | None = None,
    ):
        self._role_repository = role_repository
        self._permission_repository = permission_repository
        self.settings = settings or get_settings()
        self._role_cache: dict[str, Role] = {}
        self._permission_cache: dict[str, Permission] = {}
        self._initialized = False
        self._init_lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """
        Seed the default permissions and roles, then warm the role cache.

        Runs once per manager; later calls return immediately.
        """
        async with self._init_lock:
            if self._initialized:
                return

            await self._seed_defaults()
            self._initialized = True

            for role_name in self.settings.RBAC_WARM_ROLES:
                await self.get_role_by_name(role_name)

            logger.info(
                f"RBAC initialized with {len(self._role_cache)} cached roles "
                f"and {len(self._permission_cache)} cached permissions"
            )

    async def _seed_defaults(self) -> None:
        for permission in DEFAULT_PERMISSIONS:
            if await self._permission_repository.find_by_name(permission.name) is None:
                await self._permission_repository.create(permission)

        for default_role in DEFAULT_ROLES:
            role = await self._role_repository.find_by_name(default_role.name)
            if role is None:
                role = await self._role_repository.create(default_role)
                logger.info(f"Created system role '{role.name}'")

            # Roles that already hold permissions keep them
            existing = await self._role_repository.find_with_permissions(role.id)
            if existing is not None and existing.permissions:
                continue

            defaults = await self.get_default_permissions_for_role(role.name)
            await self.assign_permissions_to_role(
                role.id, [permission.id for permission in defaults], SYSTEM_ACTOR
            )

    async def get_role(self, role_id: str | None) -> Role | None:
        """Return the role with its permissions, from cache when possible; None if unknown."""
        if not role_id:
            return None

        cached = self._role_cache.get(role_id)
        if cached is not None:
            return cached

        role = await self._role_repository.find_with_permissions(role_id)
        if role is None:
            logger.debug(f"Role {role_id} not found")
            return None

        self._role_cache[role_id] = role
        for permission in role.permissions:
            self._permission_cache.setdefault(permission.name, permission)
        return role

    async def get_role_by_name(self, name: str) -> Role | None:
        role = await self._role_repository.find_by_name(name)
        if role is None:
            return None
        return await self.get_role(role.id)

    async def get_permission(self, name: str) -> Permission | None:
        """Return a permission by name, from cache when possible; None if unknown."""
        cached = self._permission_cache.get(name)
        if cached is not None:
            return cached

        permission = await self._permission_repository.find_by_name(name)
        if permission is not None:
            self._permission_cache[name] = permission
        return permission

    async def get_permissions_by_role(self, role_id: str | None) -> list[Permission]:
        role = await self.get_role(role_id)
        return list(role.permissions) if role else []

    async def get_user_permissions(self, user: AuthenticatedUser | None) -> list[str]:
        """Permission names granted to the user's role."""
        if user is None:
            return []
        return [permission.name for permission in await self.get_permissions_by_role(user.role_id)]

    async def check_permission(self, role_id: str | None, permission_name: str) -> bool:
        role = await self.get_role(role_id)
        if role is None:
            return False
        granted = role.has_permission(permission_name)
        logger.debug(f"Role permission check: role={role.name}, permission={permission_name}, result={granted}")
        return granted

    async def check_permission_for_action(
        self,
        role_id: str | None,
        category: str | PermissionCategory,
        action: str | PermissionAction,
        resource: str | None = None,
    ) -> bool:
        """
        Check a role for ``CATEGORY:ACTION[:RESOURCE]``.

        When a resource is given and not granted exactly, the resource-less
        ``CATEGORY:ACTION`` permission is checked instead. There is no other
        fallback.
        """
        if await self.check_permission(role_id, build_permission_name(category, action, resource)):
            return True
        if resource:
            return await self.check_permission(role_id, build_permission_name(category, action))
        return False

    async def assign_permissions_to_role(
        self, role_id: str, permission_ids: list[str], updated_by: str | None
    ) -> Role:
        """
        Replace a role's permissions.

        The role's cache entry is evicted so this process reads the new set on
        its next lookup.

        Raises:
            RoleNotFoundError: If the role does not exist
        """
        role = await self._role_repository.find_by_id(role_id)
        if role is None:
            logger.warning(f"Cannot assign permissions: role {role_id} not found")
            raise RoleNotFoundError(role_id)

        updated = await self._role_repository.set_permissions(role_id, permission_ids, updated_by)
        if updated is None:
            raise RoleNotFoundError(role_id)

        self._role_cache.pop(role_id, None)
        logger.info(
            f"Assigned {len(permission_ids)} permissions to role '{role.name}'",
            extra={"role_id": role_id, "updated_by": updated_by},
        )
        return updated

    async def build_access_control_list(self, user: AuthenticatedUser | None) -> dict[str, bool]:
        """
        Map every permission of the user's role to True.

        Keys are lowercase and slash-joined: ``claims/read`` or
        ``claims/read/claim-123``.
        """
        if user is None:
            return {}

        role = await self.get_role(user.role_id)
        if role is None:
            return {}

        acl: dict[str, bool] = {}
        for permission in role.permissions:
            parts = [permission.category, permission.action]
            if permission.resource:
                parts.append(permission.resource)
            acl["/".join(part.lower() for part in parts)] = True
        return acl

    async def is_system_role(self, role_id: str | None) -> bool:
        role = await self.get_role(role_id)
        return bool(role and role.is_system)

    async def get_default_permissions_for_role(self, role_name: str) -> list[Permission]:
        """Every permission in the categories ``ROLE_PERMISSION_MAP`` gives the role."""
        permissions: list[Permission] = []
        for category in categories_for_role(role_name):
            permissions.extend(await self._permission_repository.find_by_category(category.value))
        return permissions

    def clear_cache(self) -> None:
        self._role_cache.clear()
        self._permission_cache.clear()
        logger.info("RBAC cache cleared")

