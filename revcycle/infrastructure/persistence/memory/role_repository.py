"""
In-memory Role and Permission repositories.

Roles and permissions are kept in dicts; a role's permission set is stored as
an ordered list of permission IDs and resolved on read.
"""

from datetime import datetime, timezone

from revcycle.core.interfaces.repositories.role_repository_interface import (
    IPermissionRepository,
    IRoleRepository,
)
from revcycle.domain.entities.role import Permission, Role


class InMemoryPermissionRepository(IPermissionRepository):
    """Permission repository held in process memory."""

    def __init__(self) -> None:
        self.permissions: dict[str, Permission] = {}

    async def find_by_id(self, permission_id: str) -> Permission | None:
        return self.permissions.get(permission_id)

    async def find_by_name(self, name: str) -> Permission | None:
        return next((p for p in self.permissions.values() if p.name == name), None)

    async def find_by_category(self, category: str) -> list[Permission]:
        category = category.lower()
        return [p for p in self.permissions.values() if p.category.lower() == category]

    async def list_all(self) -> list[Permission]:
        return list(self.permissions.values())

    async def create(self, permission: Permission) -> Permission:
        self.permissions[permission.id] = permission
        return permission


class InMemoryRoleRepository(IRoleRepository):
    """Role repository held in process memory."""

    def __init__(self, permission_repository: InMemoryPermissionRepository) -> None:
        self.permission_repository = permission_repository
        self.roles: dict[str, Role] = {}
        self.role_permissions: dict[str, list[str]] = {}

    async def find_by_id(self, role_id: str) -> Role | None:
        return self.roles.get(role_id)

    async def find_by_name(self, name: str) -> Role | None:
        return next((r for r in self.roles.values() if r.name == name), None)

    async def find_with_permissions(self, role_id: str) -> Role | None:
        role = self.roles.get(role_id)
        if role is None:
            return None

        permissions = []
        for permission_id in self.role_permissions.get(role_id, []):
            permission = await self.permission_repository.find_by_id(permission_id)
            if permission is not None:
                permissions.append(permission)
        return role.model_copy(update={"permissions": permissions})

    async def list_all(self) -> list[Role]:
        return list(self.roles.values())

    async def create(self, role: Role) -> Role:
        self.roles[role.id] = role.model_copy(update={"permissions": []})
        self.role_permissions[role.id] = [p.id for p in role.permissions]
        return role

    async def set_permissions(
        self, role_id: str, permission_ids: list[str], updated_by: str | None = None
    ) -> Role | None:
        role = self.roles.get(role_id)
        if role is None:
            return None

        # Keep first occurrence order, drop duplicates
        self.role_permissions[role_id] = list(dict.fromkeys(permission_ids))
        self.roles[role_id] = role.model_copy(
            update={"updated_by": updated_by, "updated_at": datetime.now(timezone.utc)}
        )
        return await self.find_with_permissions(role_id)
