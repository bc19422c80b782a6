"""
Interfaces for Role and Permission repositories.

The RBAC manager depends only on these abstractions; SQLAlchemy and
in-memory implementations live in the persistence layer.
"""

from abc import ABC, abstractmethod

from revcycle.domain.entities.role import Permission, Role


class IRoleRepository(ABC):
    """Persistence operations for roles and their permission sets."""

    @abstractmethod
    async def find_by_id(self, role_id: str) -> Role | None:
        """Return the role without its permissions, or None."""
        pass

    @abstractmethod
    async def find_by_name(self, name: str) -> Role | None:
        """Return the role with the given name, or None."""
        pass

    @abstractmethod
    async def find_with_permissions(self, role_id: str) -> Role | None:
        """Return the role with its permissions loaded, or None."""
        pass

    @abstractmethod
    async def list_all(self) -> list[Role]:
        pass

    @abstractmethod
    async def create(self, role: Role) -> Role:
        pass

    @abstractmethod
    async def set_permissions(
        self, role_id: str, permission_ids: list[str], updated_by: str | None = None
    ) -> Role | None:
        """
        Replace the role's permission set.

        Args:
            role_id: ID of the role to update
            permission_ids: IDs of the permissions the role will hold
            updated_by: ID of the user making the change

        Returns:
            The updated role with permissions, or None if the role does not exist
        """
        pass


class IPermissionRepository(ABC):
    """Persistence operations for permissions."""

    @abstractmethod
    async def find_by_id(self, permission_id: str) -> Permission | None:
        pass

    @abstractmethod
    async def find_by_name(self, name: str) -> Permission | None:
        pass

    @abstractmethod
    async def find_by_category(self, category: str) -> list[Permission]:
        """Return every permission in a category; ``category`` is matched case-insensitively."""
        pass

    @abstractmethod
    async def list_all(self) -> list[Permission]:
        pass

    @abstractmethod
    async def create(self, permission: Permission) -> Permission:
        pass
