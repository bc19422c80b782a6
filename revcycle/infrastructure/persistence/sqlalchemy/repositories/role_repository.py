"""
SQLAlchemy repositories for roles and permissions.

These repositories back the RBAC manager. Role lookups load permissions only
when asked to through ``find_with_permissions``.
"""

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from revcycle.core.interfaces.repositories.role_repository_interface import (
    IPermissionRepository,
    IRoleRepository,
)
from revcycle.domain.entities.role import Permission, Role
from revcycle.infrastructure.persistence.sqlalchemy.models.role import (
    PermissionModel,
    RoleModel,
    role_permissions,
)


def _to_permission(model: PermissionModel) -> Permission:
    return Permission(
        id=model.id,
        name=model.name,
        description=model.description,
        category=model.category,
        action=model.action,
        resource=model.resource,
        is_system=model.is_system,
    )


def _to_role(model: RoleModel, permissions: list[PermissionModel] | None = None) -> Role:
    return Role(
        id=model.id,
        name=model.name,
        description=model.description,
        is_system=model.is_system,
        updated_by=model.updated_by,
        updated_at=model.updated_at,
        permissions=[_to_permission(p) for p in permissions or []],
    )


class SQLAlchemyPermissionRepository(IPermissionRepository):
    """Permission persistence using an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_by_id(self, permission_id: str) -> Permission | None:
        model = await self._session.get(PermissionModel, permission_id)
        return _to_permission(model) if model else None

    async def find_by_name(self, name: str) -> Permission | None:
        result = await self._session.execute(
            select(PermissionModel).where(PermissionModel.name == name)
        )
        model = result.scalars().first()
        return _to_permission(model) if model else None

    async def find_by_category(self, category: str) -> list[Permission]:
        result = await self._session.execute(
            select(PermissionModel)
            .where(PermissionModel.category == category.lower())
            .order_by(PermissionModel.name)
        )
        return [_to_permission(model) for model in result.scalars().all()]

    async def list_all(self) -> list[Permission]:
        result = await self._session.execute(select(PermissionModel).order_by(PermissionModel.name))
        return [_to_permission(model) for model in result.scalars().all()]

    async def create(self, permission: Permission) -> Permission:
        model = PermissionModel(
            id=permission.id,
            name=permission.name,
            description=permission.description,
            category=permission.category.lower(),
            action=permission.action,
            resource=permission.resource,
            is_system=permission.is_system,
        )
        self._session.add(model)
        await self._session.commit()
        return _to_permission(model)


class SQLAlchemyRoleRepository(IRoleRepository):
    """Role persistence using an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_by_id(self, role_id: str) -> Role | None:
        model = await self._session.get(RoleModel, role_id)
        return _to_role(model) if model else None

    async def find_by_name(self, name: str) -> Role | None:
        result = await self._session.execute(select(RoleModel).where(RoleModel.name == name))
        model = result.scalars().first()
        return _to_role(model) if model else None

    async def find_with_permissions(self, role_id: str) -> Role | None:
        query = (
            select(RoleModel)
            .where(RoleModel.id == role_id)
            .options(selectinload(RoleModel.permissions))
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(query)
        model = result.scalars().first()
        return _to_role(model, model.permissions) if model else None

    async def list_all(self) -> list[Role]:
        result = await self._session.execute(select(RoleModel).order_by(RoleModel.name))
        return [_to_role(model) for model in result.scalars().all()]

    async def create(self, role: Role) -> Role:
        model = RoleModel(
            id=role.id,
            name=role.name,
            description=role.description,
            is_system=role.is_system,
            updated_by=role.updated_by,
        )
        self._session.add(model)
        await self._session.flush()
        if role.permissions:
            await self._insert_permissions(role.id, [p.id for p in role.permissions])
        await self._session.commit()
        return await self.find_with_permissions(role.id)

    async def set_permissions(
        self, role_id: str, permission_ids: list[str], updated_by: str | None = None
    ) -> Role | None:
        model = await self._session.get(RoleModel, role_id)
        if model is None:
            return None

        await self._session.execute(
            delete(role_permissions).where(role_permissions.c.role_id == role_id)
        )
        await self._insert_permissions(role_id, permission_ids)
        model.updated_by = updated_by
        await self._session.commit()

        return await self.find_with_permissions(role_id)

    async def _insert_permissions(self, role_id: str, permission_ids: list[str]) -> None:
        # Keep first occurrence order, drop duplicates
        unique_ids = list(dict.fromkeys(permission_ids))
        if not unique_ids:
            return
        await self._session.execute(
            insert(role_permissions),
            [
                {"role_id": role_id, "permission_id": permission_id, "position": position}
                for position, permission_id in enumerate(unique_ids)
            ],
        )
