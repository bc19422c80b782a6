"""
Default roles and permissions.

``ROLE_PERMISSION_MAP`` decides which permission categories each system role
receives when the RBAC tables are first seeded. Every default permission is
resource-less, so it covers every resource in its category and action.
"""

import uuid
from enum import Enum

from revcycle.domain.entities.role import Permission, Role
from revcycle.domain.enums.security import PermissionAction, PermissionCategory, UserRole

# Stable namespace so seeded IDs are identical across processes and databases
_CATALOG_NAMESPACE = uuid.UUID("5b0c8e4e-8f6a-4a57-9d0b-2f1e6f7d3a10")


def _token(value: str | Enum) -> str:
    return str(value.value if isinstance(value, Enum) else value)


def build_permission_name(
    category: str | PermissionCategory,
    action: str | PermissionAction,
    resource: str | None = None,
) -> str:
    """
    Format a permission name as ``CATEGORY:ACTION[:RESOURCE]``, uppercased.

    >>> build_permission_name(PermissionCategory.CLAIMS, PermissionAction.READ, "claim-123")
    'CLAIMS:READ:CLAIM-123'
    """
    name = f"{_token(category).upper()}:{_token(action).upper()}"
    if resource:
        name = f"{name}:{_token(resource).upper()}"
    return name


ROLE_PERMISSION_MAP: dict[UserRole, tuple[PermissionCategory, ...]] = {
    UserRole.ADMINISTRATOR: tuple(PermissionCategory),
    UserRole.FINANCIAL_MANAGER: (
        PermissionCategory.CLIENTS,
        PermissionCategory.SERVICES,
        PermissionCategory.CLAIMS,
        PermissionCategory.BILLING,
        PermissionCategory.PAYMENTS,
        PermissionCategory.REPORTS,
        PermissionCategory.SETTINGS,
    ),
    UserRole.BILLING_SPECIALIST: (
        PermissionCategory.CLIENTS,
        PermissionCategory.SERVICES,
        PermissionCategory.CLAIMS,
        PermissionCategory.BILLING,
        PermissionCategory.PAYMENTS,
        PermissionCategory.REPORTS,
    ),
    UserRole.PROGRAM_MANAGER: (
        PermissionCategory.CLIENTS,
        PermissionCategory.SERVICES,
        PermissionCategory.REPORTS,
    ),
    UserRole.READ_ONLY: (
        PermissionCategory.CLIENTS,
        PermissionCategory.SERVICES,
        PermissionCategory.CLAIMS,
        PermissionCategory.BILLING,
        PermissionCategory.PAYMENTS,
        PermissionCategory.REPORTS,
    ),
}

_A = PermissionAction

CATEGORY_ACTIONS: dict[PermissionCategory, tuple[PermissionAction, ...]] = {
    PermissionCategory.USERS: (_A.VIEW, _A.READ, _A.CREATE, _A.UPDATE, _A.DELETE, _A.MANAGE),
    PermissionCategory.CLIENTS: (
        _A.VIEW, _A.READ, _A.CREATE, _A.UPDATE, _A.DELETE, _A.EXPORT, _A.IMPORT,
    ),
    PermissionCategory.SERVICES: (
        _A.VIEW, _A.READ, _A.CREATE, _A.UPDATE, _A.DELETE, _A.EXPORT, _A.IMPORT,
    ),
    PermissionCategory.CLAIMS: (
        _A.VIEW, _A.READ, _A.CREATE, _A.UPDATE, _A.DELETE, _A.SUBMIT, _A.EXPORT,
    ),
    PermissionCategory.BILLING: (_A.VIEW, _A.READ, _A.CREATE, _A.UPDATE, _A.SUBMIT, _A.EXPORT),
    PermissionCategory.PAYMENTS: (_A.VIEW, _A.READ, _A.CREATE, _A.UPDATE, _A.APPROVE, _A.EXPORT),
    PermissionCategory.REPORTS: (_A.VIEW, _A.READ, _A.CREATE, _A.EXPORT, _A.MANAGE),
    PermissionCategory.SETTINGS: (_A.VIEW, _A.READ, _A.UPDATE, _A.MANAGE),
    PermissionCategory.SYSTEM: (_A.VIEW, _A.READ, _A.UPDATE, _A.MANAGE),
}

ROLE_DESCRIPTIONS: dict[UserRole, str] = {
    UserRole.ADMINISTRATOR: "Full access to every area of the system",
    UserRole.FINANCIAL_MANAGER: "Manages financial operations, reporting and settings",
    UserRole.BILLING_SPECIALIST: "Prepares and submits claims and posts payments",
    UserRole.PROGRAM_MANAGER: "Oversees clients and services for a program",
    UserRole.READ_ONLY: "Views financial and client data without changing it",
}


def _permission(category: PermissionCategory, action: PermissionAction) -> Permission:
    name = build_permission_name(category, action)
    return Permission(
        id=str(uuid.uuid5(_CATALOG_NAMESPACE, name)),
        name=name,
        description=f"{action.value.capitalize()} {category.value}",
        category=category.value,
        action=action.value,
        resource=None,
        is_system=True,
    )


DEFAULT_PERMISSIONS: tuple[Permission, ...] = tuple(
    _permission(category, action)
    for category, actions in CATEGORY_ACTIONS.items()
    for action in actions
)

DEFAULT_ROLES: tuple[Role, ...] = tuple(
    Role(
        id=str(uuid.uuid5(_CATALOG_NAMESPACE, f"role:{role.value}")),
        name=role.value,
        description=ROLE_DESCRIPTIONS[role],
        is_system=True,
    )
    for role in UserRole
)


def categories_for_role(role_name: str | UserRole) -> tuple[PermissionCategory, ...]:
    """Default categories of a role; empty for names outside the system roles."""
    try:
        return ROLE_PERMISSION_MAP[UserRole(_token(role_name))]
    except ValueError:
        return ()
