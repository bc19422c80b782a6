"""
Role and Permission domain entities.

A permission is named ``CATEGORY:ACTION[:RESOURCE]``. A permission without a
resource qualifier covers every resource in its category and action.
"""

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Permission(BaseModel):
    """A single grant of an action within a category, optionally narrowed to one resource."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    description: str | None = None
    category: str
    action: str
    resource: str | None = None
    is_system: bool = False

    model_config = ConfigDict(from_attributes=True)


class Role(BaseModel):
    """A named set of permissions assigned to users."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    description: str | None = None
    is_system: bool = False
    permissions: list[Permission] = Field(default_factory=list)
    updated_by: str | None = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(from_attributes=True)

    @property
    def permission_names(self) -> list[str]:
        return [permission.name for permission in self.permissions]

    @property
    def can_delete(self) -> bool:
        """System roles are created at bootstrap and cannot be removed."""
        return not self.is_system

    def has_permission(self, permission_name: str) -> bool:
        return permission_name in self.permission_names
