"""
Authenticated user entity.

Built by the authentication layer for the lifetime of one request and never
persisted by the security layer.
"""

from pydantic import BaseModel, ConfigDict, Field


class AuthenticatedUser(BaseModel):
    """The caller of the current request, with its role and flattened permission names."""

    id: str
    role_id: str | None = None
    role: str | None = None
    permissions: list[str] = Field(default_factory=list)
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def full_name(self) -> str | None:
        parts = [part for part in (self.first_name, self.last_name) if part]
        return " ".join(parts) or None
