"""
Audit log domain entities.

Audit entries are append-only: the application creates them and never
updates or deletes them. Retention is enforced outside the application.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from revcycle.domain.enums.audit import AuditEventType, AuditResourceType, AuditSeverity


class RequestContext(BaseModel):
    """Who performed an audited action and from where."""

    user_id: str | None = None
    user_name: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None


class AuditLogEntry(BaseModel):
    """
    Domain entity representing an audit log entry.

    ``metadata``, ``before_state`` and ``after_state`` are stored already
    masked; the audit logger masks them before an entry is persisted.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    user_name: str | None = None
    event_type: AuditEventType
    resource_type: AuditResourceType
    resource_id: str | None = None
    description: str
    ip_address: str | None = None
    user_agent: str | None = None
    severity: AuditSeverity = AuditSeverity.INFO
    metadata: dict[str, Any] | None = None
    before_state: dict[str, Any] | None = None
    after_state: dict[str, Any] | None = None
    correlation_id: str | None = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=False)

    @field_validator("timestamp")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Ensure the timestamp has a timezone."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class AuditLogPage(BaseModel):
    """One page of audit log query results, newest first."""

    data: list[AuditLogEntry]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0
