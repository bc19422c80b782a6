"""
Audit logging for security-relevant events.

Each event becomes an ``AuditLogEntry`` whose metadata and state snapshots
are masked, then persisted through the audit log repository and written as
one JSON line to the dedicated audit file logger.

The four ``log_*`` entry points never raise. If an entry cannot be written,
the failure is logged and the audited operation carries on without its
audit record.
"""

import json
import logging
from datetime import datetime
from typing import Any

from revcycle.core.config.settings import Settings, get_settings
from revcycle.core.exceptions.security_exceptions import AuditLogError
from revcycle.core.interfaces.repositories.audit_log_repository_interface import (
    IAuditLogRepository,
)
from revcycle.domain.entities.audit_log import AuditLogEntry, AuditLogPage, RequestContext
from revcycle.domain.enums.audit import (
    DATA_ACCESS_RESOURCE_TYPES,
    ELEVATED_SEVERITIES,
    SECURITY_EVENT_TYPES,
    AuditEventType,
    AuditResourceType,
    AuditSeverity,
)
from revcycle.infrastructure.logging.context import get_correlation_id
from revcycle.infrastructure.logging.logger import get_audit_file_logger
from revcycle.infrastructure.security.masking.data_masking import DataMasker

logger = logging.getLogger(__name__)


class AuditLogger:
    """
    Writes and queries the audit trail.

    Args:
        repository: Where audit entries are persisted
        masker: Masks metadata and state snapshots before they are stored
        settings: Application settings
        audit_file_logger: The dedicated audit trail logger; built from
            settings when omitted
    """

    def __init__(
        self,
        repository: IAuditLogRepository,
        masker: DataMasker,
        settings: Settings | None = None,
        audit_file_logger: logging.Logger | None = None,
    ):
        self.repository = repository
        self.masker = masker
        self.settings = settings or get_settings()
        self.audit_file_logger = audit_file_logger or get_audit_file_logger(self.settings)

    async def log_user_activity(
        self,
        event_type: AuditEventType,
        description: str,
        metadata: dict[str, Any] | None = None,
        context: RequestContext | None = None,
    ) -> AuditLogEntry | None:
        """Record a login, logout, password change or similar action of a user."""
        context = context or RequestContext()
        severity = (
            AuditSeverity.WARNING
            if event_type == AuditEventType.FAILED_LOGIN
            else AuditSeverity.INFO
        )
        return await self._safe_create(
            AuditLogEntry(
                user_id=context.user_id,
                user_name=context.user_name,
                event_type=event_type,
                resource_type=AuditResourceType.USER,
                resource_id=context.user_id,
                description=description,
                ip_address=context.ip_address,
                user_agent=context.user_agent,
                severity=severity,
                metadata=metadata,
            ),
            "user activity",
        )

    async def log_data_access(
        self,
        resource_type: AuditResourceType,
        resource_id: str | None,
        description: str,
        metadata: dict[str, Any] | None = None,
        context: RequestContext | None = None,
    ) -> AuditLogEntry | None:
        """Record a read of a resource."""
        context = context or RequestContext()
        return await self._safe_create(
            AuditLogEntry(
                user_id=context.user_id,
                user_name=context.user_name,
                event_type=AuditEventType.READ,
                resource_type=resource_type,
                resource_id=resource_id,
                description=description,
                ip_address=context.ip_address,
                user_agent=context.user_agent,
                severity=AuditSeverity.INFO,
                metadata=metadata,
            ),
            "data access",
        )

    async def log_data_change(
        self,
        event_type: AuditEventType,
        resource_type: AuditResourceType,
        resource_id: str | None,
        description: str,
        before_state: dict[str, Any] | None = None,
        after_state: dict[str, Any] | None = None,
        metadata: dict[str, Any] | None = None,
        context: RequestContext | None = None,
    ) -> AuditLogEntry | None:
        """Record a create, update or delete, with the resource's state before and after."""
        context = context or RequestContext()
        severity = (
            AuditSeverity.WARNING if event_type == AuditEventType.DELETE else AuditSeverity.INFO
        )
        return await self._safe_create(
            AuditLogEntry(
                user_id=context.user_id,
                user_name=context.user_name,
                event_type=event_type,
                resource_type=resource_type,
                resource_id=resource_id,
                description=description,
                ip_address=context.ip_address,
                user_agent=context.user_agent,
                severity=severity,
                metadata=metadata,
                before_state=before_state,
                after_state=after_state,
            ),
            "data change",
        )

    async def log_security_event(
        self,
        event_type: AuditEventType,
        description: str,
        severity: AuditSeverity = AuditSeverity.WARNING,
        metadata: dict[str, Any] | None = None,
        context: RequestContext | None = None,
    ) -> AuditLogEntry | None:
        """Record a system-level security event."""
        context = context or RequestContext()
        return await self._safe_create(
            AuditLogEntry(
                user_id=context.user_id,
                user_name=context.user_name,
                event_type=event_type,
                resource_type=AuditResourceType.SYSTEM,
                resource_id=None,
                description=description,
                ip_address=context.ip_address,
                user_agent=context.user_agent,
                severity=severity,
                metadata=metadata,
            ),
            "security event",
        )

    async def _safe_create(self, entry: AuditLogEntry, kind: str) -> AuditLogEntry | None:
        try:
            return await self.create_audit_log_entry(entry)
        except Exception as e:
            logger.error(
                f"Failed to write {kind} audit log: {str(e)}",
                extra={"event_type": entry.event_type.value, "resource_type": entry.resource_type.value},
            )
            return None

    def _mask(self, value: dict[str, Any] | None) -> dict[str, Any] | None:
        return self.masker.mask_data(value) if value is not None else None

    async def create_audit_log_entry(self, entry: AuditLogEntry) -> AuditLogEntry:
        """
        Mask, persist and file-log an entry.

        Snapshots are reduced to JSON-native values (datetimes become ISO
        strings) before they are stored.

        Raises:
            Exception: Whatever the repository or file logger raised
        """
        masked = entry.model_copy(
            update={
                "metadata": self._mask(entry.metadata),
                "before_state": self._mask(entry.before_state),
                "after_state": self._mask(entry.after_state),
                "correlation_id": entry.correlation_id or get_correlation_id(),
            }
        )
        masked = masked.model_copy(
            update=masked.model_dump(
                mode="json", include={"metadata", "before_state", "after_state"}
            )
        )

        await self.repository.create(masked)
        self.audit_file_logger.info(json.dumps(masked.model_dump(mode="json"), default=str))
        return masked

    async def get_audit_logs_by_filter(
        self,
        filters: dict[str, Any] | None = None,
        page: int = 1,
        limit: int | None = None,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
    ) -> AuditLogPage:
        """
        Query the audit trail, newest first.

        ``page`` is at least 1 and ``limit`` is clamped to the configured
        maximum page size.

        Raises:
            AuditLogError: If the repository query fails
        """
        page = max(1, page)
        if limit is None:
            limit = self.settings.AUDIT_QUERY_DEFAULT_LIMIT
        limit = min(max(1, limit), self.settings.AUDIT_QUERY_MAX_LIMIT)
        offset = (page - 1) * limit

        try:
            data = await self.repository.search(filters, start_time, end_time, limit, offset)
            total = await self.repository.count(filters, start_time, end_time)
        except Exception as e:
            logger.error(f"Failed to query audit logs: {str(e)}")
            raise AuditLogError("Failed to query audit logs") from e

        return AuditLogPage(data=data, total=total, page=page, limit=limit)

    async def get_security_audit_logs(
        self,
        event_types: list[AuditEventType] | None = None,
        severities: list[AuditSeverity] | None = None,
        page: int = 1,
        limit: int | None = None,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
    ) -> AuditLogPage:
        """Authentication events at warning severity or above, unless overridden."""
        filters = {
            "event_type": list(event_types or SECURITY_EVENT_TYPES),
            "severity": list(severities or ELEVATED_SEVERITIES),
        }
        return await self.get_audit_logs_by_filter(filters, page, limit, start_time, end_time)

    async def get_data_access_audit_logs(
        self,
        resource_types: list[AuditResourceType] | None = None,
        user_id: str | None = None,
        page: int = 1,
        limit: int | None = None,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
    ) -> AuditLogPage:
        """Reads of client, service, claim, payment, authorization and document records."""
        filters: dict[str, Any] = {
            "event_type": AuditEventType.READ,
            "resource_type": list(resource_types or DATA_ACCESS_RESOURCE_TYPES),
        }
        if user_id:
            filters["user_id"] = user_id
        return await self.get_audit_logs_by_filter(filters, page, limit, start_time, end_time)
