"""
Repository for audit logs.

This repository handles database operations for audit logs, providing a clean
abstraction over the persistence layer for the audit logging system.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import and_, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from revcycle.core.interfaces.repositories.audit_log_repository_interface import (
    IAuditLogRepository,
)
from revcycle.domain.entities.audit_log import AuditLogEntry
from revcycle.domain.enums.audit import AuditEventType, AuditResourceType, AuditSeverity
from revcycle.infrastructure.persistence.sqlalchemy.models.audit_log import AuditLogModel

_FILTER_COLUMNS = {
    "event_type": AuditLogModel.event_type,
    "resource_type": AuditLogModel.resource_type,
    "resource_id": AuditLogModel.resource_id,
    "user_id": AuditLogModel.user_id,
    "severity": AuditLogModel.severity,
    "ip_address": AuditLogModel.ip_address,
    "correlation_id": AuditLogModel.correlation_id,
}


def _column_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _to_entity(model: AuditLogModel) -> AuditLogEntry:
    return AuditLogEntry(
        id=model.id,
        timestamp=model.timestamp,
        user_id=model.user_id,
        user_name=model.user_name,
        event_type=AuditEventType(model.event_type),
        resource_type=AuditResourceType(model.resource_type),
        resource_id=model.resource_id,
        description=model.description,
        ip_address=model.ip_address,
        user_agent=model.user_agent,
        severity=AuditSeverity(model.severity),
        metadata=model.metadata_,
        before_state=model.before_state,
        after_state=model.after_state,
        correlation_id=model.correlation_id,
    )


class SQLAlchemyAuditLogRepository(IAuditLogRepository):
    """
    Audit log persistence using an async SQLAlchemy session.

    Filter keys outside the indexed audit columns are ignored.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize the audit log repository with a database session.

        Args:
            session: SQLAlchemy async session for database operations
        """
        self._session = session

    async def create(self, entry: AuditLogEntry) -> str:
        """
        Insert an entry.

        On failure the session is rolled back before the error is re-raised,
        so other repositories sharing the session can keep using it.
        """
        # JSON columns only accept JSON-native values
        snapshots = entry.model_dump(mode="json", include={"metadata", "before_state", "after_state"})
        model = AuditLogModel(
            id=entry.id,
            timestamp=entry.timestamp,
            user_id=entry.user_id,
            user_name=entry.user_name,
            event_type=_column_value(entry.event_type),
            resource_type=_column_value(entry.resource_type),
            resource_id=entry.resource_id,
            description=entry.description,
            ip_address=entry.ip_address,
            user_agent=entry.user_agent,
            severity=_column_value(entry.severity),
            metadata_=snapshots["metadata"],
            before_state=snapshots["before_state"],
            after_state=snapshots["after_state"],
            correlation_id=entry.correlation_id,
        )

        try:
            self._session.add(model)
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

        return str(model.id)

    async def get_by_id(self, log_id: str) -> AuditLogEntry | None:
        result = await self._session.execute(select(AuditLogModel).where(AuditLogModel.id == log_id))
        model = result.scalars().first()
        return _to_entity(model) if model else None

    def _conditions(
        self,
        filters: dict[str, Any] | None,
        start_time: datetime | None,
        end_time: datetime | None,
    ) -> list:
        filter_conditions = []

        if start_time:
            filter_conditions.append(AuditLogModel.timestamp >= start_time)

        if end_time:
            filter_conditions.append(AuditLogModel.timestamp <= end_time)

        for key, value in (filters or {}).items():
            column = _FILTER_COLUMNS.get(key)
            if column is None:
                continue
            if isinstance(value, (list, tuple, set, frozenset)):
                filter_conditions.append(column.in_([_column_value(v) for v in value]))
            else:
                filter_conditions.append(column == _column_value(value))

        return filter_conditions

    async def search(
        self,
        filters: dict[str, Any] | None = None,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[AuditLogEntry]:
        query = select(AuditLogModel).order_by(desc(AuditLogModel.timestamp))

        filter_conditions = self._conditions(filters, start_time, end_time)
        if filter_conditions:
            query = query.where(and_(*filter_conditions))

        query = query.limit(limit).offset(offset)

        result = await self._session.execute(query)
        return [_to_entity(model) for model in result.scalars().all()]

    async def count(
        self,
        filters: dict[str, Any] | None = None,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
    ) -> int:
        query = select(func.count(AuditLogModel.id))

        filter_conditions = self._conditions(filters, start_time, end_time)
        if filter_conditions:
            query = query.where(and_(*filter_conditions))

        result = await self._session.execute(query)
        return result.scalar_one()
