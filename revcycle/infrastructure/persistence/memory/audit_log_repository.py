"""
In-memory Audit Log Repository.

Stores audit entries in a dict. Used in development and tests where no
database is configured.
"""

from datetime import datetime
from typing import Any

from revcycle.core.interfaces.repositories.audit_log_repository_interface import (
    IAuditLogRepository,
)
from revcycle.domain.entities.audit_log import AuditLogEntry


def _matches(entry: AuditLogEntry, filters: dict[str, Any]) -> bool:
    for key, expected in filters.items():
        actual = getattr(entry, key, None)
        if isinstance(expected, (list, tuple, set, frozenset)):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


class InMemoryAuditLogRepository(IAuditLogRepository):
    """Audit log repository held in process memory."""

    def __init__(self) -> None:
        self.logs: dict[str, AuditLogEntry] = {}

    async def create(self, entry: AuditLogEntry) -> str:
        self.logs[entry.id] = entry
        return entry.id

    async def get_by_id(self, log_id: str) -> AuditLogEntry | None:
        return self.logs.get(log_id)

    def _filtered(
        self,
        filters: dict[str, Any] | None,
        start_time: datetime | None,
        end_time: datetime | None,
    ) -> list[AuditLogEntry]:
        results = list(self.logs.values())

        if filters:
            results = [log for log in results if _matches(log, filters)]
        if start_time:
            results = [log for log in results if log.timestamp >= start_time]
        if end_time:
            results = [log for log in results if log.timestamp <= end_time]

        results.sort(key=lambda log: log.timestamp, reverse=True)
        return results

    async def search(
        self,
        filters: dict[str, Any] | None = None,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[AuditLogEntry]:
        results = self._filtered(filters, start_time, end_time)
        return results[offset : offset + limit]

    async def count(
        self,
        filters: dict[str, Any] | None = None,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
    ) -> int:
        return len(self._filtered(filters, start_time, end_time))
