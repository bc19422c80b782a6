"""
Interface for Audit Log Repository.

This module defines the interface for repository classes that handle
append-only audit log persistence.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from revcycle.domain.entities.audit_log import AuditLogEntry


class IAuditLogRepository(ABC):
    """
    Interface for audit log repositories.

    Filter values may be a scalar (equality) or a list/tuple (membership).
    Results are ordered newest first.
    """

    @abstractmethod
    async def create(self, entry: AuditLogEntry) -> str:
        """
        Create a new audit log entry.

        Args:
            entry: The audit log entry to create

        Returns:
            str: ID of the created audit log entry
        """
        pass

    @abstractmethod
    async def get_by_id(self, log_id: str) -> AuditLogEntry | None:
        """
        Retrieve an audit log entry by its ID.

        Args:
            log_id: ID of the audit log entry

        Returns:
            The audit log entry if found, None otherwise
        """
        pass

    @abstractmethod
    async def search(
        self,
        filters: dict[str, Any] | None = None,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[AuditLogEntry]:
        """
        Search for audit log entries based on filters.

        Args:
            filters: Field filters to apply to the search
            start_time: Start time for time-range filtering
            end_time: End time for time-range filtering
            limit: Maximum number of results to return
            offset: Offset for pagination

        Returns:
            Matching audit log entries, newest first
        """
        pass

    @abstractmethod
    async def count(
        self,
        filters: dict[str, Any] | None = None,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
    ) -> int:
        """Count audit log entries matching the same criteria as ``search``."""
        pass
