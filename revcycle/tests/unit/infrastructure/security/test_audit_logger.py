"""
Tests for the AuditLogger class.

Entries are written to the in-memory audit repository; the audit file
logger is a mock so the JSON line handed to it can be inspected.
"""

import json
from datetime import datetime
from unittest.mock import AsyncMock, patch

import pytest

from revcycle.core.exceptions.security_exceptions import AuditLogError
from revcycle.domain.entities.audit_log import RequestContext
from revcycle.domain.enums.audit import AuditEventType, AuditResourceType, AuditSeverity
from revcycle.infrastructure.logging.context import correlation_scope
from revcycle.infrastructure.security.audit.audit_logger import AuditLogger

MODULE = "revcycle.infrastructure.security.audit.audit_logger"

CONTEXT = RequestContext(
    user_id="user-1",
    user_name="Jane Doe",
    ip_address="10.0.0.1",
    user_agent="pytest",
)


@pytest.mark.asyncio
class TestAuditEntryPoints:
    """Test suite for the four event-shaped entry points."""

    async def test_failed_login_is_a_warning(self, audit_logger, audit_repository) -> None:
        # Exercise
        entry = await audit_logger.log_user_activity(
            AuditEventType.FAILED_LOGIN,
            "Failed login attempt",
            {"email": "john.doe@example.com"},
            CONTEXT,
        )

        # Verify
        assert entry.severity == AuditSeverity.WARNING
        assert entry.resource_type == AuditResourceType.USER
        assert entry.resource_id == "user-1"
        assert entry.ip_address == "10.0.0.1"
        assert entry.metadata == {"email": "j*******@example.com"}
        assert await audit_repository.get_by_id(entry.id) == entry

    async def test_login_is_info(self, audit_logger) -> None:
        entry = await audit_logger.log_user_activity(AuditEventType.LOGIN, "Logged in")

        assert entry.severity == AuditSeverity.INFO
        assert entry.user_id is None

    async def test_data_access_masks_metadata(self, audit_logger) -> None:
        metadata = {"ssn": "123-45-6789", "note": "Called 555-123-4567"}

        entry = await audit_logger.log_data_access(
            AuditResourceType.CLAIM, "claim-1", "Viewed claim", metadata, CONTEXT
        )

        assert entry.event_type == AuditEventType.READ
        assert entry.severity == AuditSeverity.INFO
        assert entry.metadata == {"ssn": "XXX-XX-6789", "note": "Called (XXX) XXX-XXXX"}
        assert metadata["ssn"] == "123-45-6789"

    async def test_delete_is_a_warning_and_masks_state(self, audit_logger) -> None:
        entry = await audit_logger.log_data_change(
            AuditEventType.DELETE,
            AuditResourceType.CLIENT,
            "client-1",
            "Deleted client",
            before_state={"firstName": "John", "ssn": "123-45-6789"},
            context=CONTEXT,
        )

        assert entry.severity == AuditSeverity.WARNING
        assert entry.before_state == {"firstName": "John", "ssn": "XXX-XX-6789"}
        assert entry.after_state is None

    async def test_update_is_info(self, audit_logger) -> None:
        entry = await audit_logger.log_data_change(
            AuditEventType.UPDATE,
            AuditResourceType.CLIENT,
            "client-1",
            "Updated client",
            before_state={"phone": "555-123-4567"},
            after_state={"phone": "555-987-6543"},
        )

        assert entry.severity == AuditSeverity.INFO
        assert entry.before_state == {"phone": "(XXX) XXX-4567"}
        assert entry.after_state == {"phone": "(XXX) XXX-6543"}

    async def test_security_event_severity(self, audit_logger) -> None:
        default = await audit_logger.log_security_event(AuditEventType.SYSTEM, "Key rotated")
        critical = await audit_logger.log_security_event(
            AuditEventType.SYSTEM, "Tampering detected", AuditSeverity.CRITICAL
        )

        assert default.severity == AuditSeverity.WARNING
        assert default.resource_type == AuditResourceType.SYSTEM
        assert critical.severity == AuditSeverity.CRITICAL

    async def test_entry_is_written_to_audit_file(self, audit_logger, audit_file_logger) -> None:
        entry = await audit_logger.log_data_access(
            AuditResourceType.CLIENT, "client-1", "Viewed client", {"ssn": "123-45-6789"}, CONTEXT
        )

        audit_file_logger.info.assert_called_once()
        line = audit_file_logger.info.call_args.args[0]
        record = json.loads(line)
        assert record["id"] == entry.id
        assert record["event_type"] == "READ"
        assert record["metadata"] == {"ssn": "XXX-XX-6789"}
        assert "123-45-6789" not in line

    async def test_correlation_id_is_recorded(self, audit_logger) -> None:
        with correlation_scope("corr-123"):
            entry = await audit_logger.log_data_access(
                AuditResourceType.CLAIM, "claim-1", "Viewed claim"
            )

        assert entry.correlation_id == "corr-123"

    async def test_snapshots_are_json_native(self, audit_logger, audit_repository) -> None:
        entry = await audit_logger.log_data_change(
            AuditEventType.UPDATE,
            AuditResourceType.CLAIM,
            "claim-1",
            "Resubmitted claim",
            after_state={"submitted_at": datetime(2024, 1, 1, 9, 30)},
            metadata={"batch": {"created": datetime(2024, 1, 1)}},
        )

        assert entry.after_state == {"submitted_at": "2024-01-01T09:30:00"}
        assert entry.metadata == {"batch": {"created": "2024-01-01T00:00:00"}}
        assert (await audit_repository.get_by_id(entry.id)).after_state == entry.after_state

    async def test_repository_failure_is_swallowed(
        self, audit_repository, masker, test_settings, audit_file_logger
    ) -> None:
        # Setup
        audit_repository.create = AsyncMock(side_effect=RuntimeError("database unavailable"))
        audit_logger = AuditLogger(audit_repository, masker, test_settings, audit_file_logger)

        # Exercise
        with patch(f"{MODULE}.logger") as mock_logger:
            entry = await audit_logger.log_data_access(
                AuditResourceType.CLAIM, "claim-1", "Viewed claim"
            )

        # Verify
        assert entry is None
        mock_logger.error.assert_called_once()
        audit_file_logger.info.assert_not_called()


@pytest.mark.asyncio
class TestAuditQueries:
    """Test suite for the audit trail queries."""

    async def test_pagination(self, audit_logger) -> None:
        for index in range(30):
            await audit_logger.log_data_access(
                AuditResourceType.CLAIM, f"claim-{index}", "Viewed claim"
            )

        page = await audit_logger.get_audit_logs_by_filter(page=2, limit=10)

        assert len(page.data) == 10
        assert page.total == 30
        assert page.page == 2
        assert page.pages == 3

    async def test_limit_is_clamped(self, audit_logger) -> None:
        page = await audit_logger.get_audit_logs_by_filter(page=0, limit=500)

        assert page.page == 1
        assert page.limit == 100

    async def test_default_limit(self, audit_logger) -> None:
        page = await audit_logger.get_audit_logs_by_filter()

        assert page.limit == 25

    async def test_filters(self, audit_logger) -> None:
        await audit_logger.log_data_access(AuditResourceType.CLAIM, "claim-1", "Viewed claim")
        await audit_logger.log_data_access(AuditResourceType.CLIENT, "client-1", "Viewed client")

        page = await audit_logger.get_audit_logs_by_filter({"resource_type": AuditResourceType.CLAIM})

        assert page.total == 1
        assert page.data[0].resource_id == "claim-1"

    async def test_security_logs(self, audit_logger) -> None:
        await audit_logger.log_user_activity(AuditEventType.LOGIN, "Logged in", context=CONTEXT)
        await audit_logger.log_user_activity(
            AuditEventType.FAILED_LOGIN, "Failed login attempt", context=CONTEXT
        )

        page = await audit_logger.get_security_audit_logs()

        assert page.total == 1
        assert page.data[0].event_type == AuditEventType.FAILED_LOGIN

    async def test_data_access_logs(self, audit_logger) -> None:
        other = RequestContext(user_id="user-2")
        await audit_logger.log_data_access(AuditResourceType.CLAIM, "claim-1", "Viewed", context=CONTEXT)
        await audit_logger.log_data_access(AuditResourceType.CLIENT, "client-1", "Viewed", context=other)
        await audit_logger.log_data_access(AuditResourceType.REPORT, "report-1", "Viewed", context=CONTEXT)

        everyone = await audit_logger.get_data_access_audit_logs()
        mine = await audit_logger.get_data_access_audit_logs(user_id="user-1")

        assert everyone.total == 2
        assert [entry.resource_id for entry in mine.data] == ["claim-1"]

    async def test_query_failure_raises(self, audit_repository, masker, test_settings, audit_file_logger) -> None:
        audit_repository.search = AsyncMock(side_effect=RuntimeError("database unavailable"))
        audit_logger = AuditLogger(audit_repository, masker, test_settings, audit_file_logger)

        with pytest.raises(AuditLogError):
            await audit_logger.get_audit_logs_by_filter()
