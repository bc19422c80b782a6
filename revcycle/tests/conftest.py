"""
Shared fixtures for the revcycle test suite.

Settings point every log file at the test's temporary directory, and the
audit file logger is replaced with a mock so tests never write to disk
unless they ask to.
"""

import logging
import uuid
from unittest.mock import MagicMock

import pytest
import pytest_asyncio

from revcycle.core.config.settings import Settings
from revcycle.domain.entities.user import AuthenticatedUser
from revcycle.domain.enums.security import UserRole
from revcycle.infrastructure.persistence.memory import (
    InMemoryAuditLogRepository,
    InMemoryPermissionRepository,
    InMemoryRoleRepository,
)
from revcycle.infrastructure.security.audit.audit_logger import AuditLogger
from revcycle.infrastructure.security.authorization.authorization_manager import (
    AuthorizationManager,
)
from revcycle.infrastructure.security.masking.data_masking import DataMasker
from revcycle.infrastructure.security.rbac.permission_catalog import DEFAULT_ROLES
from revcycle.infrastructure.security.rbac.rbac_manager import RBACManager

# 32-byte AES-256 key, hex encoded
TEST_ENCRYPTION_KEY = "0123456789abcdef" * 4


def role_id_for(role: UserRole) -> str:
    """ID of a seeded system role."""
    return next(default.id for default in DEFAULT_ROLES if default.name == role.value)


def make_user(
    role: UserRole | None = None,
    permissions: list[str] | None = None,
    user_id: str | None = None,
) -> AuthenticatedUser:
    return AuthenticatedUser(
        id=user_id or str(uuid.uuid4()),
        role_id=role_id_for(role) if role else None,
        role=role.value if role else None,
        permissions=permissions or [],
        email="jane.doe@example.com",
        first_name="Jane",
        last_name="Doe",
    )


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings isolated to the test's temporary directory."""
    return Settings(
        ENVIRONMENT="testing",
        LOG_LEVEL="DEBUG",
        LOG_DIR=str(tmp_path / "logs"),
        AUDIT_LOG_FILE=str(tmp_path / "logs" / "audit.log"),
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        ENCRYPTION_KEY_PATH="env:REVCYCLE_TEST_ENCRYPTION_KEY",
        AUDIT_QUERY_DEFAULT_LIMIT=25,
        AUDIT_QUERY_MAX_LIMIT=100,
    )


@pytest.fixture
def audit_file_logger():
    """Mock standing in for the dedicated audit trail logger."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def permission_repository() -> InMemoryPermissionRepository:
    return InMemoryPermissionRepository()


@pytest.fixture
def role_repository(permission_repository) -> InMemoryRoleRepository:
    return InMemoryRoleRepository(permission_repository)


@pytest.fixture
def audit_repository() -> InMemoryAuditLogRepository:
    return InMemoryAuditLogRepository()


@pytest.fixture
def masker() -> DataMasker:
    return DataMasker()


@pytest.fixture
def rbac_manager(role_repository, permission_repository, test_settings) -> RBACManager:
    """An RBAC manager that has not been initialized yet."""
    return RBACManager(role_repository, permission_repository, test_settings)


@pytest_asyncio.fixture
async def initialized_rbac_manager(rbac_manager) -> RBACManager:
    """An RBAC manager with the default roles and permissions seeded."""
    await rbac_manager.initialize()
    return rbac_manager


@pytest.fixture
def authorization_manager(initialized_rbac_manager) -> AuthorizationManager:
    return AuthorizationManager(initialized_rbac_manager)


@pytest.fixture
def audit_logger(audit_repository, masker, test_settings, audit_file_logger) -> AuditLogger:
    return AuditLogger(audit_repository, masker, test_settings, audit_file_logger)


@pytest.fixture
def admin_user() -> AuthenticatedUser:
    return make_user(UserRole.ADMINISTRATOR, permissions=["*:*"])


@pytest.fixture
def billing_user() -> AuthenticatedUser:
    return make_user(
        UserRole.BILLING_SPECIALIST,
        permissions=["CLAIMS:READ", "CLAIMS:SUBMIT", "BILLING:*", "PHI:VIEW"],
    )


@pytest.fixture
def read_only_user() -> AuthenticatedUser:
    return make_user(UserRole.READ_ONLY, permissions=["CLAIMS:VIEW", "CLIENTS:VIEW"])
