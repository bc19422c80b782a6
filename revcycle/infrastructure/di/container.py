"""
Composition of the security layer.

Each manager is constructed exactly once from repositories and settings and
handed to its dependents. Applications keep the resulting container for the
lifetime of the process, typically on ``app.state.security``.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from revcycle.core.config.settings import Settings, get_settings
from revcycle.core.interfaces.repositories.audit_log_repository_interface import (
    IAuditLogRepository,
)
from revcycle.core.interfaces.repositories.role_repository_interface import (
    IPermissionRepository,
    IRoleRepository,
)
from revcycle.domain.value_objects.masking import MaskingRule
from revcycle.infrastructure.persistence.memory import (
    InMemoryAuditLogRepository,
    InMemoryPermissionRepository,
    InMemoryRoleRepository,
)
from revcycle.infrastructure.persistence.sqlalchemy.repositories import (
    SQLAlchemyAuditLogRepository,
    SQLAlchemyPermissionRepository,
    SQLAlchemyRoleRepository,
)
from revcycle.infrastructure.security.audit.audit_logger import AuditLogger
from revcycle.infrastructure.security.authorization.authorization_manager import (
    AuthorizationManager,
)
from revcycle.infrastructure.security.hipaa.compliance_manager import HIPAAComplianceManager
from revcycle.infrastructure.security.masking.data_masking import DataMasker
from revcycle.infrastructure.security.masking.patterns import (
    DEFAULT_MASKING_RULES,
    DEFAULT_MASKING_RULES_VERSION,
)
from revcycle.infrastructure.security.rbac.rbac_manager import RBACManager

logger = logging.getLogger(__name__)


@dataclass
class SecurityContainer:
    """The security services of one process."""

    settings: Settings
    rbac: RBACManager
    authorization: AuthorizationManager
    masker: DataMasker
    audit_logger: AuditLogger
    hipaa: HIPAAComplianceManager

    async def initialize(self) -> None:
        await self.rbac.initialize()


def build_security_container(
    role_repository: IRoleRepository,
    permission_repository: IPermissionRepository,
    audit_repository: IAuditLogRepository,
    settings: Settings | None = None,
    masking_rules: Iterable[MaskingRule] = DEFAULT_MASKING_RULES,
    masking_rules_version: str = DEFAULT_MASKING_RULES_VERSION,
    audit_file_logger: logging.Logger | None = None,
) -> SecurityContainer:
    """
    Wire the security managers together.

    Args:
        role_repository: Role storage
        permission_repository: Permission storage
        audit_repository: Audit trail storage
        settings: Application settings; ``get_settings()`` when omitted
        masking_rules: Substring rules used by the masking engine
        masking_rules_version: Identifies ``masking_rules`` in logs
        audit_file_logger: Overrides the audit file logger built from settings

    Returns:
        A container whose RBAC manager still needs ``initialize()``
    """
    settings = settings or get_settings()

    masker = DataMasker(masking_rules, masking_rules_version)
    rbac = RBACManager(role_repository, permission_repository, settings)
    authorization = AuthorizationManager(rbac)
    audit_logger = AuditLogger(audit_repository, masker, settings, audit_file_logger)
    hipaa = HIPAAComplianceManager(authorization, masker, audit_logger, settings)

    logger.info(f"Security container built for environment '{settings.ENVIRONMENT}'")
    return SecurityContainer(
        settings=settings,
        rbac=rbac,
        authorization=authorization,
        masker=masker,
        audit_logger=audit_logger,
        hipaa=hipaa,
    )


def build_in_memory_security_container(
    settings: Settings | None = None, audit_file_logger: logging.Logger | None = None
) -> SecurityContainer:
    """Container backed by in-memory repositories, for development and tests."""
    permission_repository = InMemoryPermissionRepository()
    return build_security_container(
        InMemoryRoleRepository(permission_repository),
        permission_repository,
        InMemoryAuditLogRepository(),
        settings=settings,
        audit_file_logger=audit_file_logger,
    )


def build_sqlalchemy_security_container(
    session: AsyncSession,
    settings: Settings | None = None,
    audit_file_logger: logging.Logger | None = None,
) -> SecurityContainer:
    """Container backed by SQLAlchemy repositories sharing one session."""
    return build_security_container(
        SQLAlchemyRoleRepository(session),
        SQLAlchemyPermissionRepository(session),
        SQLAlchemyAuditLogRepository(session),
        settings=settings,
        audit_file_logger=audit_file_logger,
    )
