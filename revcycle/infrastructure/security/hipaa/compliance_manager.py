"""
HIPAA compliance operations.

Groups encryption, masking, authorization and audit logging around two
fixed lists of field names: protected health information and personally
identifiable information.
"""

import logging
from datetime import datetime
from typing import Any

from revcycle.core.config.settings import Settings, get_settings
from revcycle.core.exceptions.security_exceptions import KeyManagementError
from revcycle.domain.entities.audit_log import RequestContext
from revcycle.domain.entities.user import AuthenticatedUser
from revcycle.domain.enums.audit import AuditResourceType
from revcycle.domain.enums.security import MaskingLevel
from revcycle.domain.value_objects.masking import MaskingOptions
from revcycle.infrastructure.security.audit.audit_logger import AuditLogger
from revcycle.infrastructure.security.authorization.authorization_manager import (
    AuthorizationManager,
)
from revcycle.infrastructure.security.encryption.field_encryption import (
    decrypt_object,
    encrypt_object,
)
from revcycle.infrastructure.security.encryption.key_management import load_encryption_key
from revcycle.infrastructure.security.masking.data_masking import DataMasker

logger = logging.getLogger(__name__)

PHI_FIELDS = (
    "ssn",
    "dateOfBirth",
    "medicalRecordNumber",
    "medicaidId",
    "medicareId",
    "insuranceId",
    "diagnosis",
    "treatmentNotes",
    "healthConditions",
)

# Free text with no format-specific masker; redacted whenever PHI is masked
CLINICAL_FIELDS = ("diagnosis", "treatmentNotes", "healthConditions")

PII_FIELDS = (
    "firstName",
    "lastName",
    "address",
    "phoneNumber",
    "email",
    "driversLicense",
)

PHI_VIEW_PERMISSION = "PHI:VIEW"
MINIMUM_NECESSARY_PERMISSION = "DATA:MINIMUM_NECESSARY"

# Six years of audit history is the HIPAA documentation minimum
MIN_AUDIT_RETENTION_DAYS = 6 * 365


def is_phi(field_name: str) -> bool:
    return field_name in PHI_FIELDS


def is_pii(field_name: str) -> bool:
    return field_name in PII_FIELDS


def _user_context(user: AuthenticatedUser | None) -> RequestContext:
    if user is None:
        return RequestContext()
    return RequestContext(user_id=user.id, user_name=user.full_name)


class HIPAAComplianceManager:
    """
    PHI protection, disclosure and masking for one process.

    Args:
        authorization: Permission checks for PHI disclosure
        masker: Masking engine for role-based masking
        audit_logger: Records every PHI disclosure
        settings: Supplies the encryption algorithm and audit configuration
    """

    def __init__(
        self,
        authorization: AuthorizationManager,
        masker: DataMasker,
        audit_logger: AuditLogger,
        settings: Settings | None = None,
    ):
        self.authorization = authorization
        self.masker = masker
        self.audit_logger = audit_logger
        self.settings = settings or get_settings()

    def _phi_fields(self, additional_fields: list[str] | None) -> list[str]:
        return list(dict.fromkeys([*PHI_FIELDS, *(additional_fields or [])]))

    def protect_phi(
        self, data: dict[str, Any], key: str, additional_fields: list[str] | None = None
    ) -> dict[str, Any]:
        """Encrypt every PHI field present in ``data``, plus any additional fields."""
        return encrypt_object(
            data, self._phi_fields(additional_fields), key, self.settings.ENCRYPTION_ALGORITHM
        )

    async def reveal_phi(
        self,
        data: dict[str, Any],
        key: str,
        user: AuthenticatedUser | None,
        additional_fields: list[str] | None = None,
    ) -> dict[str, Any]:
        """
        Decrypt the PHI fields of a record for an authorized user.

        The disclosure is recorded in the audit trail.

        Raises:
            PermissionDeniedError: If the user lacks ``PHI:VIEW``; nothing is decrypted
            EncryptionError: If a field cannot be decrypted
        """
        self.authorization.enforce_permission(
            user, PHI_VIEW_PERMISSION, "Insufficient permissions to view PHI"
        )

        fields = self._phi_fields(additional_fields)
        revealed = decrypt_object(data, fields, key)

        resource_id = data.get("id")
        await self.audit_logger.log_data_access(
            AuditResourceType.CLIENT,
            str(resource_id) if resource_id is not None else None,
            "Accessed PHI data",
            {"fields": [field for field in fields if field in data]},
            _user_context(user),
        )
        return revealed

    def mask_phi(
        self,
        data: Any,
        user: AuthenticatedUser | None,
        additional_fields: list[str] | None = None,
    ) -> Any:
        """
        Mask a record, or a list of records, for display to ``user``.

        Role-based masking is applied first; the PHI fields and any
        additional fields are then masked at the same level. Clinical
        fields are redacted outright at any level other than none.
        """
        if isinstance(data, list):
            return [self.mask_phi(item, user, additional_fields) for item in data]

        user_id = user.id if user else None
        roles = [user.role] if user and user.role else []

        masked = self.masker.apply_role_based_masking(data, user_id, roles)
        level = self.masker.resolve_masking_level(data, user_id, roles)
        if level == MaskingLevel.NONE:
            return masked
        masked = self.masker.mask_sensitive_fields(
            masked, self._phi_fields(additional_fields), MaskingOptions(level=level)
        )
        return self.masker.mask_sensitive_fields(
            masked, CLINICAL_FIELDS, MaskingOptions(level=MaskingLevel.FULL)
        )

    def enforce_minimum_necessary(
        self,
        data: dict[str, Any],
        user: AuthenticatedUser | None,
        required_fields: list[str],
    ) -> dict[str, Any]:
        """
        Reduce a record to the fields needed for the task at hand.

        Returns an empty dict, rather than raising, when the user lacks
        ``DATA:MINIMUM_NECESSARY``.
        """
        if not self.authorization.has_permission(user, MINIMUM_NECESSARY_PERMISSION):
            logger.warning(
                "Minimum necessary access denied",
                extra={"user_id": user.id if user else None},
            )
            return {}
        return {field: data[field] for field in required_fields if field in data}

    async def log_phi_access(
        self,
        user: AuthenticatedUser | None,
        resource_type: AuditResourceType,
        resource_id: str | None,
        description: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        await self.audit_logger.log_data_access(
            resource_type, resource_id, description, metadata, _user_context(user)
        )

    def verify_hipaa_compliance(self) -> dict[str, Any]:
        """
        Check the configuration this process depends on for HIPAA safeguards.

        Returns:
            ``{"compliant": bool, "issues": [str, ...]}``
        """
        issues: list[str] = []

        try:
            load_encryption_key(self.settings.ENCRYPTION_KEY_PATH)
        except KeyManagementError:
            issues.append("PHI encryption key is not available")

        if not self.settings.AUDIT_LOG_ENABLED:
            issues.append("Audit logging is disabled")
        if self.settings.AUDIT_LOG_RETENTION_DAYS < MIN_AUDIT_RETENTION_DAYS:
            issues.append(
                f"Audit log retention of {self.settings.AUDIT_LOG_RETENTION_DAYS} days "
                f"is below {MIN_AUDIT_RETENTION_DAYS} days"
            )

        if issues:
            logger.warning(f"HIPAA configuration issues found: {len(issues)}")
        return {"compliant": not issues, "issues": issues}

    async def generate_compliance_report(
        self, start_time: datetime | None = None, end_time: datetime | None = None
    ) -> dict[str, Any]:
        """Summarize audit activity for a period together with the configuration check."""
        data_access = await self.audit_logger.get_data_access_audit_logs(
            start_time=start_time, end_time=end_time, limit=1
        )
        security = await self.audit_logger.get_security_audit_logs(
            start_time=start_time, end_time=end_time, limit=1
        )
        return {
            "period": {
                "start": start_time.isoformat() if start_time else None,
                "end": end_time.isoformat() if end_time else None,
            },
            "data_access_events": data_access.total,
            "security_events": security.total,
            "configuration": self.verify_hipaa_compliance(),
        }
