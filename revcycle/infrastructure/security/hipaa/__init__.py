"""HIPAA compliance operations."""

from revcycle.infrastructure.security.hipaa.compliance_manager import (
    PHI_FIELDS,
    PII_FIELDS,
    HIPAAComplianceManager,
    is_phi,
    is_pii,
)

__all__ = ["PHI_FIELDS", "PII_FIELDS", "HIPAAComplianceManager", "is_phi", "is_pii"]
