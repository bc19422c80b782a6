"""Masking engine for PII/PHI."""

from revcycle.infrastructure.security.masking.data_masking import (
    PARTIAL_MASK_FIELDS,
    DataMasker,
    mask_address,
    mask_credit_card,
    mask_date_of_birth,
    mask_email,
    mask_identifier,
    mask_phone,
    mask_ssn,
)
from revcycle.infrastructure.security.masking.patterns import DEFAULT_MASKING_RULES

__all__ = [
    "DEFAULT_MASKING_RULES",
    "PARTIAL_MASK_FIELDS",
    "DataMasker",
    "mask_address",
    "mask_credit_card",
    "mask_date_of_birth",
    "mask_email",
    "mask_identifier",
    "mask_phone",
    "mask_ssn",
]
