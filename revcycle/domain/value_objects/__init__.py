"""Domain value objects."""

from revcycle.domain.value_objects.encrypted_field import EncryptedField
from revcycle.domain.value_objects.masking import (
    REDACTED,
    MaskingOptions,
    MaskingRule,
    SensitiveDataReport,
)

__all__ = [
    "REDACTED",
    "EncryptedField",
    "MaskingOptions",
    "MaskingRule",
    "SensitiveDataReport",
]
