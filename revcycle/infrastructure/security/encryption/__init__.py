"""Field-level encryption and key management."""

from revcycle.infrastructure.security.encryption.field_encryption import (
    DEFAULT_ALGORITHM,
    decrypt,
    decrypt_field,
    decrypt_object,
    encrypt,
    encrypt_field,
    encrypt_object,
)
from revcycle.infrastructure.security.encryption.key_management import (
    generate_encryption_key,
    load_encryption_key,
    rotate_encryption_key,
    save_encryption_key,
)

__all__ = [
    "DEFAULT_ALGORITHM",
    "decrypt",
    "decrypt_field",
    "decrypt_object",
    "encrypt",
    "encrypt_field",
    "encrypt_object",
    "generate_encryption_key",
    "load_encryption_key",
    "rotate_encryption_key",
    "save_encryption_key",
]
