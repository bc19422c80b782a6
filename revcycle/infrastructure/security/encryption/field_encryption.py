"""
Field-level encryption for PHI at rest.

Values are encrypted with AES-GCM under a hex-encoded key. Every call uses a
fresh random 16-byte IV, and decryption fails closed when the authentication
tag does not verify. Errors are logged with the operation name only, never
with key material or plaintext.
"""

import base64
import binascii
import json
import logging
import os
from collections.abc import Iterable
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from revcycle.core.exceptions.security_exceptions import EncryptionError
from revcycle.domain.value_objects.encrypted_field import ENCRYPTED_KIND, EncryptedField

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "aes-256-gcm"
IV_LENGTH = 16  # bytes
TAG_LENGTH = 16  # bytes

# Required key length in bytes for each supported algorithm
KEY_LENGTHS = {
    "aes-256-gcm": 32,
    "aes-192-gcm": 24,
    "aes-128-gcm": 16,
}


def _load_key(hex_key: str, algorithm: str, operation: str) -> bytes:
    if not hex_key:
        raise EncryptionError("Encryption key is required", operation=operation)

    expected_length = KEY_LENGTHS.get(algorithm.lower())
    if expected_length is None:
        raise EncryptionError(f"Unsupported encryption algorithm: {algorithm}", operation=operation)

    try:
        key = bytes.fromhex(hex_key)
    except ValueError as e:
        raise EncryptionError("Encryption key must be hex encoded", operation=operation) from e

    if len(key) != expected_length:
        raise EncryptionError(
            f"Encryption key must be {expected_length} bytes for {algorithm}", operation=operation
        )
    return key


def encrypt(plaintext: str, hex_key: str, algorithm: str = DEFAULT_ALGORITHM) -> EncryptedField:
    """
    Encrypt a string.

    Args:
        plaintext: The text to encrypt; must not be empty
        hex_key: Hex-encoded key of the length the algorithm requires
        algorithm: One of ``aes-256-gcm``, ``aes-192-gcm``, ``aes-128-gcm``

    Returns:
        The base64 ciphertext, IV and authentication tag

    Raises:
        EncryptionError: If the plaintext or key is missing or invalid
    """
    if not plaintext:
        raise EncryptionError("Data to encrypt is required", operation="encrypt")

    key = _load_key(hex_key, algorithm, "encrypt")
    try:
        iv = os.urandom(IV_LENGTH)
        sealed = AESGCM(key).encrypt(iv, plaintext.encode("utf-8"), None)
        content, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        return EncryptedField(
            algorithm=algorithm.lower(),
            content=base64.b64encode(content).decode("ascii"),
            iv=base64.b64encode(iv).decode("ascii"),
            tag=base64.b64encode(tag).decode("ascii"),
        )
    except Exception as e:
        logger.error(f"Encryption failed: {type(e).__name__}")
        raise EncryptionError("Failed to encrypt data", operation="encrypt") from e


def _as_encrypted_field(value: Any) -> EncryptedField:
    # Stored mappings may omit the kind tag
    if isinstance(value, dict):
        value = EncryptedField.parse({**value, "kind": ENCRYPTED_KIND})
    if not isinstance(value, EncryptedField):
        raise EncryptionError("Invalid encrypted data format", operation="decrypt")
    return value


def decrypt(
    encrypted: EncryptedField | dict[str, Any], hex_key: str, algorithm: str | None = None
) -> str:
    """
    Decrypt a value produced by ``encrypt``.

    Args:
        encrypted: The encrypted value, or its stored mapping
        hex_key: The key it was encrypted with
        algorithm: Overrides the algorithm recorded on the value

    Returns:
        The plaintext string

    Raises:
        EncryptionError: If a component is missing, the key is wrong, or the
            data was tampered with
    """
    encrypted = _as_encrypted_field(encrypted)
    if not encrypted.content or not encrypted.iv or not encrypted.tag:
        raise EncryptionError("Invalid encrypted data format", operation="decrypt")

    key = _load_key(hex_key, algorithm or encrypted.algorithm, "decrypt")
    try:
        content = base64.b64decode(encrypted.content, validate=True)
        iv = base64.b64decode(encrypted.iv, validate=True)
        tag = base64.b64decode(encrypted.tag, validate=True)
        if len(tag) != TAG_LENGTH:
            raise EncryptionError("Invalid authentication tag length", operation="decrypt")
        plaintext = AESGCM(key).decrypt(iv, content + tag, None)
        return plaintext.decode("utf-8")
    except InvalidTag as e:
        logger.error("Decryption failed: authentication tag did not verify")
        raise EncryptionError("Failed to decrypt data", operation="decrypt") from e
    except EncryptionError:
        logger.error("Decryption failed: malformed encrypted value")
        raise
    except (binascii.Error, ValueError) as e:
        logger.error(f"Decryption failed: {type(e).__name__}")
        raise EncryptionError("Failed to decrypt data", operation="decrypt") from e


def encrypt_field(
    data: dict[str, Any], field: str, hex_key: str, algorithm: str = DEFAULT_ALGORITHM
) -> dict[str, Any]:
    """
    Encrypt one field of a mapping.

    Returns a shallow copy with the field replaced by an ``EncryptedField``.
    Non-string values are serialized to JSON first and restored on
    decryption. Absent, None and empty string fields are left alone.
    """
    if not data or data.get(field) in (None, ""):
        return data

    value = data[field]
    if EncryptedField.parse(value) is not None:
        return data

    result = dict(data)
    if isinstance(value, str):
        result[field] = encrypt(value, hex_key, algorithm)
    else:
        encrypted = encrypt(json.dumps(value), hex_key, algorithm)
        result[field] = encrypted.model_copy(update={"encoding": "json"})
    return result


def decrypt_field(
    data: dict[str, Any], field: str, hex_key: str, algorithm: str | None = None
) -> dict[str, Any]:
    """
    Decrypt one field of a mapping.

    Only values tagged as encrypted are decrypted; any other value, including
    a plain mapping with ``content``/``iv``/``tag`` keys, is left untouched.
    Returns a shallow copy when a field was decrypted.
    """
    if not data or data.get(field) is None:
        return data

    encrypted = EncryptedField.parse(data[field])
    if encrypted is None:
        return data

    plaintext = decrypt(encrypted, hex_key, algorithm)
    result = dict(data)
    if encrypted.encoding == "json":
        try:
            result[field] = json.loads(plaintext)
        except json.JSONDecodeError as e:
            logger.error(f"Decrypted field '{field}' is not valid JSON")
            raise EncryptionError("Failed to decrypt data", operation="decrypt") from e
    else:
        result[field] = plaintext
    return result


def encrypt_object(
    data: dict[str, Any],
    fields: Iterable[str],
    hex_key: str,
    algorithm: str = DEFAULT_ALGORITHM,
) -> dict[str, Any]:
    """Encrypt each listed field in turn; the first failure raises."""
    result = data
    for field in fields:
        result = encrypt_field(result, field, hex_key, algorithm)
    return result


def decrypt_object(
    data: dict[str, Any],
    fields: Iterable[str],
    hex_key: str,
    algorithm: str | None = None,
) -> dict[str, Any]:
    """Decrypt each listed field in turn; the first failure raises."""
    result = data
    for field in fields:
        result = decrypt_field(result, field, hex_key, algorithm)
    return result
