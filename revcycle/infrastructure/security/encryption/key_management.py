"""
Encryption key lifecycle.

Keys are hex strings. A key location is either a file path or ``env:NAME``
for an environment variable. This module does not find or re-encrypt
existing ciphertext on rotation; callers do that in the rotation callback.
"""

import inspect
import logging
import os
import secrets
from collections.abc import Awaitable, Callable
from pathlib import Path

from revcycle.core.exceptions.security_exceptions import KeyManagementError

logger = logging.getLogger(__name__)

ENV_PREFIX = "env:"
DEFAULT_KEY_LENGTH = 32  # bytes

ReencryptCallback = Callable[[str, str], Awaitable[None] | None]


def generate_encryption_key(length: int = DEFAULT_KEY_LENGTH) -> str:
    """Generate a random key of ``length`` bytes, hex encoded."""
    if length <= 0:
        raise KeyManagementError("Key length must be positive")
    return secrets.token_hex(length)


def load_encryption_key(key_path: str) -> str:
    """
    Load a key from an environment variable or a file.

    Args:
        key_path: ``env:NAME`` or a path to a file holding the hex key

    Returns:
        The hex key, without surrounding whitespace

    Raises:
        KeyManagementError: If the variable is unset or the file cannot be read
    """
    if key_path.startswith(ENV_PREFIX):
        env_var = key_path[len(ENV_PREFIX) :]
        key = os.environ.get(env_var, "").strip()
        if not key:
            logger.error(f"Encryption key environment variable {env_var} is not set")
            raise KeyManagementError(f"Environment variable {env_var} not set")
        return key

    try:
        key = Path(key_path).read_text(encoding="utf-8").strip()
    except OSError as e:
        logger.error(f"Failed to load encryption key from {key_path}: {type(e).__name__}")
        raise KeyManagementError("Failed to load encryption key", detail={"path": key_path}) from e

    if not key:
        raise KeyManagementError("Encryption key file is empty", detail={"path": key_path})
    return key


def save_encryption_key(key: str, key_path: str) -> None:
    """
    Write a key to a file readable and writable only by its owner.

    Parent directories are created as needed.
    """
    if key_path.startswith(ENV_PREFIX):
        raise KeyManagementError("Cannot save an encryption key to an environment variable")

    path = Path(key_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # Owner-only from creation
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as key_file:
            key_file.write(key)
        os.chmod(path, 0o600)
    except OSError as e:
        logger.error(f"Failed to save encryption key to {key_path}: {type(e).__name__}")
        raise KeyManagementError("Failed to save encryption key", detail={"path": key_path}) from e

    logger.info(f"Encryption key saved to {key_path}")


async def rotate_encryption_key(
    old_key_path: str,
    new_key_path: str,
    reencrypt: ReencryptCallback | None = None,
) -> str:
    """
    Replace a key with a newly generated one.

    Loads the old key, generates and saves a new one, then calls
    ``reencrypt(old_key, new_key)`` if given. The callback may be a plain
    function or a coroutine function.

    Returns:
        The new hex key
    """
    old_key = load_encryption_key(old_key_path)
    new_key = generate_encryption_key()
    save_encryption_key(new_key, new_key_path)

    if reencrypt is not None:
        try:
            result = reencrypt(old_key, new_key)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Re-encryption during key rotation failed: {type(e).__name__}")
            raise KeyManagementError("Failed to re-encrypt data during key rotation") from e

    logger.info(f"Encryption key rotated, new key saved to {new_key_path}")
    return new_key
