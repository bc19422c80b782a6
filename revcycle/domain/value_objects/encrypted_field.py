"""
Encrypted field value object.

A field value protected at rest is replaced by an ``EncryptedField``. The
``kind`` discriminator is what marks a value as ciphertext: a plain mapping
that merely happens to contain ``content``, ``iv`` and ``tag`` keys is never
mistaken for one.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError

from revcycle.core.exceptions.security_exceptions import EncryptionError

ENCRYPTED_KIND = "encrypted"


class EncryptedField(BaseModel):
    """Base64 ciphertext, IV and authentication tag produced by one AES-GCM encryption."""

    kind: Literal["encrypted"] = ENCRYPTED_KIND
    algorithm: str = "aes-256-gcm"
    content: str
    iv: str
    tag: str
    # "json" when the plaintext was a non-string value serialized before encryption
    encoding: Literal["text", "json"] = "text"

    model_config = ConfigDict(frozen=True)

    @classmethod
    def parse(cls, value: Any) -> "EncryptedField | None":
        """
        Recognize a stored encrypted value.

        Returns:
            The ``EncryptedField`` for an instance or a mapping tagged with
            ``kind == "encrypted"``; ``None`` for any other value.

        Raises:
            EncryptionError: If a tagged mapping is malformed.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, dict) and value.get("kind") == ENCRYPTED_KIND:
            try:
                return cls.model_validate(value)
            except ValidationError as e:
                raise EncryptionError("Invalid encrypted data format", operation="decrypt") from e
        return None

    def to_storage(self) -> dict[str, str]:
        """Plain mapping suitable for JSON columns and documents."""
        return self.model_dump()
