"""
Tests for field-level encryption.
"""

import base64

import pytest

from revcycle.core.exceptions.security_exceptions import EncryptionError
from revcycle.domain.value_objects.encrypted_field import EncryptedField
from revcycle.infrastructure.security.encryption.field_encryption import (
    IV_LENGTH,
    TAG_LENGTH,
    decrypt,
    decrypt_field,
    decrypt_object,
    encrypt,
    encrypt_field,
    encrypt_object,
)
from revcycle.infrastructure.security.encryption.key_management import generate_encryption_key
from revcycle.tests.conftest import TEST_ENCRYPTION_KEY


class TestEncryptDecrypt:
    """Test suite for single-value encryption."""

    def test_encrypt_produces_tagged_value(self) -> None:
        encrypted = encrypt("123-45-6789", TEST_ENCRYPTION_KEY)

        assert encrypted.kind == "encrypted"
        assert encrypted.algorithm == "aes-256-gcm"
        assert encrypted.encoding == "text"
        assert len(base64.b64decode(encrypted.iv)) == IV_LENGTH
        assert len(base64.b64decode(encrypted.tag)) == TAG_LENGTH
        assert "123-45-6789" not in encrypted.content

    def test_decrypt_recovers_plaintext(self) -> None:
        encrypted = encrypt("Type 2 diabetes", TEST_ENCRYPTION_KEY)

        assert decrypt(encrypted, TEST_ENCRYPTION_KEY) == "Type 2 diabetes"

    def test_each_encryption_uses_a_fresh_iv(self) -> None:
        first = encrypt("same value", TEST_ENCRYPTION_KEY)
        second = encrypt("same value", TEST_ENCRYPTION_KEY)

        assert first.iv != second.iv
        assert first.content != second.content

    def test_smaller_keys_for_smaller_algorithms(self) -> None:
        key = generate_encryption_key(16)

        encrypted = encrypt("secret", key, "aes-128-gcm")

        assert encrypted.algorithm == "aes-128-gcm"
        assert decrypt(encrypted, key) == "secret"

    def test_empty_plaintext_is_rejected(self) -> None:
        with pytest.raises(EncryptionError):
            encrypt("", TEST_ENCRYPTION_KEY)

    @pytest.mark.parametrize(
        "key",
        ["", "not-hex", "abcd"],
    )
    def test_invalid_keys_are_rejected(self, key) -> None:
        with pytest.raises(EncryptionError):
            encrypt("secret", key)

    def test_unsupported_algorithm_is_rejected(self) -> None:
        with pytest.raises(EncryptionError):
            encrypt("secret", TEST_ENCRYPTION_KEY, "aes-256-cbc")

    def test_wrong_key_fails_closed(self) -> None:
        encrypted = encrypt("secret", TEST_ENCRYPTION_KEY)

        with pytest.raises(EncryptionError) as exc_info:
            decrypt(encrypted, generate_encryption_key())

        assert TEST_ENCRYPTION_KEY not in str(exc_info.value)

    def test_tampered_tag_fails_closed(self) -> None:
        encrypted = encrypt("secret", TEST_ENCRYPTION_KEY)
        tag = bytearray(base64.b64decode(encrypted.tag))
        tag[0] ^= 0xFF
        tampered = encrypted.model_copy(update={"tag": base64.b64encode(bytes(tag)).decode()})

        with pytest.raises(EncryptionError):
            decrypt(tampered, TEST_ENCRYPTION_KEY)

    def test_missing_component_is_rejected(self) -> None:
        encrypted = encrypt("secret", TEST_ENCRYPTION_KEY).model_copy(update={"iv": ""})

        with pytest.raises(EncryptionError):
            decrypt(encrypted, TEST_ENCRYPTION_KEY)

    def test_decrypt_accepts_stored_mapping(self) -> None:
        stored = encrypt("secret", TEST_ENCRYPTION_KEY).model_dump(exclude={"kind"})

        assert decrypt(stored, TEST_ENCRYPTION_KEY) == "secret"

    def test_mapping_missing_a_component_is_rejected(self) -> None:
        stored = encrypt("secret", TEST_ENCRYPTION_KEY).model_dump(exclude={"tag"})

        with pytest.raises(EncryptionError):
            decrypt(stored, TEST_ENCRYPTION_KEY)

    @pytest.mark.parametrize("value", ["not encrypted", None, ["content", "iv", "tag"]])
    def test_non_mapping_is_rejected(self, value) -> None:
        with pytest.raises(EncryptionError):
            decrypt(value, TEST_ENCRYPTION_KEY)


class TestFieldEncryption:
    """Test suite for encrypting fields of a mapping."""

    def test_encrypt_field_returns_copy(self) -> None:
        record = {"id": "client-1", "ssn": "123-45-6789"}

        encrypted = encrypt_field(record, "ssn", TEST_ENCRYPTION_KEY)

        assert isinstance(encrypted["ssn"], EncryptedField)
        assert encrypted["id"] == "client-1"
        assert record["ssn"] == "123-45-6789"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_values_are_skipped(self, value) -> None:
        record = {"ssn": value}

        assert encrypt_field(record, "ssn", TEST_ENCRYPTION_KEY) == {"ssn": value}

    def test_absent_field_is_skipped(self) -> None:
        record = {"id": "client-1"}

        assert encrypt_field(record, "ssn", TEST_ENCRYPTION_KEY) == record

    def test_already_encrypted_field_is_not_encrypted_twice(self) -> None:
        once = encrypt_field({"ssn": "123-45-6789"}, "ssn", TEST_ENCRYPTION_KEY)

        twice = encrypt_field(once, "ssn", TEST_ENCRYPTION_KEY)

        assert twice["ssn"] == once["ssn"]

    @pytest.mark.parametrize(
        "value",
        [["asthma", "hypertension"], {"code": "E11.9", "primary": True}, 42, True],
    )
    def test_non_string_values_round_trip_exactly(self, value) -> None:
        encrypted = encrypt_field({"conditions": value}, "conditions", TEST_ENCRYPTION_KEY)

        assert encrypted["conditions"].encoding == "json"
        decrypted = decrypt_field(encrypted, "conditions", TEST_ENCRYPTION_KEY)
        assert decrypted["conditions"] == value
        assert type(decrypted["conditions"]) is type(value)

    def test_decrypt_field_accepts_stored_mapping(self) -> None:
        encrypted = encrypt_field({"ssn": "123-45-6789"}, "ssn", TEST_ENCRYPTION_KEY)
        stored = {"ssn": encrypted["ssn"].to_storage()}

        assert decrypt_field(stored, "ssn", TEST_ENCRYPTION_KEY) == {"ssn": "123-45-6789"}

    def test_untagged_lookalike_is_left_alone(self) -> None:
        record = {"payload": {"content": "abc", "iv": "def", "tag": "ghi"}}

        assert decrypt_field(record, "payload", TEST_ENCRYPTION_KEY) == record

    def test_malformed_tagged_value_is_rejected(self) -> None:
        record = {"ssn": {"kind": "encrypted", "content": "abc"}}

        with pytest.raises(EncryptionError):
            decrypt_field(record, "ssn", TEST_ENCRYPTION_KEY)

    def test_object_helpers(self) -> None:
        record = {"ssn": "123-45-6789", "diagnosis": "F32.1", "firstName": "John"}

        encrypted = encrypt_object(record, ["ssn", "diagnosis", "missing"], TEST_ENCRYPTION_KEY)

        assert isinstance(encrypted["ssn"], EncryptedField)
        assert isinstance(encrypted["diagnosis"], EncryptedField)
        assert encrypted["firstName"] == "John"
        assert decrypt_object(encrypted, ["ssn", "diagnosis"], TEST_ENCRYPTION_KEY) == record
