"""
Tests for encryption key generation, storage and rotation.
"""

import os
import stat
from unittest.mock import AsyncMock, MagicMock

import pytest

from revcycle.core.exceptions.security_exceptions import KeyManagementError
from revcycle.infrastructure.security.encryption.key_management import (
    generate_encryption_key,
    load_encryption_key,
    rotate_encryption_key,
    save_encryption_key,
)


class TestKeyManagement:
    """Test suite for the key lifecycle helpers."""

    def test_generate_key_length(self) -> None:
        key = generate_encryption_key()

        assert len(bytes.fromhex(key)) == 32
        assert len(bytes.fromhex(generate_encryption_key(16))) == 16
        assert generate_encryption_key() != key

    def test_generate_rejects_non_positive_length(self) -> None:
        with pytest.raises(KeyManagementError):
            generate_encryption_key(0)

    def test_load_from_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("TEST_PHI_KEY", "  abcdef0123  \n")

        assert load_encryption_key("env:TEST_PHI_KEY") == "abcdef0123"

    def test_load_from_unset_environment_variable(self, monkeypatch) -> None:
        monkeypatch.delenv("TEST_PHI_KEY", raising=False)

        with pytest.raises(KeyManagementError):
            load_encryption_key("env:TEST_PHI_KEY")

    def test_save_and_load_file(self, tmp_path) -> None:
        key_path = tmp_path / "keys" / "phi.key"
        key = generate_encryption_key()

        save_encryption_key(key, str(key_path))

        assert load_encryption_key(str(key_path)) == key

    @pytest.mark.skipif(os.name != "posix", reason="POSIX file permissions")
    def test_saved_key_is_owner_only(self, tmp_path) -> None:
        key_path = tmp_path / "phi.key"

        save_encryption_key(generate_encryption_key(), str(key_path))

        assert stat.S_IMODE(key_path.stat().st_mode) == 0o600

    def test_load_missing_file(self, tmp_path) -> None:
        with pytest.raises(KeyManagementError):
            load_encryption_key(str(tmp_path / "missing.key"))

    def test_save_to_environment_is_rejected(self) -> None:
        with pytest.raises(KeyManagementError):
            save_encryption_key(generate_encryption_key(), "env:TEST_PHI_KEY")


@pytest.mark.asyncio
class TestKeyRotation:
    """Test suite for key rotation."""

    async def test_rotation_saves_new_key_and_calls_back(self, tmp_path) -> None:
        old_path = tmp_path / "old.key"
        new_path = tmp_path / "new.key"
        old_key = generate_encryption_key()
        save_encryption_key(old_key, str(old_path))
        reencrypt = MagicMock(return_value=None)

        new_key = await rotate_encryption_key(str(old_path), str(new_path), reencrypt)

        assert new_key != old_key
        assert load_encryption_key(str(new_path)) == new_key
        reencrypt.assert_called_once_with(old_key, new_key)

    async def test_rotation_awaits_async_callback(self, tmp_path) -> None:
        old_path = tmp_path / "old.key"
        save_encryption_key(generate_encryption_key(), str(old_path))
        reencrypt = AsyncMock()

        await rotate_encryption_key(str(old_path), str(tmp_path / "new.key"), reencrypt)

        reencrypt.assert_awaited_once()

    async def test_rotation_wraps_callback_failure(self, tmp_path) -> None:
        old_path = tmp_path / "old.key"
        save_encryption_key(generate_encryption_key(), str(old_path))
        reencrypt = MagicMock(side_effect=RuntimeError("database unavailable"))

        with pytest.raises(KeyManagementError):
            await rotate_encryption_key(str(old_path), str(tmp_path / "new.key"), reencrypt)

    async def test_rotation_without_old_key(self, tmp_path) -> None:
        with pytest.raises(KeyManagementError):
            await rotate_encryption_key(
                str(tmp_path / "missing.key"), str(tmp_path / "new.key")
            )
