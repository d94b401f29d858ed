"""
Tests for LocalStorage and TokenStore.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from storefront.infrastructure.http.token_store import TokenStore
from storefront.infrastructure.storage import local_storage
from storefront.infrastructure.storage.local_storage import AUTH_TOKEN_KEY, LocalStorage


def test_roundtrip_and_keys(storage: LocalStorage) -> None:
    assert storage.get_item("app-state") is None
    assert storage.keys() == []

    storage.set_item("app-state", '{"cart":[]}')
    storage.set_item("auth-token", "abc")

    assert storage.get_item("app-state") == '{"cart":[]}'
    assert storage.keys() == ["app-state", "auth-token"]


def test_overwrite_leaves_no_temp_file(storage: LocalStorage) -> None:
    storage.set_item("app-state", "one")
    storage.set_item("app-state", "two")
    assert storage.get_item("app-state") == "two"
    assert sorted(p.name for p in storage.root.iterdir()) == ["app-state"]


def test_remove_is_idempotent(storage: LocalStorage) -> None:
    storage.set_item("auth-token", "abc")
    storage.remove_item("auth-token")
    storage.remove_item("auth-token")
    assert storage.get_item("auth-token") is None


@pytest.mark.parametrize("key", ["../escape", "a/b", "", "with space"])
def test_unsafe_keys_rejected(storage: LocalStorage, key: str) -> None:
    with pytest.raises(ValueError):
        storage.set_item(key, "x")


def test_default_root_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STOREFRONT_STORAGE_DIR", str(tmp_path / "custom"))
    assert LocalStorage().root == tmp_path / "custom"


def test_token_store_reads_lazily(storage: LocalStorage) -> None:
    storage.set_item(AUTH_TOKEN_KEY, "from-disk")
    tokens = TokenStore(storage)
    assert tokens.has_token()
    assert tokens.get_token() == "from-disk"


def test_token_store_empty_value_clears(tokens: TokenStore, storage: LocalStorage) -> None:
    tokens.set_token("abc")
    tokens.set_token("")
    assert tokens.get_token() is None
    assert storage.get_item(AUTH_TOKEN_KEY) is None


def test_token_store_survives_write_failure() -> None:
    broken = MagicMock(spec=LocalStorage)
    broken.set_item.side_effect = OSError("read-only file system")
    broken.get_item.return_value = None
    tokens = TokenStore(broken)

    tokens.set_token("abc")

    assert tokens.get_token() == "abc"


def test_failed_write_removes_temp_file(storage: LocalStorage, monkeypatch: pytest.MonkeyPatch) -> None:
    storage.set_item("app-state", "old")

    def disk_full(src: object, dst: object) -> None:
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(local_storage.os, "replace", disk_full)

    with pytest.raises(OSError):
        storage.set_item("app-state", "new")

    assert sorted(p.name for p in storage.root.iterdir()) == ["app-state"]
    assert storage.get_item("app-state") == "old"


def test_token_store_reads_storage_once() -> None:
    backing = MagicMock(spec=LocalStorage)
    backing.get_item.return_value = None
    tokens = TokenStore(backing)

    for _ in range(3):
        assert tokens.get_token() is None
    assert tokens.has_token() is False

    backing.get_item.assert_called_once_with(AUTH_TOKEN_KEY)
