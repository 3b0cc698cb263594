"""Tests for key-value persistence adapters."""

from pathlib import Path

import pytest

from voucherdesk.storage import JsonFileStore, MemoryStore


def test_missing_key_returns_default(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "data")
    assert store.load("cafe-voucher-log", []) == []


def test_save_then_load(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "data")
    store.save("cafe-voucher-students", [{"id": "s1", "name": "Zoë", "commendations": 2}])

    assert store.load("cafe-voucher-students", None) == [{"id": "s1", "name": "Zoë", "commendations": 2}]
    assert store.path_for("cafe-voucher-students").exists()
    assert not store.path_for("cafe-voucher-students").with_suffix(".tmp").exists()


def test_malformed_document_returns_default(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path)
    store.path_for("cafe-voucher-students").write_text("{not json", encoding="utf-8")
    assert store.load("cafe-voucher-students", "fallback") == "fallback"


def test_write_failure_is_swallowed(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    blocker = tmp_path / "blocked"
    blocker.write_text("a file where the data dir should be", encoding="utf-8")
    store = JsonFileStore(blocker)

    store.save("cafe-voucher-log", [])

    assert "Could not persist" in caplog.text


def test_unserializable_value_is_swallowed(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path)
    store.save("k", {"bad": object()})
    assert store.load("k", None) is None


def test_keys_are_sanitised(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path)
    assert store.path_for("../escape").parent == tmp_path


def test_memory_store_copies_values() -> None:
    store = MemoryStore()
    value = [{"id": "s1"}]
    store.save("k", value)
    value[0]["id"] = "changed"

    loaded = store.load("k", None)
    assert loaded == [{"id": "s1"}]
    loaded[0]["id"] = "again"
    assert store.data["k"] == [{"id": "s1"}]


def test_memory_store_fail_writes() -> None:
    store = MemoryStore(fail_writes=True)
    store.save("k", [1])
    assert store.load("k", "default") == "default"
    assert store.writes == []


def test_deeply_nested_document_returns_default(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path)
    store.path_for("cafe-voucher-students").write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
    assert store.load("cafe-voucher-students", "fallback") == "fallback"


def test_non_finite_numbers_load_as_floats(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path)
    store.path_for("cafe-voucher-log").write_text('[{"amountPence": Infinity}, 1e400]', encoding="utf-8")
    loaded = store.load("cafe-voucher-log", None)
    assert loaded[0]["amountPence"] == float("inf")
    assert loaded[1] == float("inf")
