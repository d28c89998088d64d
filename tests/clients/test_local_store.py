"""Tests for LocalStore - JSON-file key-value store."""

import pytest

from clients import create_store
from clients.errors import StorageError
from clients.local_store import LocalStore
from core.config import InvoiceConfig


class TestBasicOperations:
    """Get/set/delete operations."""

    def test_set_and_get(self, local_store):
        local_store.set("basic", "hello")
        assert local_store.get("basic") == "hello"

    def test_get_missing_returns_none(self, local_store):
        assert local_store.get("nonexistent") is None

    def test_missing_file_reads_as_empty(self, tmp_path):
        store = LocalStore(tmp_path / "nested" / "store.json")
        assert store.exists("anything") is False

    def test_delete_returns_true_when_existed(self, local_store):
        local_store.set("doomed", "value")
        assert local_store.delete("doomed") is True
        assert local_store.exists("doomed") is False

    def test_delete_returns_false_when_missing(self, local_store):
        assert local_store.delete("nonexistent") is False

    def test_keys_are_independent(self, local_store):
        local_store.set("a", "1")
        local_store.set("b", "2")
        local_store.delete("a")

        assert local_store.get("b") == "2"


class TestPersistence:
    """Data outlives the store object."""

    def test_new_instance_sees_previous_writes(self, store_path):
        LocalStore(store_path).set_json("invoices", [{"id": "INV-2024-001"}])

        assert LocalStore(store_path).get_json("invoices") == [{"id": "INV-2024-001"}]

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "deep" / "er" / "store.json"
        LocalStore(path).set("k", "v")
        assert path.exists()

    def test_leaves_no_temp_files(self, store_path):
        store = LocalStore(store_path)
        store.set("k", "v")
        store.set("k", "w")

        assert [p.name for p in store_path.parent.iterdir()] == [store_path.name]


class TestJsonOperations:
    """JSON serialization helpers."""

    def test_set_json_and_get_json(self, local_store):
        data = {"amount": 1000, "paymentDate": None}
        local_store.set_json("json", data)
        assert local_store.get_json("json") == data

    def test_get_json_missing_returns_none(self, local_store):
        assert local_store.get_json("nonexistent") is None

    def test_get_json_invalid_raises(self, local_store):
        local_store.set("broken", "{not json")
        with pytest.raises(StorageError, match="Invalid JSON"):
            local_store.get_json("broken")


class TestCorruptFile:
    """Fail-fast on unreadable files."""

    def test_garbage_file_raises(self, store_path):
        store_path.write_text("not json at all")
        with pytest.raises(StorageError, match="Corrupt"):
            LocalStore(store_path).get("k")

    def test_non_object_file_raises(self, store_path):
        store_path.write_text("[1, 2, 3]")
        with pytest.raises(StorageError, match="expected a JSON object"):
            LocalStore(store_path).get("k")

    def test_empty_file_reads_as_empty(self, store_path):
        store_path.write_text("")
        assert LocalStore(store_path).get("k") is None


class TestCreateStore:
    """Backend selection from config."""

    def test_local_backend(self, config):
        store = create_store(config)
        assert isinstance(store, LocalStore)
        assert store.path == config.storage_path

    def test_valkey_requires_url(self):
        with pytest.raises(ValueError, match="valkey_url"):
            create_store(InvoiceConfig(storage_backend="valkey"))
