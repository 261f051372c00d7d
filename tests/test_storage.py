"""Tests for the key-value and audit storage backends."""

import json

import pytest

from shopbook.models.audit import AuditEventBuilder, AuditEventType
from shopbook.services.storage import (
    InMemoryAuditStorage,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    StorageError,
)


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "shop-data.json"


class TestJsonFileKeyValueStore:
    """Tests for the single-file JSON snapshot backend."""

    def test_missing_file_reads_empty(self, data_file):
        """Test a store with no file yet has no keys."""
        store = JsonFileKeyValueStore(data_file)
        assert store.get("shop_products") is None
        assert store.keys() == []
        assert not data_file.exists()

    def test_set_creates_parent_directory(self, data_file):
        """Test the first write creates the data folder."""
        store = JsonFileKeyValueStore(data_file)
        store.set("shop_products", "[]")
        assert data_file.exists()
        assert json.loads(data_file.read_text(encoding="utf-8")) == {"shop_products": "[]"}

    def test_values_survive_a_new_instance(self, data_file):
        """Test values are read back from disk."""
        JsonFileKeyValueStore(data_file).set("shop_debts", '[{"person": "Ayşe"}]')
        assert JsonFileKeyValueStore(data_file).get("shop_debts") == '[{"person": "Ayşe"}]'

    def test_non_ascii_is_kept_readable(self, data_file):
        """Test Turkish text is written unescaped."""
        JsonFileKeyValueStore(data_file).set("shop_products", "Kırtasiye")
        assert "Kırtasiye" in data_file.read_text(encoding="utf-8")

    def test_set_replaces_only_its_key(self, data_file):
        """Test writing one key keeps the others."""
        store = JsonFileKeyValueStore(data_file)
        store.set("a", "1")
        store.set("b", "2")
        store.set("a", "3")
        assert store.get("a") == "3"
        assert store.get("b") == "2"
        assert sorted(store.keys()) == ["a", "b"]

    def test_delete(self, data_file):
        """Test deleting present and absent keys."""
        store = JsonFileKeyValueStore(data_file)
        store.set("a", "1")
        assert store.delete("a") is True
        assert store.delete("a") is False
        assert store.get("a") is None

    def test_no_temporary_file_left_behind(self, data_file):
        """Test the atomic replace cleans up after itself."""
        store = JsonFileKeyValueStore(data_file)
        store.set("a", "1")
        assert [p.name for p in data_file.parent.iterdir()] == ["shop-data.json"]

    def test_unparseable_file_reads_empty(self, data_file):
        """Test a damaged snapshot is treated as empty."""
        data_file.parent.mkdir(parents=True)
        data_file.write_text("{oops", encoding="utf-8")
        store = JsonFileKeyValueStore(data_file)
        assert store.keys() == []
        assert store.get("shop_products") is None

    def test_non_object_file_reads_empty(self, data_file):
        """Test a JSON array at the top level is treated as empty."""
        data_file.parent.mkdir(parents=True)
        data_file.write_text("[1, 2]", encoding="utf-8")
        assert JsonFileKeyValueStore(data_file).keys() == []

    def test_unparseable_file_is_set_aside_before_overwrite(self, data_file):
        """Test the damaged snapshot survives the first write."""
        data_file.parent.mkdir(parents=True)
        damaged = '{"shop_products": "[{\\"id\\": \\"1\\"'
        data_file.write_text(damaged, encoding="utf-8")

        store = JsonFileKeyValueStore(data_file)
        store.set("shop_products", "[]")

        quarantine = data_file.with_name("shop-data.json.corrupt")
        assert quarantine.read_text(encoding="utf-8") == damaged
        assert json.loads(data_file.read_text(encoding="utf-8")) == {"shop_products": "[]"}

    def test_quarantine_happens_once(self, data_file):
        """Test later writes do not add more copies."""
        data_file.parent.mkdir(parents=True)
        data_file.write_text("[1, 2]", encoding="utf-8")
        store = JsonFileKeyValueStore(data_file)
        store.set("a", "1")
        store.set("b", "2")
        assert sorted(p.name for p in data_file.parent.iterdir()) == [
            "shop-data.json",
            "shop-data.json.corrupt",
        ]

    def test_earlier_quarantine_is_not_overwritten(self, data_file):
        """Test a second damaged file gets its own copy."""
        data_file.parent.mkdir(parents=True)
        data_file.with_name("shop-data.json.corrupt").write_text("first", encoding="utf-8")
        data_file.write_text("second", encoding="utf-8")
        JsonFileKeyValueStore(data_file).set("a", "1")
        assert data_file.with_name("shop-data.json.corrupt").read_text(encoding="utf-8") == "first"
        assert data_file.with_name("shop-data.json.corrupt.1").read_text(encoding="utf-8") == "second"

    def test_non_text_values_are_reserialized(self, data_file):
        """Test a hand-edited file with a raw list value still reads as text."""
        data_file.parent.mkdir(parents=True)
        data_file.write_text('{"shop_products": []}', encoding="utf-8")
        assert JsonFileKeyValueStore(data_file).get("shop_products") == "[]"

    def test_external_edits_are_seen(self, data_file):
        """Test the file is re-read on every access."""
        store = JsonFileKeyValueStore(data_file)
        store.set("a", "1")
        data_file.write_text('{"a": "2"}', encoding="utf-8")
        assert store.get("a") == "2"

    def test_write_failure_raises_storage_error(self, tmp_path):
        """Test an unwritable location surfaces as StorageError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        store = JsonFileKeyValueStore(blocker / "shop-data.json")
        with pytest.raises(StorageError):
            store.set("a", "1")


class TestInMemoryKeyValueStore:
    """Tests for the dict-backed store."""

    def test_basic_operations(self):
        """Test get / set / delete / keys."""
        store = InMemoryKeyValueStore({"a": "1"})
        store.set("b", "2")
        assert store.get("a") == "1"
        assert store.keys() == ["a", "b"]
        assert store.delete("a") is True
        assert store.delete("a") is False
        assert store.get("a") is None


class TestInMemoryAuditStorage:
    """Tests for the bounded audit trail."""

    def test_recent_events_newest_first(self):
        """Test ordering and limit."""
        storage = InMemoryAuditStorage()
        for i in range(5):
            storage.append_event(AuditEventBuilder.product_added(f"p{i}", "Kalem", i))
        recent = storage.get_recent_events(limit=2)
        assert [e.entity_id for e in recent] == ["p4", "p3"]

    def test_filter_by_event_type(self):
        """Test only the requested event type is returned."""
        storage = InMemoryAuditStorage()
        storage.append_event(AuditEventBuilder.product_added("p1", "Kalem", 1))
        storage.append_event(AuditEventBuilder.record_deleted("product", "p1"))
        events = storage.get_recent_events(event_type=AuditEventType.PRODUCT_DELETED)
        assert len(events) == 1

    def test_events_by_entity(self):
        """Test per-entity history is chronological."""
        storage = InMemoryAuditStorage()
        storage.append_event(AuditEventBuilder.product_added("p1", "Kalem", 1))
        storage.append_event(AuditEventBuilder.product_added("p2", "Silgi", 1))
        storage.append_event(AuditEventBuilder.record_deleted("product", "p1"))
        history = storage.get_events_by_entity("product", "p1")
        assert [e.event_type for e in history] == [
            AuditEventType.PRODUCT_ADDED,
            AuditEventType.PRODUCT_DELETED,
        ]

    def test_oldest_events_fall_off(self):
        """Test the trail is bounded."""
        storage = InMemoryAuditStorage(max_events=3)
        for i in range(5):
            storage.append_event(AuditEventBuilder.product_added(f"p{i}", "Kalem", i))
        assert [e.entity_id for e in storage.get_recent_events()] == ["p4", "p3", "p2"]
