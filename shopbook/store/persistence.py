"""
Persistence Adapter

Keeps the record store in sync with the durable key-value text store.

On startup every collection is read from its own key. Afterwards the
adapter listens to the record store and rewrites a collection's key in full
whenever that collection changes. There is no diffing and no cross-key
atomicity; the collections do not reference each other.

DESIGN DECISION: Unreadable stored data is NOT silently thrown away.
The collection still starts empty so the app remains usable, but the raw
text is first copied to `<key>.corrupt` and a warning is audited. The next
save overwrites the original key; the quarantined copy stays for recovery.
"""

from typing import Callable, Optional

from pydantic import TypeAdapter, ValidationError

from shopbook.audit import AuditLogger
from shopbook.models.audit import AuditEventBuilder
from shopbook.models.records import Debt, Product, Transaction
from shopbook.services.storage import KeyValueStoreInterface, StorageError
from shopbook.store.record_store import (
    COLLECTIONS,
    DEBTS,
    PRODUCTS,
    TRANSACTIONS,
    RecordStore,
)


COLLECTION_KEYS = {
    PRODUCTS: "shop_products",
    TRANSACTIONS: "shop_transactions",
    DEBTS: "shop_debts",
}

QUARANTINE_SUFFIX = ".corrupt"

_ADAPTERS = {
    PRODUCTS: TypeAdapter(list[Product]),
    TRANSACTIONS: TypeAdapter(list[Transaction]),
    DEBTS: TypeAdapter(list[Debt]),
}


class CollectionFormatError(ValueError):
    """Stored text is not a valid serialized collection."""
    pass


def serialize_collection(name: str, records) -> str:
    """Serialize a whole collection to JSON text (camelCase keys)."""
    return _ADAPTERS[name].dump_json(list(records), by_alias=True).decode("utf-8")


def deserialize_collection(name: str, text: str) -> list:
    """
    Parse JSON text into a list of records.

    Raises:
        CollectionFormatError: If the text is not JSON, not a list, or any
            record fails validation
    """
    try:
        return _ADAPTERS[name].validate_json(text)
    except ValidationError as e:
        raise CollectionFormatError(
            f"{name}: {e.error_count()} validation error(s): {e.errors()[0]['msg']}"
        ) from e


class PersistenceAdapter:
    """
    Loads collections at startup and saves them on every change.

    Usage:
        adapter = PersistenceAdapter(kv_store, audit_logger)
        adapter.load(record_store)   # read keys, then start listening
    """

    def __init__(
        self,
        kv_store: KeyValueStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
        keys: Optional[dict[str, str]] = None,
    ):
        self._kv_store = kv_store
        self._audit_logger = audit_logger or AuditLogger()
        self._keys = dict(keys or COLLECTION_KEYS)
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def is_attached(self) -> bool:
        return self._unsubscribe is not None

    def key_for(self, name: str) -> str:
        return self._keys[name]

    def load(self, record_store: RecordStore) -> dict[str, int]:
        """
        Populate the record store from storage, then start persisting.

        Absent keys and unreadable content both give an empty collection.
        A collection that fails to load never affects the others.

        Returns:
            Record count per collection
        """
        self.detach()

        counts = {}
        for name in COLLECTIONS:
            records = self._read_collection(name)
            record_store.replace(name, records)
            counts[name] = len(records)

        self._audit_logger.log(AuditEventBuilder.store_loaded(counts))

        # Writes start only once everything has been read
        self._unsubscribe = record_store.subscribe(self._on_change)
        return counts

    def detach(self) -> None:
        """Stop persisting changes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def save_collection(self, name: str, records) -> None:
        """
        Overwrite a collection's key with its full serialized form.

        Raises:
            StorageError: If the underlying write fails
        """
        key = self.key_for(name)
        records = tuple(records)
        try:
            self._kv_store.set(key, serialize_collection(name, records))
        except StorageError as e:
            self._audit_logger.log_error(
                error_type="collection_save_failed",
                error_message=str(e),
                details={"key": key, "record_count": len(records)},
            )
            raise
        self._audit_logger.log(
            AuditEventBuilder.collection_saved(key, len(records))
        )

    def save_all(self, record_store: RecordStore) -> None:
        for name in COLLECTIONS:
            self.save_collection(name, record_store.collection(name))

    def _on_change(self, name: str, records: tuple) -> None:
        self.save_collection(name, records)

    def _read_collection(self, name: str) -> list:
        key = self.key_for(name)
        text = self._kv_store.get(key)
        if text is None:
            return []

        try:
            return deserialize_collection(name, text)
        except CollectionFormatError as e:
            quarantine_key = key + QUARANTINE_SUFFIX
            self._kv_store.set(quarantine_key, text)
            self._audit_logger.log(
                AuditEventBuilder.collection_quarantined(
                    key=key,
                    quarantine_key=quarantine_key,
                    error_message=str(e),
                )
            )
            return []
