"""Record store and its persistence."""

from shopbook.store.persistence import (
    COLLECTION_KEYS,
    QUARANTINE_SUFFIX,
    CollectionFormatError,
    PersistenceAdapter,
    deserialize_collection,
    serialize_collection,
)
from shopbook.store.record_store import (
    COLLECTIONS,
    DEBTS,
    PRODUCTS,
    TRANSACTIONS,
    RecordStore,
)

__all__ = [
    "COLLECTIONS",
    "COLLECTION_KEYS",
    "DEBTS",
    "PRODUCTS",
    "QUARANTINE_SUFFIX",
    "TRANSACTIONS",
    "CollectionFormatError",
    "PersistenceAdapter",
    "RecordStore",
    "deserialize_collection",
    "serialize_collection",
]
