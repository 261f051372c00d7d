"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the JSON snapshot file as the default local backend
2. Use in-memory storage for testing
3. Swap in SQLite or similar later without touching the record store

The interface is intentionally simple - a key-value store of text values.
Each shop collection is serialized into one value under its own key.
"""

from abc import ABC, abstractmethod
from typing import Optional

from shopbook.models.audit import AuditEvent, AuditEventType


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for the durable key-value text store.

    Values are opaque text; the caller decides how to serialize.
    Writes are whole-value replacements.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the text stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored text, or None if the key is absent
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store text under a key, replacing any previous value.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key existed
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """All keys currently stored."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity, in chronological order.
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
        event_type: Optional[AuditEventType] = None,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(StorageError):
    """Could not open the storage backend."""
    pass
