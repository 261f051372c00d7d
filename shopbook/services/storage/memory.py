"""In-memory storage backends, used by tests and as the UI's activity feed."""

from collections import deque
from typing import Optional

from shopbook.models.audit import AuditEvent, AuditEventType
from shopbook.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStoreInterface,
)


class InMemoryKeyValueStore(KeyValueStoreInterface):
    """Dict-backed key-value store. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._data)


class InMemoryAuditStorage(AuditStorageInterface):
    """
    Bounded append-only audit trail.

    Oldest events fall off once max_events is reached.
    """

    def __init__(self, max_events: int = 1000):
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        return [
            event for event in self._events
            if event.entity_type == entity_type and event.entity_id == entity_id
        ]

    def get_recent_events(
        self,
        limit: int = 100,
        event_type: Optional[AuditEventType] = None,
    ) -> list[AuditEvent]:
        events = [
            event for event in reversed(self._events)
            if event_type is None or event.event_type == event_type
        ]
        return events[:limit]
