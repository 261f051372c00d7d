"""
Audit Models for Shopbook

Every mutation of the shop's books is logged for audit purposes.
This provides:
1. Traceability of who-changed-what in a single-user app
2. Debugging information when persisted data goes bad
3. A "recent activity" feed for the UI

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator


DESCRIPTION_MAX_LENGTH = 500


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Products
    PRODUCT_ADDED = "product_added"
    PRODUCT_UPDATED = "product_updated"
    PRODUCT_DELETED = "product_deleted"

    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"

    # Debts
    DEBT_ADDED = "debt_added"
    DEBT_DELETED = "debt_deleted"
    DEBT_STATUS_UPDATED = "debt_status_updated"

    # Input validation
    VALIDATION_FAILED = "validation_failed"

    # Persistence
    STORE_LOADED = "store_loaded"
    COLLECTION_SAVED = "collection_saved"
    COLLECTION_QUARANTINED = "collection_quarantined"

    # Backups
    BACKUP_CREATED = "backup_created"
    BACKUP_SKIPPED = "backup_skipped"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'product', 'debt', 'collection')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    # User action tracking
    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    @field_validator("description", mode="before")
    @classmethod
    def clip_description(cls, v: Any) -> Any:
        """Long user text (names, paths) is shortened; details keep it whole."""
        if isinstance(v, str) and len(v) > DESCRIPTION_MAX_LENGTH:
            return v[:DESCRIPTION_MAX_LENGTH - 3] + "..."
        return v

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.product_added(product_id, name)
        event = AuditEventBuilder.backup_created(path)
    """

    @staticmethod
    def product_added(product_id: str, name: str, stock: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PRODUCT_ADDED,
            entity_type="product",
            entity_id=product_id,
            description=f"Product added: {name}",
            details={"name": name, "stock": stock},
            is_user_action=True,
        )

    @staticmethod
    def product_updated(product_id: str, changes: dict) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PRODUCT_UPDATED,
            entity_type="product",
            entity_id=product_id,
            description=f"Product updated: {', '.join(sorted(changes))}",
            details={key: str(value) for key, value in changes.items()},
            is_user_action=True,
        )

    @staticmethod
    def record_deleted(entity_type: str, entity_id: str) -> AuditEvent:
        event_type = {
            "product": AuditEventType.PRODUCT_DELETED,
            "transaction": AuditEventType.TRANSACTION_DELETED,
            "debt": AuditEventType.DEBT_DELETED,
        }[entity_type]
        return AuditEvent(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} deleted",
            is_user_action=True,
        )

    @staticmethod
    def transaction_added(
        transaction_id: str,
        transaction_type: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"{transaction_type.capitalize()} of {amount} recorded",
            details={"type": transaction_type, "amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def debt_added(
        debt_id: str,
        person: str,
        debt_type: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_ADDED,
            entity_type="debt",
            entity_id=debt_id,
            description=f"{debt_type.capitalize()} of {amount} for {person}",
            details={"person": person, "type": debt_type, "amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def debt_status_updated(
        debt_id: str,
        old_status: str,
        new_status: str,
    ) -> AuditEvent:
        reverted = old_status == "paid" and new_status == "pending"
        return AuditEvent(
            event_type=AuditEventType.DEBT_STATUS_UPDATED,
            severity=AuditSeverity.WARNING if reverted else AuditSeverity.INFO,
            entity_type="debt",
            entity_id=debt_id,
            description=f"Debt status changed from {old_status} to {new_status}",
            details={"old_status": old_status, "new_status": new_status},
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(entity_type: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            description=f"Rejected {entity_type} input with {len(issues)} issue(s)",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def store_loaded(counts: dict[str, int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_LOADED,
            entity_type="store",
            description="Collections loaded from local storage",
            details=counts,
        )

    @staticmethod
    def collection_saved(key: str, record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COLLECTION_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="collection",
            entity_id=key,
            description=f"Saved {record_count} record(s) under {key}",
            details={"record_count": record_count},
        )

    @staticmethod
    def collection_quarantined(
        key: str,
        quarantine_key: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COLLECTION_QUARANTINED,
            severity=AuditSeverity.WARNING,
            entity_type="collection",
            entity_id=key,
            description=f"Unreadable data under {key} moved to {quarantine_key}; starting empty",
            details={"quarantine_key": quarantine_key},
            error_message=error_message,
        )

    @staticmethod
    def backup_created(source: str, destination: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_CREATED,
            entity_type="backup",
            description=f"Backup written: {destination}",
            details={"source": source, "destination": destination},
        )

    @staticmethod
    def backup_skipped(source: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_SKIPPED,
            severity=AuditSeverity.DEBUG,
            entity_type="backup",
            description="No data file yet; backup skipped",
            details={"source": source},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            details=details or {},
            error_message=error_message,
        )
