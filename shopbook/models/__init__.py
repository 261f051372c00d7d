"""
Data Models Package

This package contains all Pydantic models used in Shopbook.
All data flowing through the system must conform to these schemas.
"""

from shopbook.models.records import (
    LOW_STOCK_THRESHOLD,
    Debt,
    DebtDraft,
    DebtStatus,
    DebtType,
    FinancialSummary,
    Product,
    ProductDraft,
    ProductPatch,
    Transaction,
    TransactionDraft,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)
from shopbook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "LOW_STOCK_THRESHOLD",
    "Debt",
    "DebtDraft",
    "DebtStatus",
    "DebtType",
    "FinancialSummary",
    "Product",
    "ProductDraft",
    "ProductPatch",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
