"""
Core Data Models for Shopbook

These models define the schemas for every record the shop keeps:
products (inventory), income/expense transactions, and receivable/payable
debts. They are designed to:
1. Be serializable to the JSON text held in the local key-value store
2. Load snapshots written by the earlier desktop build (camelCase keys)
3. Stay immutable - the record store swaps whole records on update

DESIGN DECISION: Amounts are Decimal, never float. Sums of prices and
payments must be exact, and Decimal survives a JSON round-trip as a string.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


LOW_STOCK_THRESHOLD = 5


def new_record_id() -> str:
    """Opaque, collision-free identity for a new record."""
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money for a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class DebtType(str, Enum):
    """
    Who owes whom.

    RECEIVABLE: the counterparty owes the shop.
    PAYABLE: the shop owes the counterparty.
    """
    RECEIVABLE = "receivable"
    PAYABLE = "payable"


class DebtStatus(str, Enum):
    """Settlement status of a debt. Only PENDING debts count toward totals."""
    PENDING = "pending"
    PAID = "paid"


# =============================================================================
# STORED RECORDS
# =============================================================================

_RECORD_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    str_strip_whitespace=True,
)


class Product(BaseModel):
    """
    An inventory item.

    Stock and price are expected to be non-negative but this is not
    enforced; the shop owner may record corrections as negative stock.
    """
    model_config = _RECORD_CONFIG

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Opaque unique identifier"
    )
    name: str
    category: str
    stock: int
    price: Decimal = Field(
        ...,
        description="Unit price"
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        alias="createdAt",
        description="When the product was added"
    )

    def is_low_stock(self, threshold: int = LOW_STOCK_THRESHOLD) -> bool:
        """Stock strictly below the threshold is flagged as low."""
        return self.stock < threshold


class Transaction(BaseModel):
    """
    An income or expense entry.

    Transactions are never edited; a wrong entry is deleted and re-added.
    """
    model_config = _RECORD_CONFIG

    id: str = Field(default_factory=new_record_id, min_length=1)
    type: TransactionType
    amount: Decimal
    description: str
    transaction_date: date = Field(
        default_factory=date.today,
        alias="date",
        description="Calendar date the money moved"
    )


class Debt(BaseModel):
    """
    Money owed to or by the shop.

    A debt is created PENDING and moves to PAID when settled.
    """
    model_config = _RECORD_CONFIG

    id: str = Field(default_factory=new_record_id, min_length=1)
    person: str = Field(
        ...,
        description="Counterparty name"
    )
    amount: Decimal
    type: DebtType
    status: DebtStatus = DebtStatus.PENDING
    due_date: Optional[date] = Field(default=None, alias="dueDate")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")

    @property
    def is_pending(self) -> bool:
        return self.status == DebtStatus.PENDING


# =============================================================================
# MUTATION INPUTS
# =============================================================================

class ProductDraft(BaseModel):
    """Fields supplied by the caller when adding a product."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    stock: int
    price: Decimal


class TransactionDraft(BaseModel):
    """Fields supplied by the caller when adding a transaction."""
    model_config = ConfigDict(str_strip_whitespace=True)

    type: TransactionType
    amount: Decimal
    description: str = Field(..., min_length=1)
    transaction_date: date = Field(default_factory=date.today)


class DebtDraft(BaseModel):
    """
    Fields supplied by the caller when adding a debt.

    There is no status here: every new debt starts PENDING.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    person: str = Field(..., min_length=1)
    amount: Decimal
    type: DebtType = DebtType.RECEIVABLE
    due_date: Optional[date] = None


class ProductPatch(BaseModel):
    """
    Partial update for a product.

    Only fields that were explicitly given are merged into the stored
    product. Identity and creation time cannot be patched.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    stock: Optional[int] = None
    price: Optional[Decimal] = None

    def changes(self) -> dict:
        """The explicitly set, non-null fields."""
        return self.model_dump(exclude_unset=True, exclude_none=True)

    @property
    def is_empty(self) -> bool:
        return not self.changes()


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class FinancialSummary(BaseModel):
    """
    Aggregate figures derived from the current collections.

    Recomputed on every read; never stored.
    """
    model_config = ConfigDict(frozen=True)

    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")
    net_profit: Decimal = Decimal("0")
    total_receivables: Decimal = Decimal("0")
    total_payables: Decimal = Decimal("0")
    pending_receivable_count: int = Field(default=0, ge=0)
    pending_payable_count: int = Field(default=0, ge=0)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Result of validating the input of an add operation."""

    entity_type: str = Field(
        ...,
        description="Which record type was validated (product, transaction, debt)"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def missing_fields(self) -> list[str]:
        return [issue.field for issue in self.issues if issue.issue_type == "missing"]
