"""
Aggregation Engine

DESIGN DECISION: Totals are DERIVED, never stored.
Every figure is recomputed from the current collections on each call, so
there is no cache to invalidate and no way for a total to drift from the
records it summarizes. The collections are small-business sized; a linear
pass per read is cheap.

All sums are Decimal and start from Decimal("0").
"""

from decimal import Decimal
from typing import Iterable

from shopbook.models.records import (
    LOW_STOCK_THRESHOLD,
    Debt,
    DebtStatus,
    DebtType,
    FinancialSummary,
    Product,
    Transaction,
    TransactionType,
)
from shopbook.store.record_store import RecordStore


ZERO = Decimal("0")


def _sum_amounts(records: Iterable) -> Decimal:
    return sum((record.amount for record in records), ZERO)


def _pending(debts: Iterable[Debt], debt_type: DebtType) -> list[Debt]:
    return [
        debt for debt in debts
        if debt.type == debt_type and debt.status == DebtStatus.PENDING
    ]


def total_income(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of all income transactions."""
    return _sum_amounts(t for t in transactions if t.type == TransactionType.INCOME)


def total_expense(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of all expense transactions."""
    return _sum_amounts(t for t in transactions if t.type == TransactionType.EXPENSE)


def net_profit(transactions: Iterable[Transaction]) -> Decimal:
    """Income minus expense. Negative when the shop is losing money."""
    transactions = list(transactions)
    return total_income(transactions) - total_expense(transactions)


def total_receivables(debts: Iterable[Debt]) -> Decimal:
    """What counterparties still owe the shop. Paid debts are excluded."""
    return _sum_amounts(_pending(debts, DebtType.RECEIVABLE))


def total_payables(debts: Iterable[Debt]) -> Decimal:
    """What the shop still owes. Paid debts are excluded."""
    return _sum_amounts(_pending(debts, DebtType.PAYABLE))


def summarize(store: RecordStore) -> FinancialSummary:
    """Compute every aggregate figure from the store's current state."""
    transactions = store.transactions
    debts = store.debts

    income = total_income(transactions)
    expense = total_expense(transactions)

    return FinancialSummary(
        total_income=income,
        total_expense=expense,
        net_profit=income - expense,
        total_receivables=total_receivables(debts),
        total_payables=total_payables(debts),
        pending_receivable_count=len(_pending(debts, DebtType.RECEIVABLE)),
        pending_payable_count=len(_pending(debts, DebtType.PAYABLE)),
    )


def low_stock_products(
    products: Iterable[Product],
    threshold: int = LOW_STOCK_THRESHOLD,
) -> list[Product]:
    """Products whose stock is below the threshold, in collection order."""
    return [product for product in products if product.is_low_stock(threshold)]


def product_categories(products: Iterable[Product]) -> list[str]:
    """Distinct categories in first-seen order."""
    return list(dict.fromkeys(product.category for product in products))
