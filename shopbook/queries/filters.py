"""
Search and filter helpers for the list views.

All text matching is a case-insensitive substring match; an empty search
matches everything. Results keep collection order.
"""

from typing import Iterable, Optional, Union

from shopbook.models.records import (
    Debt,
    DebtType,
    Product,
    Transaction,
    TransactionType,
)


ALL = "all"


def _matches(query: str, *values: str) -> bool:
    needle = query.strip().casefold()
    if not needle:
        return True
    return any(needle in value.casefold() for value in values)


def filter_products(
    products: Iterable[Product],
    search: str = "",
    category: Optional[str] = None,
) -> list[Product]:
    """
    Match on name or category text, optionally restricted to one category.

    Args:
        products: Products to filter
        search: Text to look for in name or category
        category: Exact category to keep; None or "" keeps all
    """
    return [
        product for product in products
        if _matches(search, product.name, product.category)
        and (not category or product.category == category)
    ]


def filter_transactions(
    transactions: Iterable[Transaction],
    search: str = "",
    transaction_type: Union[TransactionType, str] = ALL,
) -> list[Transaction]:
    """Match on description, optionally restricted to income or expense."""
    wanted = None if transaction_type == ALL else TransactionType(transaction_type)
    return [
        transaction for transaction in transactions
        if _matches(search, transaction.description)
        and (wanted is None or transaction.type == wanted)
    ]


def filter_debts(
    debts: Iterable[Debt],
    search: str = "",
    debt_type: Union[DebtType, str] = ALL,
) -> list[Debt]:
    """Match on the counterparty name, optionally restricted by debt type."""
    wanted = None if debt_type == ALL else DebtType(debt_type)
    return [
        debt for debt in debts
        if _matches(search, debt.person)
        and (wanted is None or debt.type == wanted)
    ]
