"""Derived figures and list filtering."""

from shopbook.queries.aggregation import (
    low_stock_products,
    net_profit,
    product_categories,
    summarize,
    total_expense,
    total_income,
    total_payables,
    total_receivables,
)
from shopbook.queries.filters import (
    filter_debts,
    filter_products,
    filter_transactions,
)

__all__ = [
    "filter_debts",
    "filter_products",
    "filter_transactions",
    "low_stock_products",
    "net_profit",
    "product_categories",
    "summarize",
    "total_expense",
    "total_income",
    "total_payables",
    "total_receivables",
]
