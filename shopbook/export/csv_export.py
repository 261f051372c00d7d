"""
Spreadsheet Export

Produces CSV text that spreadsheet tools open directly:
- a UTF-8 byte-order mark first, so Turkish characters display correctly
- a header row built from the column names
- comma-joined fields; a text field containing a comma is wrapped in
  double quotes, nothing else is quoted or escaped
- rows joined with '\\n'

Column headers are the shop's own (Turkish) labels.
"""

from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, Sequence

from shopbook.models.records import (
    Debt,
    DebtStatus,
    DebtType,
    Product,
    Transaction,
    TransactionType,
)


BOM = "\ufeff"

PRODUCTS_FILE_NAME = "urunler"
TRANSACTIONS_FILE_NAME = "islemler"
DEBTS_FILE_NAME = "borçlar"


class ExportError(ValueError):
    """Nothing to export."""
    pass


def _money(amount: Decimal) -> str:
    return f"{amount:.2f}"


def _cell(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"' if "," in value else value
    return str(value)


def to_csv(rows: Sequence[dict[str, Any]]) -> str:
    """
    Render rows (dicts sharing the same keys) as BOM-prefixed CSV text.

    Raises:
        ExportError: If there are no rows
    """
    if not rows:
        raise ExportError("There is nothing to export")
    lines = [",".join(rows[0].keys())]
    lines.extend(",".join(_cell(value) for value in row.values()) for row in rows)
    return BOM + "\n".join(lines)


def product_rows(products: Iterable[Product]) -> list[dict[str, Any]]:
    return [
        {
            "Ürün Adı": product.name,
            "Kategori": product.category,
            "Stok": product.stock,
            "Fiyat (₺)": _money(product.price),
            "Oluşturma Tarihi": product.created_at.date().isoformat(),
        }
        for product in products
    ]


def transaction_rows(transactions: Iterable[Transaction]) -> list[dict[str, Any]]:
    return [
        {
            "Tür": "Gelir" if transaction.type == TransactionType.INCOME else "Gider",
            "Açıklama": transaction.description,
            "Miktar (₺)": _money(transaction.amount),
            "Tarih": transaction.transaction_date.isoformat(),
        }
        for transaction in transactions
    ]


def debt_rows(debts: Iterable[Debt]) -> list[dict[str, Any]]:
    return [
        {
            "Kişi": debt.person,
            "Miktar (₺)": _money(debt.amount),
            "Tür": "Alacak" if debt.type == DebtType.RECEIVABLE else "Borç",
            "Durum": "Ödenmedi" if debt.status == DebtStatus.PENDING else "Ödendi",
            "Vade Tarihi": debt.due_date.isoformat() if debt.due_date else "-",
        }
        for debt in debts
    ]


def export_products(products: Iterable[Product]) -> str:
    return to_csv(product_rows(products))


def export_transactions(transactions: Iterable[Transaction]) -> str:
    return to_csv(transaction_rows(transactions))


def export_debts(debts: Iterable[Debt]) -> str:
    return to_csv(debt_rows(debts))


def write_csv(directory: Path, file_name: str, csv_text: str) -> Path:
    """Write CSV text to `<directory>/<file_name>.csv` and return the path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{file_name}.csv"
    path.write_text(csv_text, encoding="utf-8")
    return path
