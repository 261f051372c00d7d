"""CSV export for spreadsheet tools."""

from shopbook.export.csv_export import (
    BOM,
    DEBTS_FILE_NAME,
    PRODUCTS_FILE_NAME,
    TRANSACTIONS_FILE_NAME,
    ExportError,
    debt_rows,
    export_debts,
    export_products,
    export_transactions,
    product_rows,
    to_csv,
    transaction_rows,
    write_csv,
)

__all__ = [
    "BOM",
    "DEBTS_FILE_NAME",
    "PRODUCTS_FILE_NAME",
    "TRANSACTIONS_FILE_NAME",
    "ExportError",
    "debt_rows",
    "export_debts",
    "export_products",
    "export_transactions",
    "product_rows",
    "to_csv",
    "transaction_rows",
    "write_csv",
]
