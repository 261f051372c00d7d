"""
Main Orchestrator for Shopbook

This module ties together all the components and defines the mutation
flow used by the UI:

    UI action → validate → record store mutates → persistence writes
              → audit event → next read recomputes the totals

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is added without passing validation first
- Lookups of unknown ids are quiet no-ops, never errors
- Every effective change is audited

The record store is created once by create_app_components() and handed
to the service; nothing else creates one.
"""

from datetime import date
from typing import Any, NamedTuple, Optional

from shopbook.audit import AuditLogger
from shopbook.backup import BackupScheduler
from shopbook.config import AppSettings, get_settings
from shopbook.models.audit import AuditEventBuilder
from shopbook.models.records import (
    LOW_STOCK_THRESHOLD,
    Debt,
    DebtStatus,
    DebtType,
    FinancialSummary,
    Product,
    ProductPatch,
    Transaction,
)
from shopbook.queries import low_stock_products, product_categories, summarize
from shopbook.services.storage import (
    InMemoryAuditStorage,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
)
from shopbook.store import PersistenceAdapter, RecordStore
from shopbook.validation import RecordValidationError, RecordValidator


class ShopService:
    """
    Mutation API over the record store.

    Add operations take raw (form) input, validate it and raise
    RecordValidationError before anything changes. Update and delete
    operations are keyed by id and do nothing for unknown ids.
    """

    def __init__(
        self,
        record_store: RecordStore,
        validator: Optional[RecordValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        low_stock_threshold: int = LOW_STOCK_THRESHOLD,
    ):
        self._store = record_store
        self._validator = validator or RecordValidator()
        self._audit_logger = audit_logger or AuditLogger()
        self._low_stock_threshold = low_stock_threshold

    @property
    def store(self) -> RecordStore:
        return self._store

    @property
    def low_stock_threshold(self) -> int:
        return self._low_stock_threshold

    def _validated(self, build, *args):
        try:
            return build(*args)
        except RecordValidationError as e:
            self._audit_logger.log(AuditEventBuilder.validation_failed(
                entity_type=e.result.entity_type,
                issues=[issue.model_dump() for issue in e.result.issues],
            ))
            raise

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def add_product(
        self,
        name: Any,
        category: Any,
        stock: Any,
        price: Any,
    ) -> Product:
        draft = self._validated(
            self._validator.product_draft, name, category, stock, price
        )
        product = self._store.add_product(draft)
        self._audit_logger.log(
            AuditEventBuilder.product_added(product.id, product.name, product.stock)
        )
        return product

    def update_product(
        self,
        product_id: str,
        patch: ProductPatch,
    ) -> Optional[Product]:
        """Merge a patch into a product. None if the id is unknown."""
        product = self._store.update_product(product_id, patch)
        if product is not None and not patch.is_empty:
            self._audit_logger.log(
                AuditEventBuilder.product_updated(product_id, patch.changes())
            )
        return product

    def update_stock(self, product_id: str, stock: int) -> Optional[Product]:
        return self.update_product(product_id, ProductPatch(stock=stock))

    def delete_product(self, product_id: str) -> bool:
        return self._deleted("product", product_id, self._store.delete_product(product_id))

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def add_transaction(
        self,
        transaction_type: Any,
        amount: Any,
        description: Any,
        transaction_date: Optional[date] = None,
    ) -> Transaction:
        draft = self._validated(
            self._validator.transaction_draft,
            transaction_type,
            amount,
            description,
            transaction_date,
        )
        transaction = self._store.add_transaction(draft)
        self._audit_logger.log(AuditEventBuilder.transaction_added(
            transaction.id,
            transaction.type.value,
            str(transaction.amount),
        ))
        return transaction

    def delete_transaction(self, transaction_id: str) -> bool:
        return self._deleted(
            "transaction",
            transaction_id,
            self._store.delete_transaction(transaction_id),
        )

    # ------------------------------------------------------------------
    # Debts
    # ------------------------------------------------------------------

    def add_debt(
        self,
        person: Any,
        amount: Any,
        debt_type: Any = DebtType.RECEIVABLE,
        due_date: Optional[date] = None,
    ) -> Debt:
        draft = self._validated(
            self._validator.debt_draft, person, amount, debt_type, due_date
        )
        debt = self._store.add_debt(draft)
        self._audit_logger.log(AuditEventBuilder.debt_added(
            debt.id,
            debt.person,
            debt.type.value,
            str(debt.amount),
        ))
        return debt

    def delete_debt(self, debt_id: str) -> bool:
        return self._deleted("debt", debt_id, self._store.delete_debt(debt_id))

    def update_debt_status(
        self,
        debt_id: str,
        status: DebtStatus,
    ) -> Optional[Debt]:
        """
        Set a debt's status in either direction.

        Reverting paid → pending is allowed and audited as a warning.
        """
        current = self._store.get_debt(debt_id)
        if current is None:
            return None
        debt = self._store.update_debt_status(debt_id, status)
        if debt.status != current.status:
            self._audit_logger.log(AuditEventBuilder.debt_status_updated(
                debt_id,
                current.status.value,
                debt.status.value,
            ))
        return debt

    def mark_debt_paid(self, debt_id: str) -> Optional[Debt]:
        return self.update_debt_status(debt_id, DebtStatus.PAID)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def summary(self) -> FinancialSummary:
        return summarize(self._store)

    def low_stock_products(self) -> list[Product]:
        return low_stock_products(self._store.products, self._low_stock_threshold)

    def categories(self) -> list[str]:
        return product_categories(self._store.products)

    def _deleted(self, entity_type: str, entity_id: str, removed: bool) -> bool:
        if removed:
            self._audit_logger.log(
                AuditEventBuilder.record_deleted(entity_type, entity_id)
            )
        return removed


class AppComponents(NamedTuple):
    service: ShopService
    persistence: PersistenceAdapter
    backup_scheduler: BackupScheduler
    audit_storage: InMemoryAuditStorage


def create_app_components(
    settings: Optional[AppSettings] = None,
    kv_store: Optional[KeyValueStoreInterface] = None,
    start_backups: Optional[bool] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use; defaults to get_settings()
        kv_store: Key-value store to load from and save to. Defaults to the
                 JSON snapshot file under the data directory.
        start_backups: Whether to start the backup timer. Defaults to
                 settings.backups_enabled.

    Returns:
        AppComponents with the loaded, persisting service
    """
    settings = settings or get_settings()
    if start_backups is None:
        start_backups = settings.backups_enabled

    audit_storage = InMemoryAuditStorage()
    audit_logger = AuditLogger(audit_storage)

    if kv_store is None:
        kv_store = JsonFileKeyValueStore(settings.data_file_path)

    record_store = RecordStore()
    persistence = PersistenceAdapter(kv_store, audit_logger)
    persistence.load(record_store)

    service = ShopService(
        record_store,
        validator=RecordValidator(),
        audit_logger=audit_logger,
        low_stock_threshold=settings.low_stock_threshold,
    )

    backup_scheduler = BackupScheduler(
        source_file=settings.data_file_path,
        backup_dir=settings.backup_dir_path,
        interval=settings.backup_interval,
        audit_logger=audit_logger,
    )
    if start_backups:
        backup_scheduler.start()

    return AppComponents(service, persistence, backup_scheduler, audit_storage)
