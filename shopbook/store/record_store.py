"""
Record Store

The single owner of the shop's three collections: products, transactions
and debts. It is constructed once at startup and handed to every consumer;
there is no module-level instance.

DESIGN DECISION: Collections are lists of immutable records. An update
builds a new record and puts it in the old one's slot, so insertion order
never changes and readers holding a previous tuple never see it mutate.

Lookups by an unknown id are silent no-ops. Every mutation that actually
changes a collection notifies the subscribed listeners with the full new
collection; this is how persistence hears about changes.
"""

from typing import Callable, Optional, Sequence

from shopbook.models.records import (
    Debt,
    DebtDraft,
    DebtStatus,
    Product,
    ProductDraft,
    ProductPatch,
    Transaction,
    TransactionDraft,
)


PRODUCTS = "products"
TRANSACTIONS = "transactions"
DEBTS = "debts"
COLLECTIONS = (PRODUCTS, TRANSACTIONS, DEBTS)

RECORD_TYPES = {
    PRODUCTS: Product,
    TRANSACTIONS: Transaction,
    DEBTS: Debt,
}

ChangeListener = Callable[[str, tuple], None]


class RecordStore:
    """
    In-memory home of all shop records.

    Read access returns tuples (snapshots). Point mutations are keyed by
    record id.
    """

    def __init__(self):
        self._collections: dict[str, list] = {name: [] for name in COLLECTIONS}
        self._listeners: list[ChangeListener] = []

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def products(self) -> tuple[Product, ...]:
        return tuple(self._collections[PRODUCTS])

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._collections[TRANSACTIONS])

    @property
    def debts(self) -> tuple[Debt, ...]:
        return tuple(self._collections[DEBTS])

    def collection(self, name: str) -> tuple:
        """Current contents of a collection by name."""
        return tuple(self._records(name))

    def get_product(self, product_id: str) -> Optional[Product]:
        return self._find(PRODUCTS, product_id)

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self._find(TRANSACTIONS, transaction_id)

    def get_debt(self, debt_id: str) -> Optional[Debt]:
        return self._find(DEBTS, debt_id)

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Register a listener called as listener(collection_name, records)
        after every effective mutation.

        Returns a function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def replace(self, name: str, records: Sequence) -> None:
        """
        Replace a whole collection without notifying listeners.

        Used for the initial load from storage, before anyone subscribes.
        """
        record_type = RECORD_TYPES[name]
        for record in records:
            if not isinstance(record, record_type):
                raise TypeError(
                    f"{name} expects {record_type.__name__}, got {type(record).__name__}"
                )
        self._collections[name] = list(records)

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def add_product(self, draft: ProductDraft) -> Product:
        product = Product(
            name=draft.name,
            category=draft.category,
            stock=draft.stock,
            price=draft.price,
        )
        self._append(PRODUCTS, product)
        return product

    def delete_product(self, product_id: str) -> bool:
        return self._delete(PRODUCTS, product_id)

    def update_product(
        self,
        product_id: str,
        patch: ProductPatch,
    ) -> Optional[Product]:
        """
        Merge the patch's explicitly set fields into a product.

        Returns the updated product, or None if the id is unknown.
        """
        current = self.get_product(product_id)
        if current is None:
            return None
        changes = patch.changes()
        if not changes:
            return current
        updated = current.model_copy(update=changes)
        self._replace_record(PRODUCTS, product_id, updated)
        return updated

    # ------------------------------------------------------------------
    # Transactions (append / delete only)
    # ------------------------------------------------------------------

    def add_transaction(self, draft: TransactionDraft) -> Transaction:
        transaction = Transaction(
            type=draft.type,
            amount=draft.amount,
            description=draft.description,
            transaction_date=draft.transaction_date,
        )
        self._append(TRANSACTIONS, transaction)
        return transaction

    def delete_transaction(self, transaction_id: str) -> bool:
        return self._delete(TRANSACTIONS, transaction_id)

    # ------------------------------------------------------------------
    # Debts
    # ------------------------------------------------------------------

    def add_debt(self, draft: DebtDraft) -> Debt:
        debt = Debt(
            person=draft.person,
            amount=draft.amount,
            type=draft.type,
            status=DebtStatus.PENDING,
            due_date=draft.due_date,
        )
        self._append(DEBTS, debt)
        return debt

    def delete_debt(self, debt_id: str) -> bool:
        return self._delete(DEBTS, debt_id)

    def update_debt_status(
        self,
        debt_id: str,
        status: DebtStatus,
    ) -> Optional[Debt]:
        """
        Set a debt's status. Both directions are allowed; the store does
        not police transitions.

        Returns the updated debt, or None if the id is unknown.
        """
        current = self.get_debt(debt_id)
        if current is None:
            return None
        status = DebtStatus(status)
        if current.status == status:
            return current
        updated = current.model_copy(update={"status": status})
        self._replace_record(DEBTS, debt_id, updated)
        return updated

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _records(self, name: str) -> list:
        try:
            return self._collections[name]
        except KeyError:
            raise KeyError(f"Unknown collection: {name}") from None

    def _find(self, name: str, record_id: str):
        for record in self._records(name):
            if record.id == record_id:
                return record
        return None

    def _append(self, name: str, record) -> None:
        self._collections[name] = [*self._records(name), record]
        self._notify(name)

    def _delete(self, name: str, record_id: str) -> bool:
        records = self._records(name)
        remaining = [record for record in records if record.id != record_id]
        if len(remaining) == len(records):
            return False
        self._collections[name] = remaining
        self._notify(name)
        return True

    def _replace_record(self, name: str, record_id: str, new_record) -> None:
        self._collections[name] = [
            new_record if record.id == record_id else record
            for record in self._records(name)
        ]
        self._notify(name)

    def _notify(self, name: str) -> None:
        snapshot = tuple(self._collections[name])
        for listener in list(self._listeners):
            listener(name, snapshot)
