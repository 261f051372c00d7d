"""
Streamlit Frontend for Shopbook

This is the window the shop owner works in every day.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Every change is saved the moment it is made
3. Clear error messages in simple language
4. Confirmation before anything is deleted

The UI holds no data of its own: every page reads from the one ShopService
built at startup, and every button calls a ShopService operation.
"""

from datetime import date

import streamlit as st

from shopbook.audit import configure_logging
from shopbook.config import get_settings
from shopbook.export import (
    DEBTS_FILE_NAME,
    PRODUCTS_FILE_NAME,
    TRANSACTIONS_FILE_NAME,
    export_debts,
    export_products,
    export_transactions,
)
from shopbook.models.records import DebtStatus, DebtType, TransactionType
from shopbook.orchestrator import AppComponents, ShopService, create_app_components
from shopbook.queries import filter_debts, filter_products, filter_transactions
from shopbook.services.storage import StorageError
from shopbook.validation import RecordValidationError


# Page configuration
st.set_page_config(
    page_title="Shopbook",
    page_icon="🏪",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .big-number {
        font-size: 2.2em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


def money(amount) -> str:
    return f"₺{amount:,.2f}"


@st.cache_resource
def get_components() -> AppComponents:
    """Build the application once per server process (cached)."""
    settings = get_settings()
    configure_logging(settings.log_level)
    return create_app_components(settings)


def main():
    """Main application entry point."""
    components = get_components()
    service = components.service

    st.sidebar.title("🏪 Shopbook")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📦 Products", "💳 Finance", "👤 Debts", "🗄️ Backups & Activity"],
        index=0,
    )

    low_stock = service.low_stock_products()
    if low_stock:
        st.sidebar.warning(f"⚠️ {len(low_stock)} product(s) low on stock")

    if page == "📦 Products":
        render_products_page(service)
    elif page == "💳 Finance":
        render_finance_page(service)
    elif page == "👤 Debts":
        render_debts_page(service)
    elif page == "🗄️ Backups & Activity":
        render_backups_page(components)


def run_action(action, success_message: str) -> bool:
    """Run a service call, turning known failures into on-screen messages."""
    try:
        action()
    except RecordValidationError as e:
        st.error(str(e))
        return False
    except StorageError as e:
        st.error(f"The change is shown but could not be saved to disk: {e}")
        return False
    st.success(success_message)
    return True


def render_products_page(service: ShopService):
    """Render the products / inventory page."""
    st.title("📦 Products")

    with st.form("add_product", clear_on_submit=True):
        st.subheader("➕ Add Product")
        col1, col2, col3, col4 = st.columns(4)
        name = col1.text_input("Product name")
        category = col2.text_input("Category")
        stock = col3.text_input("Stock")
        price = col4.text_input("Price (₺)")
        if st.form_submit_button("Add", type="primary"):
            run_action(
                lambda: service.add_product(name, category, stock, price),
                f"Added {name}",
            )

    col1, col2, col3 = st.columns([3, 2, 1])
    search = col1.text_input("🔍 Search name or category")
    category_filter = col2.selectbox(
        "Category",
        options=[""] + service.categories(),
        format_func=lambda x: "All categories" if not x else x,
    )
    products = filter_products(service.store.products, search, category_filter)

    if products:
        col3.download_button(
            "⬇️ CSV",
            data=export_products(products).encode("utf-8"),
            file_name=f"{PRODUCTS_FILE_NAME}.csv",
            mime="text/csv",
        )

    st.markdown(f"### Product List ({len(products)})")
    if not products:
        st.info("No products yet.")
        return

    for product in products:
        col1, col2, col3, col4, col5 = st.columns([3, 2, 2, 2, 1])
        col1.markdown(f"**{product.name}**")
        col2.markdown(product.category)
        new_stock = col3.number_input(
            "Stock",
            value=product.stock,
            step=1,
            key=f"stock_{product.id}",
            label_visibility="collapsed",
        )
        if new_stock != product.stock:
            if run_action(
                lambda: service.update_stock(product.id, int(new_stock)),
                f"Stock updated for {product.name}",
            ):
                st.rerun()
        low = " ⚠️ low" if product.is_low_stock(service.low_stock_threshold) else ""
        col4.markdown(f"{money(product.price)}{low}")
        if col5.button("🗑️", key=f"del_product_{product.id}"):
            st.session_state.pending_delete = ("product", product.id, product.name)

    render_delete_confirmation(service)


def render_finance_page(service: ShopService):
    """Render income / expense tracking."""
    st.title("💳 Finance")

    summary = service.summary()
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Income", money(summary.total_income))
    col2.metric("Total Expense", money(summary.total_expense))
    col3.metric("Net Profit", money(summary.net_profit))

    with st.form("add_transaction", clear_on_submit=True):
        st.subheader("➕ Add Transaction")
        col1, col2, col3 = st.columns([1, 1, 2])
        transaction_type = col1.selectbox(
            "Type",
            options=list(TransactionType),
            format_func=lambda x: x.value.title(),
        )
        amount = col2.text_input("Amount (₺)")
        description = col3.text_input("Description")
        if st.form_submit_button("Add", type="primary"):
            run_action(
                lambda: service.add_transaction(transaction_type, amount, description),
                "Transaction recorded",
            )

    col1, col2, col3 = st.columns([3, 2, 1])
    search = col1.text_input("🔍 Search description")
    type_filter = col2.selectbox("Show", options=["all", "income", "expense"])
    transactions = filter_transactions(service.store.transactions, search, type_filter)

    if transactions:
        col3.download_button(
            "⬇️ CSV",
            data=export_transactions(transactions).encode("utf-8"),
            file_name=f"{TRANSACTIONS_FILE_NAME}.csv",
            mime="text/csv",
        )

    st.markdown(f"### History ({len(transactions)})")
    for transaction in transactions:
        col1, col2, col3, col4 = st.columns([2, 4, 2, 1])
        col1.markdown(transaction.transaction_date.strftime("%d-%m-%Y"))
        col2.markdown(transaction.description)
        sign = "+" if transaction.type == TransactionType.INCOME else "-"
        col3.markdown(f"{sign}{money(transaction.amount)}")
        if col4.button("🗑️", key=f"del_transaction_{transaction.id}"):
            st.session_state.pending_delete = (
                "transaction", transaction.id, transaction.description,
            )

    render_delete_confirmation(service)


def render_debts_page(service: ShopService):
    """Render receivables and payables."""
    st.title("👤 Debts")

    summary = service.summary()
    col1, col2 = st.columns(2)
    col1.metric(
        "Receivables",
        money(summary.total_receivables),
        f"{summary.pending_receivable_count} pending",
        delta_color="off",
    )
    col2.metric(
        "Payables",
        money(summary.total_payables),
        f"{summary.pending_payable_count} pending",
        delta_color="off",
    )

    with st.form("add_debt", clear_on_submit=True):
        st.subheader("➕ Add Debt")
        col1, col2, col3, col4 = st.columns(4)
        person = col1.text_input("Person")
        amount = col2.text_input("Amount (₺)")
        debt_type = col3.selectbox(
            "Type",
            options=list(DebtType),
            format_func=lambda x: "Owed to me" if x == DebtType.RECEIVABLE else "I owe",
        )
        due_date = col4.date_input("Due date", value=date.today())
        if st.form_submit_button("Add", type="primary"):
            run_action(
                lambda: service.add_debt(person, amount, debt_type, due_date),
                "Debt recorded",
            )

    search = st.text_input("🔍 Search person")
    for debt_type, title in (
        (DebtType.RECEIVABLE, "Owed to me"),
        (DebtType.PAYABLE, "I owe"),
    ):
        debts = filter_debts(service.store.debts, search, debt_type)
        st.markdown(f"### {title} ({len(debts)})")
        for debt in debts:
            col1, col2, col3, col4, col5 = st.columns([3, 2, 2, 2, 1])
            col1.markdown(f"**{debt.person}**")
            col2.markdown(money(debt.amount))
            col3.markdown(debt.due_date.strftime("%d-%m-%Y") if debt.due_date else "-")
            if debt.status == DebtStatus.PENDING:
                if col4.button("✅ Mark paid", key=f"pay_{debt.id}"):
                    if run_action(
                        lambda: service.mark_debt_paid(debt.id),
                        f"{debt.person} marked as paid",
                    ):
                        st.rerun()
            else:
                col4.markdown("Paid")
            if col5.button("🗑️", key=f"del_debt_{debt.id}"):
                st.session_state.pending_delete = ("debt", debt.id, debt.person)

    all_debts = filter_debts(service.store.debts, search)
    if all_debts:
        st.download_button(
            "⬇️ Export debts to CSV",
            data=export_debts(all_debts).encode("utf-8"),
            file_name=f"{DEBTS_FILE_NAME}.csv",
            mime="text/csv",
        )

    render_delete_confirmation(service)


def render_delete_confirmation(service: ShopService):
    """Ask before deleting whatever was queued for deletion."""
    pending = st.session_state.get("pending_delete")
    if not pending:
        return
    entity_type, entity_id, label = pending

    st.warning(f'"{label}" will be deleted. Are you sure?')
    col1, col2 = st.columns(2)
    if col1.button("Delete", type="primary", key="confirm_delete"):
        delete = {
            "product": service.delete_product,
            "transaction": service.delete_transaction,
            "debt": service.delete_debt,
        }[entity_type]
        st.session_state.pending_delete = None
        if run_action(lambda: delete(entity_id), f"Deleted {label}"):
            st.rerun()
    if col2.button("Cancel", key="cancel_delete"):
        st.session_state.pending_delete = None
        st.rerun()


def render_backups_page(components: AppComponents):
    """Render backup status and the recent activity log."""
    st.title("🗄️ Backups & Activity")
    settings = get_settings()
    scheduler = components.backup_scheduler

    st.markdown(f"**Data file:** `{settings.data_file_path}`")
    st.markdown(f"**Backup folder:** `{scheduler.backup_dir}`")
    st.markdown(
        f"**Automatic backups:** "
        f"{'every ' + str(settings.backup_interval_days) + ' day(s)' if scheduler.is_running else 'off'}"
    )

    if st.button("💾 Back up now", type="primary"):
        backup = scheduler.run_backup()
        if backup is None:
            st.info("Nothing to back up yet.")
        else:
            st.success(f"Backup written: {backup.name}")

    backups = scheduler.list_backups()
    st.markdown(f"### Backups ({len(backups)})")
    for backup in reversed(backups):
        st.markdown(f"- `{backup.name}`")

    st.markdown("---")
    st.markdown("### Recent Activity")
    for event in components.audit_storage.get_recent_events(limit=50):
        st.markdown(
            f"`{event.timestamp:%Y-%m-%d %H:%M}` · {event.description}"
        )


if __name__ == "__main__":
    main()
