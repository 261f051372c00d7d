"""Tests for list search and filtering."""

from decimal import Decimal

import pytest

from shopbook.models.records import (
    Debt,
    DebtType,
    Product,
    Transaction,
    TransactionType,
)
from shopbook.queries import filter_debts, filter_products, filter_transactions


@pytest.fixture
def products():
    return [
        Product(name="Kalem", category="Kırtasiye", stock=10, price=Decimal("2.5")),
        Product(name="Süt", category="Gıda", stock=3, price=Decimal("20")),
        Product(name="Kurşun kalem", category="Kırtasiye", stock=1, price=Decimal("4")),
    ]


class TestFilterProducts:
    """Tests for product filtering."""

    def test_empty_search_keeps_everything(self, products):
        """Test no search and no category returns all, in order."""
        assert filter_products(products) == products
        assert filter_products(products, "   ") == products

    def test_search_is_case_insensitive_substring(self, products):
        """Test name matching ignores case."""
        result = filter_products(products, "KALEM")
        assert [p.name for p in result] == ["Kalem", "Kurşun kalem"]

    def test_search_matches_category(self, products):
        """Test category text is searched too."""
        assert [p.name for p in filter_products(products, "gıda")] == ["Süt"]

    def test_category_filter(self, products):
        """Test the exact category restriction combines with search."""
        assert filter_products(products, category="Gıda") == [products[1]]
        assert filter_products(products, "kurşun", "Kırtasiye") == [products[2]]
        assert filter_products(products, "süt", "Kırtasiye") == []


class TestFilterTransactions:
    """Tests for transaction filtering."""

    def test_type_and_search(self):
        """Test type restriction and description search."""
        income = Transaction(type=TransactionType.INCOME, amount=Decimal("5"), description="Satış")
        expense = Transaction(type=TransactionType.EXPENSE, amount=Decimal("5"), description="Kira")
        transactions = [income, expense]

        assert filter_transactions(transactions) == transactions
        assert filter_transactions(transactions, transaction_type="expense") == [expense]
        assert filter_transactions(transactions, transaction_type=TransactionType.INCOME) == [income]
        assert filter_transactions(transactions, "kir") == [expense]

    def test_unknown_type_raises(self):
        """Test a typo in the type is not silently ignored."""
        with pytest.raises(ValueError):
            filter_transactions([], transaction_type="refund")


class TestFilterDebts:
    """Tests for debt filtering."""

    def test_person_search_and_type(self):
        """Test counterparty search and type restriction."""
        ali = Debt(person="Ali Veli", amount=Decimal("100"), type=DebtType.RECEIVABLE)
        supplier = Debt(person="Toptancı", amount=Decimal("40"), type=DebtType.PAYABLE)
        debts = [ali, supplier]

        assert filter_debts(debts, "veli") == [ali]
        assert filter_debts(debts, debt_type=DebtType.PAYABLE) == [supplier]
        assert filter_debts(debts, "ali", "payable") == []
