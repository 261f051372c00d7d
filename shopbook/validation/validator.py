"""
Input Validation for Add Operations

DESIGN DECISION: Validation happens BEFORE any state changes.
An add operation either passes validation and mutates the store, or it
raises RecordValidationError and nothing is touched.

Checks, in order:
- Required field presence (None or blank text counts as missing)
- Format coercion (form input arrives as text: "10", "2.50")

Value ranges are deliberately NOT checked: negative stock or a zero price
are recorded as given.

IMPORTANT: Validation NEVER silently fixes issues beyond trimming
whitespace. Every problem found is reported back at once.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import ValidationError

from shopbook.models.records import (
    DebtDraft,
    DebtType,
    ProductDraft,
    TransactionDraft,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)


class RecordValidationError(ValueError):
    """Input for an add operation is incomplete or malformed."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(RecordValidator.get_user_friendly_summary(result))


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


class RecordValidator:
    """
    Turns raw caller input into typed drafts, or reports what is wrong.
    """

    def _require(
        self,
        issues: list[ValidationIssue],
        field: str,
        value: Any,
        label: str,
    ) -> bool:
        if _is_missing(value):
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{label} is required",
            ))
            return False
        return True

    def _coerce_int(
        self,
        issues: list[ValidationIssue],
        field: str,
        value: Any,
    ) -> Optional[int]:
        if isinstance(value, bool):
            value = None
        elif isinstance(value, int):
            return value
        elif isinstance(value, float) and value.is_integer():
            return int(value)
        elif isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                pass
        issues.append(ValidationIssue(
            field=field,
            issue_type="invalid_format",
            message=f"{field} must be a whole number",
        ))
        return None

    def _coerce_decimal(
        self,
        issues: list[ValidationIssue],
        field: str,
        value: Any,
    ) -> Optional[Decimal]:
        if not isinstance(value, bool):
            try:
                number = Decimal(str(value).strip())
            except InvalidOperation:
                number = None
            if number is not None and number.is_finite():
                return number
        issues.append(ValidationIssue(
            field=field,
            issue_type="invalid_format",
            message=f"{field} must be a number",
        ))
        return None

    def _coerce_enum(self, issues, field, value, enum_type):
        try:
            return enum_type(value)
        except ValueError:
            allowed = ", ".join(member.value for member in enum_type)
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_value",
                message=f"{field} must be one of: {allowed}",
            ))
            return None

    def _require_text(
        self,
        issues: list[ValidationIssue],
        field: str,
        value: Any,
        label: str,
    ) -> bool:
        if not self._require(issues, field, value, label):
            return False
        if not isinstance(value, str):
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_format",
                message=f"{label} must be text",
            ))
            return False
        return True

    def _coerce_date(
        self,
        issues: list[ValidationIssue],
        field: str,
        value: Any,
    ) -> Optional[date]:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                return date.fromisoformat(value.strip())
            except ValueError:
                pass
        issues.append(ValidationIssue(
            field=field,
            issue_type="invalid_format",
            message=f"{field} must be a date (YYYY-MM-DD)",
        ))
        return None

    def _raise_if_invalid(
        self,
        entity_type: str,
        issues: list[ValidationIssue],
    ) -> None:
        result = ValidationResult(entity_type=entity_type, issues=issues)
        if result.has_errors:
            raise RecordValidationError(result)

    def _build(self, entity_type: str, issues: list[ValidationIssue], model, **fields):
        """Construct the draft, reporting anything the model itself rejects."""
        self._raise_if_invalid(entity_type, issues)
        try:
            return model(**fields)
        except ValidationError as e:
            for error in e.errors():
                issues.append(ValidationIssue(
                    field=".".join(str(part) for part in error["loc"]) or entity_type,
                    issue_type="invalid_format",
                    message=error["msg"],
                ))
            self._raise_if_invalid(entity_type, issues)
            raise

    def product_draft(
        self,
        name: Any,
        category: Any,
        stock: Any,
        price: Any,
    ) -> ProductDraft:
        """
        Validate product input. All four fields are required.

        Raises:
            RecordValidationError: If any field is missing or malformed
        """
        issues: list[ValidationIssue] = []
        self._require_text(issues, "name", name, "Product name")
        self._require_text(issues, "category", category, "Category")
        stock_value = None
        price_value = None
        if self._require(issues, "stock", stock, "Stock"):
            stock_value = self._coerce_int(issues, "stock", stock)
        if self._require(issues, "price", price, "Price"):
            price_value = self._coerce_decimal(issues, "price", price)

        return self._build(
            "product",
            issues,
            ProductDraft,
            name=name,
            category=category,
            stock=stock_value,
            price=price_value,
        )

    def transaction_draft(
        self,
        transaction_type: Any,
        amount: Any,
        description: Any,
        transaction_date: Optional[date] = None,
    ) -> TransactionDraft:
        """
        Validate transaction input. Amount and description are required.

        Raises:
            RecordValidationError: If any field is missing or malformed
        """
        issues: list[ValidationIssue] = []
        type_value = self._coerce_enum(issues, "type", transaction_type, TransactionType)
        amount_value = None
        if self._require(issues, "amount", amount, "Amount"):
            amount_value = self._coerce_decimal(issues, "amount", amount)
        self._require_text(issues, "description", description, "Description")

        fields = dict(type=type_value, amount=amount_value, description=description)
        if transaction_date is not None:
            fields["transaction_date"] = self._coerce_date(
                issues, "transaction_date", transaction_date
            )
        return self._build("transaction", issues, TransactionDraft, **fields)

    def debt_draft(
        self,
        person: Any,
        amount: Any,
        debt_type: Any = DebtType.RECEIVABLE,
        due_date: Optional[date] = None,
    ) -> DebtDraft:
        """
        Validate debt input. Person and amount are required.

        Raises:
            RecordValidationError: If any field is missing or malformed
        """
        issues: list[ValidationIssue] = []
        self._require_text(issues, "person", person, "Person name")
        amount_value = None
        if self._require(issues, "amount", amount, "Amount"):
            amount_value = self._coerce_decimal(issues, "amount", amount)
        type_value = self._coerce_enum(issues, "type", debt_type, DebtType)
        due_date_value = None
        if due_date is not None:
            due_date_value = self._coerce_date(issues, "due_date", due_date)

        return self._build(
            "debt",
            issues,
            DebtDraft,
            person=person,
            amount=amount_value,
            type=type_value,
            due_date=due_date_value,
        )

    @staticmethod
    def get_user_friendly_summary(result: ValidationResult) -> str:
        """
        Generate a short message for display.
        """
        if result.is_valid:
            return "Everything looks good."
        missing = result.missing_fields
        if missing and len(missing) == result.error_count:
            return "Please fill in: " + ", ".join(missing)
        return "; ".join(
            issue.message for issue in result.issues if issue.severity == "error"
        )
