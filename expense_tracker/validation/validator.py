"""
Expense Input Validation

Raw request bodies are untyped JSON. This module turns them into the
typed values the expense store works with, and reports every problem
it finds in one go rather than stopping at the first.

RULES:
- description and category are required, whitespace-stripped strings
- amount is required and must parse to a non-zero number that is
  finite both as a Decimal and as a float (the JSON representation);
  negative amounts only pass when allow_negative_amounts is enabled
- date is optional; null or a blank string counts as absent, otherwise
  it must be an ISO calendar date
- category is free text; the suggested list is advisory only

IMPORTANT: Validation NEVER silently fixes issues (other than trimming
surrounding whitespace). It reports them.
"""

import math
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field

from expense_tracker.config import AppSettings, get_settings


EXPENSE_FIELDS = ("description", "amount", "category", "date")


def _blank_date(value: Any) -> bool:
    # null or "" means "no date": today on create, unchanged on update
    return value is None or (isinstance(value, str) and not value.strip())


class ValidationIssue(BaseModel):
    """A single validation problem."""

    field: str = Field(..., description="Field with the issue")
    issue_type: str = Field(..., description="missing, invalid_type, invalid_value, ...")
    message: str = Field(..., description="Human-readable message")


class ValidationError(Exception):
    """Input is missing or malformed."""

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        self.issues = issues or []
        super().__init__(message)

    @classmethod
    def from_issues(cls, issues: list[ValidationIssue]) -> "ValidationError":
        missing = [i.field for i in issues if i.issue_type == "missing"]
        others = [i.message for i in issues if i.issue_type != "missing"]
        parts = []
        if missing:
            parts.append(f"Missing required fields: {', '.join(missing)}")
        parts.extend(others)
        return cls("; ".join(parts), issues)


class ExpenseValidator:
    """
    Validates expense payloads for create and update.

    Create requires every mandatory field. Update only looks at the
    fields that are present; a field sent as null counts as absent.
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    def _check_text(
        self,
        field: str,
        value: Any,
        issues: list[ValidationIssue],
    ) -> Optional[str]:
        if value is None:
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{field.capitalize()} is required",
            ))
            return None
        if not isinstance(value, str):
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_type",
                message=f"{field.capitalize()} must be a string",
            ))
            return None
        value = value.strip()
        if not value:
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{field.capitalize()} is required",
            ))
            return None
        return value

    def _check_amount(
        self,
        value: Any,
        issues: list[ValidationIssue],
    ) -> Optional[Decimal]:
        if value is None or (isinstance(value, str) and not value.strip()):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
            ))
            return None

        # bool is an int subclass; true/false is not an amount
        if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_type",
                message="Amount must be a number",
            ))
            return None

        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_type",
                message="Amount must be a number",
            ))
            return None

        if not amount.is_finite():
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be a finite number",
            ))
            return None
        # Amounts leave the service as JSON numbers (floats)
        if math.isinf(float(amount)):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount is out of range",
            ))
            return None
        if amount == 0 or float(amount) == 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must not be zero",
            ))
            return None
        if amount < 0 and not self._settings.allow_negative_amounts:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
            ))
            return None
        return amount

    def _check_date(
        self,
        value: Any,
        issues: list[ValidationIssue],
    ) -> Optional[date]:
        if isinstance(value, str):
            text = value.strip()
            try:
                return date.fromisoformat(text)
            except ValueError:
                pass
            try:
                return datetime.fromisoformat(text).date()
            except ValueError:
                pass
        issues.append(ValidationIssue(
            field="date",
            issue_type="invalid_value",
            message="Date must be an ISO date (YYYY-MM-DD)",
        ))
        return None

    @staticmethod
    def _require_mapping(payload: Any) -> Mapping:
        if not isinstance(payload, Mapping):
            raise ValidationError("Request body must be a JSON object")
        return payload

    def validate_new(self, payload: Any) -> dict[str, Any]:
        """
        Validate a create payload.

        Returns a dict with description, amount, category and, when the
        caller supplied one, expense_date.

        Raises:
            ValidationError: listing every problem found
        """
        payload = self._require_mapping(payload)
        issues: list[ValidationIssue] = []

        values: dict[str, Any] = {
            "description": self._check_text("description", payload.get("description"), issues),
            "amount": self._check_amount(payload.get("amount"), issues),
            "category": self._check_text("category", payload.get("category"), issues),
        }

        raw_date = payload.get("date")
        if not _blank_date(raw_date):
            values["expense_date"] = self._check_date(raw_date, issues)

        if issues:
            raise ValidationError.from_issues(issues)
        return values

    def validate_changes(self, payload: Any) -> dict[str, Any]:
        """
        Validate a partial update payload.

        Only description, amount, category and date are considered.
        Anything else (id, ownerId, createdAt, ...) is ignored.

        Raises:
            ValidationError: if a present field is invalid
        """
        payload = self._require_mapping(payload)
        issues: list[ValidationIssue] = []
        changes: dict[str, Any] = {}

        for field in EXPENSE_FIELDS:
            value = payload.get(field)
            if value is None or (field == "date" and _blank_date(value)):
                continue
            if field == "amount":
                changes["amount"] = self._check_amount(value, issues)
            elif field == "date":
                changes["expense_date"] = self._check_date(value, issues)
            else:
                changes[field] = self._check_text(field, value, issues)

        if issues:
            raise ValidationError.from_issues(issues)
        return changes

    def suggested_categories(self) -> list[str]:
        """Categories offered to clients; not enforced."""
        return self._settings.suggested_categories_list
