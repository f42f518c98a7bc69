"""
Tests for Expense Tracker

Test strategy:
1. Unit tests for individual components (models, validator, stores)
2. HTTP tests through FastAPI's TestClient
3. Every test uses its own temporary data directory
"""

import pytest
from datetime import date
from decimal import Decimal

from expense_tracker.models.expense import Expense, ExpenseSummary
from expense_tracker.models.user import Credentials, User
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestExpenseModel:
    """Tests for the Expense model."""

    def test_expense_creation(self):
        """Test Expense model creation with defaults."""
        expense = Expense(
            owner_id="u1",
            description="Lunch",
            amount=Decimal("12.50"),
            category="Food",
        )
        assert expense.id
        assert expense.owner_id == "u1"
        assert expense.expense_date == date.today()
        assert expense.updated_at is None

    def test_expense_ids_are_unique(self):
        """Test that two expenses never share an ID."""
        a = Expense(owner_id="u1", description="A", amount=1, category="x")
        b = Expense(owner_id="u1", description="B", amount=1, category="x")
        assert a.id != b.id

    def test_expense_strips_whitespace(self):
        """Test that whitespace is stripped from text fields."""
        expense = Expense(owner_id="u1", description="  Bus  ", amount=2, category=" Transportation ")
        assert expense.description == "Bus"
        assert expense.category == "Transportation"

    def test_expense_rejects_empty_description(self):
        """Test that an empty description is rejected."""
        with pytest.raises(ValueError):
            Expense(owner_id="u1", description="", amount=1, category="Food")

    def test_expense_record_uses_camel_case(self):
        """Test conversion to the persisted record."""
        expense = Expense(
            owner_id="u1",
            description="Lunch",
            amount=Decimal("12.50"),
            category="Food",
            expense_date=date(2024, 1, 5),
        )
        record = expense.to_record()
        assert record["ownerId"] == "u1"
        assert record["date"] == "2024-01-05"
        assert record["amount"] == 12.5
        assert "createdAt" in record
        assert record["updatedAt"] is None

    def test_expense_record_round_trip(self):
        """Test that a stored record reads back unchanged."""
        expense = Expense(
            owner_id="u1",
            description="Bus",
            amount=Decimal("2.75"),
            category="Transportation",
            expense_date=date(2024, 1, 6),
        )
        restored = Expense.model_validate(expense.to_record())
        assert restored.model_dump() == expense.model_dump()

    def test_float_amount_becomes_exact_decimal(self):
        """Test that float amounts from JSON are not carried as binary fractions."""
        expense = Expense(owner_id="u1", description="x", amount=0.1, category="y")
        assert expense.amount == Decimal("0.1")


class TestExpenseSummary:
    """Tests for the summary model."""

    def test_empty_summary(self):
        """Test the zero-expense summary."""
        summary = ExpenseSummary()
        assert summary.total == 0
        assert summary.count == 0
        assert summary.category_totals == {}

    def test_summary_json_shape(self):
        """Test the summary as sent to clients."""
        summary = ExpenseSummary(
            total=Decimal("15.25"),
            count=2,
            category_totals={"Food": Decimal("12.50")},
        )
        data = summary.model_dump(mode="json", by_alias=True)
        assert data == {"total": 15.25, "count": 2, "categories": {"Food": 12.5}}


class TestUserModels:
    """Tests for user-related models."""

    def test_user_record(self):
        """Test conversion to the persisted record."""
        user = User(username="alice", password_hash="hash")
        record = user.to_record()
        assert record["username"] == "alice"
        assert record["passwordHash"] == "hash"
        assert "createdAt" in record

    def test_user_repr_hides_hash(self):
        """Test that the hash does not appear in repr."""
        user = User(username="alice", password_hash="supersecrethash")
        assert "supersecrethash" not in repr(user)

    def test_credentials_default_empty(self):
        """Test that missing credentials default to empty strings."""
        creds = Credentials()
        assert creds.username == ""
        assert creds.password == ""


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_CREATED,
            description="Expense created",
        )
        assert event.event_type == AuditEventType.EXPENSE_CREATED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.expense_created(
            expense_id="e1",
            owner_id="u1",
            amount="12.50",
            category="Food",
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "expense_created"
        assert log_dict["actor_id"] == "u1"
        assert log_dict["details"]["category"] == "Food"

    def test_login_failed_is_warning(self):
        """Test AuditEventBuilder.login_failed."""
        event = AuditEventBuilder.login_failed("alice")
        assert event.event_type == AuditEventType.LOGIN_FAILED
        assert event.severity == AuditSeverity.WARNING
        assert event.details == {"username": "alice"}

    def test_storage_error_event(self):
        """Test AuditEventBuilder.storage_error."""
        event = AuditEventBuilder.storage_error(
            operation="create",
            error_message="disk full",
            actor_id="u1",
        )
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
