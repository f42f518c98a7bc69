"""
Expense Store

Owner-scoped create/read/update/delete over expense records, plus a
per-owner summary.

GUARANTEES:
- ownerId always comes from the authenticated Identity, never the payload
- An expense owned by someone else behaves exactly like a missing one
  (both raise NotFoundError), so ids of other users' records never leak
- Updates replace only the fields the caller sent
"""

from decimal import Decimal
from typing import Any, Mapping, Optional

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import Expense, ExpenseSummary, utcnow
from expense_tracker.models.user import Identity
from expense_tracker.services.storage import (
    ExpenseStorageInterface,
    NotFoundError,
    StorageError,
)
from expense_tracker.validation import ExpenseValidator


class ExpenseStore:
    """
    Business operations on one user's expenses.

    Every method takes the caller's Identity and only ever sees that
    caller's records.
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._validator = validator or ExpenseValidator()
        self._audit_logger = audit_logger

    async def _storage_failed(self, operation: str, error: Exception, identity: Identity) -> None:
        if self._audit_logger:
            await self._audit_logger.log_storage_error(
                operation=operation,
                error_message=str(error),
                actor_id=identity.id,
            )

    async def create(
        self,
        identity: Identity,
        description: Any,
        amount: Any,
        category: Any,
        date: Any = None,
    ) -> Expense:
        """
        Record a new expense for the caller.

        date defaults to today when omitted.

        Raises:
            ValidationError: If a required field is missing or malformed
            StorageError: If the expense could not be saved
        """
        values = self._validator.validate_new({
            "description": description,
            "amount": amount,
            "category": category,
            "date": date,
        })
        expense = Expense(owner_id=identity.id, **values)

        try:
            await self._storage.save_expense(expense)
        except StorageError as e:
            await self._storage_failed("create", e, identity)
            raise

        if self._audit_logger:
            await self._audit_logger.log_expense_created(
                expense_id=expense.id,
                owner_id=identity.id,
                amount=str(expense.amount),
                category=expense.category,
            )
        return expense

    async def list(self, identity: Identity) -> list[Expense]:
        """
        All of the caller's expenses, in insertion order.

        Sorting for display is the caller's business.
        """
        try:
            return await self._storage.list_expenses(identity.id)
        except StorageError as e:
            await self._storage_failed("list", e, identity)
            raise

    async def get(self, identity: Identity, expense_id: str) -> Expense:
        """
        One of the caller's expenses.

        Raises:
            NotFoundError: If missing or not owned by the caller
        """
        try:
            expense = await self._storage.get_expense(identity.id, expense_id)
        except StorageError as e:
            await self._storage_failed("get", e, identity)
            raise

        if expense is None:
            raise NotFoundError("Expense not found")
        return expense

    async def update(
        self,
        identity: Identity,
        expense_id: str,
        partial_fields: Mapping[str, Any],
    ) -> Expense:
        """
        Replace the fields present in partial_fields; keep the rest.

        Raises:
            ValidationError: If a present field is malformed
            NotFoundError: If missing or not owned by the caller
            StorageError: If the update could not be saved
        """
        changes = self._validator.validate_changes(partial_fields)
        current = await self.get(identity, expense_id)

        changes["updated_at"] = utcnow()
        updated = current.model_copy(update=changes)

        try:
            await self._storage.update_expense(updated)
        except NotFoundError:
            # Deleted between our read and our write
            raise NotFoundError("Expense not found")
        except StorageError as e:
            await self._storage_failed("update", e, identity)
            raise

        if self._audit_logger:
            await self._audit_logger.log_expense_updated(
                expense_id=updated.id,
                owner_id=identity.id,
                changed_fields=sorted(k for k in changes if k != "updated_at"),
            )
        return updated

    async def delete(self, identity: Identity, expense_id: str) -> None:
        """
        Permanently remove one of the caller's expenses.

        Raises:
            NotFoundError: If missing or not owned by the caller
            StorageError: If the delete could not be saved
        """
        try:
            await self._storage.delete_expense(identity.id, expense_id)
        except NotFoundError:
            raise NotFoundError("Expense not found")
        except StorageError as e:
            await self._storage_failed("delete", e, identity)
            raise

        if self._audit_logger:
            await self._audit_logger.log_expense_deleted(expense_id, identity.id)

    async def summarize(self, identity: Identity) -> ExpenseSummary:
        """
        Total, count and per-category totals of the caller's expenses.

        No expenses gives total=0, count=0, categories={}.
        """
        expenses = await self.list(identity)

        total = Decimal("0")
        category_totals: dict[str, Decimal] = {}
        for expense in expenses:
            total += expense.amount
            category_totals[expense.category] = (
                category_totals.get(expense.category, Decimal("0")) + expense.amount
            )

        return ExpenseSummary(
            total=total,
            count=len(expenses),
            category_totals=category_totals,
        )
