# routers/expenses.py
from typing import Any

from fastapi import APIRouter, Body, Depends

from expense_tracker.api.dependencies import get_current_identity, get_expense_store
from expense_tracker.expenses import ExpenseStore
from expense_tracker.models.user import Identity
from expense_tracker.validation import ValidationError

router = APIRouter(prefix="/api/expenses", tags=["Expenses"])


def _as_object(body: Any) -> dict:
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


@router.get("")
async def list_expenses(
    identity: Identity = Depends(get_current_identity),
    store: ExpenseStore = Depends(get_expense_store),
):
    expenses = await store.list(identity)
    return [e.to_record() for e in expenses]


@router.post("", status_code=201)
async def create_expense(
    body: Any = Body(default=None),
    identity: Identity = Depends(get_current_identity),
    store: ExpenseStore = Depends(get_expense_store),
):
    data = _as_object(body)
    # ownerId (if any) in the body is ignored on purpose
    expense = await store.create(
        identity,
        description=data.get("description"),
        amount=data.get("amount"),
        category=data.get("category"),
        date=data.get("date"),
    )
    return expense.to_record()


# must be declared before /{expense_id}
@router.get("/summary")
async def summarize_expenses(
    identity: Identity = Depends(get_current_identity),
    store: ExpenseStore = Depends(get_expense_store),
):
    summary = await store.summarize(identity)
    return summary.model_dump(mode="json", by_alias=True)


@router.get("/{expense_id}")
async def get_expense(
    expense_id: str,
    identity: Identity = Depends(get_current_identity),
    store: ExpenseStore = Depends(get_expense_store),
):
    expense = await store.get(identity, expense_id)
    return expense.to_record()


@router.put("/{expense_id}")
async def update_expense(
    expense_id: str,
    body: Any = Body(default=None),
    identity: Identity = Depends(get_current_identity),
    store: ExpenseStore = Depends(get_expense_store),
):
    expense = await store.update(identity, expense_id, _as_object(body))
    return expense.to_record()


@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: str,
    identity: Identity = Depends(get_current_identity),
    store: ExpenseStore = Depends(get_expense_store),
):
    await store.delete(identity, expense_id)
    return {"message": "Expense deleted successfully"}
