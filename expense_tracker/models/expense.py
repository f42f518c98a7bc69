"""
Expense Models

These models define the schemas for expense records as they are stored
and as they leave the service.

DESIGN DECISION: Amounts are Decimal internally so that totals add up
exactly (12.50 + 2.75 == 15.25), but they are emitted as plain JSON numbers
because that is what clients expect.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Annotated, Any, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)
from pydantic.alias_generators import to_camel


def new_id() -> str:
    """Generate a new opaque record identifier."""
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _float_to_decimal(v: Any) -> Any:
    # Decimal(12.5) is exact but Decimal(0.1) is not; go through repr
    if isinstance(v, float):
        return Decimal(repr(v))
    return v


Amount = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


class Expense(BaseModel):
    """
    A single expense owned by one user.

    CRITICAL: owner_id is always set from the authenticated caller.
    It is never read from client input.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    # Identity
    id: str = Field(
        default_factory=new_id,
        description="Unique expense ID"
    )
    owner_id: str = Field(
        ...,
        min_length=1,
        description="ID of the user who created the expense"
    )

    # Expense data
    description: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    amount: Amount = Field(
        ...,
        description="Amount spent"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Free-text category"
    )
    expense_date: date = Field(
        default_factory=date.today,
        alias="date",
        description="Calendar date of the expense"
    )

    # Timestamps
    created_at: datetime = Field(
        default_factory=utcnow,
        description="When the expense was recorded"
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        description="Last update timestamp"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def amount_from_float(cls, v: Any) -> Any:
        return _float_to_decimal(v)

    def to_record(self) -> dict:
        """Convert to the camelCase dict persisted in the JSON collection."""
        return self.model_dump(mode="json", by_alias=True)


class ExpenseSummary(BaseModel):
    """
    Aggregate totals over one user's expenses.

    An owner with no expenses gets total=0, count=0, categories={}.
    """
    model_config = ConfigDict(populate_by_name=True)

    total: Amount = Field(
        default=Decimal("0"),
        description="Sum of all amounts"
    )
    count: int = Field(
        default=0,
        ge=0,
        description="Number of expenses"
    )
    category_totals: dict[str, Amount] = Field(
        default_factory=dict,
        alias="categories",
        description="Summed amount per category"
    )
