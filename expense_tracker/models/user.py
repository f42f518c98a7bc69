"""
User and Identity Models

A User is what we store. An Identity is what a verified token proves.
The password hash never leaves the storage and credential layers.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from expense_tracker.models.expense import new_id, utcnow


class User(BaseModel):
    """A registered user."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(
        default_factory=new_id,
        description="Unique user ID"
    )
    username: str = Field(
        ...,
        min_length=1,
        description="Unique, case-sensitive login name"
    )
    password_hash: str = Field(
        ...,
        min_length=1,
        repr=False,
        description="Salted one-way password hash"
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        description="When the user registered"
    )

    def to_record(self) -> dict:
        """Convert to the camelCase dict persisted in the JSON collection."""
        return self.model_dump(mode="json", by_alias=True)


class Identity(BaseModel):
    """The authenticated caller, as carried inside a bearer token."""
    model_config = ConfigDict(frozen=True)

    id: str
    username: str


class Credentials(BaseModel):
    """Username/password pair sent to register and login."""

    username: str = ""
    password: str = Field(default="", repr=False)


class TokenResponse(BaseModel):
    """Successful login payload."""

    token: str
    username: str
