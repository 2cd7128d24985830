"""
Core Data Models for Finance Tracker

These models define the strict schemas for all persisted data.
They are designed to:
1. Enforce the at-rest invariants (positive amounts, known types)
2. Serialize to the same camelCase JSON the browser app writes
3. Make partial edits explicit instead of merging arbitrary dicts

DESIGN DECISION: A stored Transaction is frozen. Edits produce a new
record through TransactionUpdate, so `id` and `createdAt` can never be
changed by accident.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """
    Direction of a money movement.

    No other value is ever persisted.
    """
    INCOME = "income"
    EXPENSE = "expense"


class Theme(str, Enum):
    """Colour theme preference."""
    LIGHT = "light"
    DARK = "dark"


DEFAULT_CATEGORIES: dict[TransactionType, tuple[str, ...]] = {
    TransactionType.INCOME: (
        "💰 Salary",
        "💼 Freelance",
        "🏢 Business",
        "📈 Investment",
        "🎁 Gift",
        "💵 Other Income",
    ),
    TransactionType.EXPENSE: (
        "🍔 Food & Dining",
        "🚗 Transportation",
        "🛍️ Shopping",
        "🎬 Entertainment",
        "💡 Bills & Utilities",
        "⚕️ Healthcare",
        "📚 Education",
        "✈️ Travel",
        "🛒 Groceries",
        "💸 Other Expense",
    ),
}


def new_transaction_id() -> str:
    """Generate a fresh transaction id."""
    return uuid4().hex


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


# Shared config: camelCase on the wire, snake_case in Python
_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    str_strip_whitespace=True,
)


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A single dated money movement tagged income or expense.

    CRITICAL: Only Transaction objects are persisted to storage.
    Raw form input goes through the validator first.
    """
    model_config = ConfigDict(**_WIRE_CONFIG, frozen=True)

    # Identity (immutable once assigned)
    id: str = Field(
        default_factory=new_transaction_id,
        min_length=1,
        description="Unique transaction ID"
    )
    created_at: dt.datetime = Field(
        default_factory=utcnow,
        description="When the transaction was recorded"
    )

    type: TransactionType
    category: str = Field(..., min_length=1)
    amount: Decimal = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Always positive; direction comes from `type`"
    )
    date: dt.date
    description: Optional[str] = None


class TransactionUpdate(BaseModel):
    """
    Explicit partial edit of a Transaction.

    Only fields that were actually passed are applied. Unknown fields
    are rejected, and `id`/`createdAt` are not editable at all.
    """
    model_config = ConfigDict(**_WIRE_CONFIG, extra="forbid")

    type: Optional[TransactionType] = None
    category: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[Decimal] = Field(default=None, gt=0, allow_inf_nan=False)
    date: Optional[dt.date] = None
    description: Optional[str] = None

    @model_validator(mode='after')
    def reject_cleared_required_fields(self) -> 'TransactionUpdate':
        """Required fields can be replaced but not cleared."""
        for name in ("type", "category", "amount", "date"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be cleared")
        return self

    def changes(self) -> dict:
        """Fields explicitly set on this update, keyed by field name."""
        return {name: getattr(self, name) for name in self.model_fields_set}

    def apply_to(self, transaction: Transaction) -> Transaction:
        """Return a copy of `transaction` with this update merged in."""
        return transaction.model_copy(update=self.changes())


class TransactionInput(BaseModel):
    """
    Raw transaction input as entered in a form.

    Nothing is checked here; every field is optional and loosely typed
    so that the validator can report all problems at once.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    type: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[Union[str, int, float, Decimal]] = None
    date: Optional[Union[dt.date, str]] = None
    description: Optional[str] = None

    @field_validator('type', mode='before')
    @classmethod
    def unwrap_enum(cls, v: Any) -> Any:
        """Accept TransactionType members as well as plain strings."""
        return v.value if isinstance(v, Enum) else v

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> 'TransactionInput':
        """Input pre-filled from a stored transaction, as an edit form would be."""
        return cls(
            type=transaction.type.value,
            category=transaction.category,
            amount=transaction.amount,
            date=transaction.date,
            description=transaction.description,
        )


# =============================================================================
# SETTINGS
# =============================================================================

class UserSettings(BaseModel):
    """
    User preferences. Singleton, overwritten wholesale on save.
    """
    model_config = _WIRE_CONFIG

    currency: str = Field(
        default="₹",
        min_length=1,
        max_length=5,
        description="Currency symbol shown next to amounts"
    )
    monthly_budget: Optional[Decimal] = Field(
        default=None,
        gt=0,
        allow_inf_nan=False,
        description="Monthly spending limit, if the user set one"
    )


# =============================================================================
# CSV TRANSFER MODELS
# =============================================================================

class ImportResult(BaseModel):
    """
    Outcome of decoding a CSV file.

    Partial success is normal: rejected rows are only counted.
    """

    transactions: list[Transaction] = Field(default_factory=list)
    skipped: int = Field(
        default=0,
        ge=0,
        description="Data rows that could not be imported"
    )

    @property
    def imported(self) -> int:
        return len(self.transactions)


class CsvExport(BaseModel):
    """An exported CSV document ready to be offered as a download."""

    filename: str
    content: str
    row_count: int = Field(ge=1)
