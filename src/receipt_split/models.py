"""Pydantic domain models for Receipt Split."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Upper bound for one expense; shares and transfers stay within decimal precision
MAX_AMOUNT = Decimal("999999999999.99")

# ============================================================================
# Roster Models
# ============================================================================


class User(BaseModel):
    """A member of the fixed roster."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)


# ============================================================================
# Expense Models
# ============================================================================


class Expense(BaseModel):
    """A shared expense with its mandatory receipt photo.

    Expenses are immutable once created and only ever appended to the ledger.
    The amount is split evenly across ``participants``; the payer may or may
    not be one of them.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    description: str
    amount: Decimal = Field(gt=0, le=MAX_AMOUNT)
    paid_by: str = Field(min_length=1)  # user id
    participants: list[str] = Field(min_length=1)  # user ids
    date: datetime = Field(default_factory=datetime.now)
    receipt_uri: str = Field(min_length=1)  # path of the stored receipt photo

    @field_validator("description")
    @classmethod
    def _strip_description(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("description is required")
        return value

    @field_validator("participants")
    @classmethod
    def _unique_participants(cls, value: list[str]) -> list[str]:
        if len(set(value)) != len(value):
            raise ValueError("participants must not repeat")
        return value

    @property
    def share(self) -> Decimal:
        """Unrounded amount owed by each participant."""
        return self.amount / len(self.participants)


# ============================================================================
# Settlement Models
# ============================================================================


class Balance(BaseModel):
    """A directed transfer that settles part of the group's debts.

    Serialized as ``{"from", "to", "amount"}``; use ``model_dump(by_alias=True)``
    since ``from`` is a Python keyword.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: str = Field(alias="from")  # debtor display name
    to: str  # creditor display name
    amount: Decimal  # rounded to 2 decimal places


class LedgerSummary(BaseModel):
    """Snapshot of everything the balance and report views display."""

    expense_count: int
    total: Decimal
    average: Decimal
    totals_by_person: dict[str, Decimal]
    balances: list[Balance]
