"""Shared fixtures for Receipt Split tests."""

from datetime import datetime
from decimal import Decimal

import pytest

from receipt_split.config import Settings
from receipt_split.db import Database
from receipt_split.models import Expense, User
from receipt_split.roster import Roster
from receipt_split.service import ExpenseLedger

JUAN = User(id="1", name="Juan")
MARIA = User(id="2", name="María")
PEDRO = User(id="3", name="Pedro")


def _make_expense(
    id: str,
    amount: str,
    paid_by: str,
    participants: list[str],
    description: str = "Test expense",
) -> Expense:
    """Create an Expense for testing."""
    return Expense(
        id=id,
        description=description,
        amount=Decimal(amount),
        paid_by=paid_by,
        participants=participants,
        date=datetime(2025, 3, 14, 20, 30),
        receipt_uri=f"/receipts/{id}.jpg",
    )


@pytest.fixture
def make_expense():
    """Factory for test expenses."""
    return _make_expense


@pytest.fixture
def users():
    """The sample roster as a list of users."""
    return [JUAN, MARIA, PEDRO]


@pytest.fixture
def roster(users):
    """The sample roster."""
    return Roster(users)


@pytest.fixture
def settings(tmp_path):
    """Settings pointing every path into a temporary directory."""
    return Settings(
        database_path=tmp_path / "data" / "test.db",
        receipts_dir=tmp_path / "data" / "receipts",
        reports_dir=tmp_path / "data" / "reports",
    )


@pytest.fixture
def db(settings):
    """Create a temporary database."""
    database = Database(settings.database_path)
    yield database
    database.close()


@pytest.fixture
def ledger(settings, db):
    """Create an ExpenseLedger instance."""
    return ExpenseLedger(settings, db)


@pytest.fixture
def receipt_photo(tmp_path):
    """A fake receipt photo on disk."""
    path = tmp_path / "photo.JPG"
    path.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg")
    return path
