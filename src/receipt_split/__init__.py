"""Receipt Split - Shared expenses with mandatory receipts and greedy settlement."""

__version__ = "0.1.0"

from .config import Settings, load_settings
from .db import Database
from .models import Balance, Expense, LedgerSummary, User
from .roster import Roster
from .service import ExpenseLedger
from .settlement import (
    compute_average,
    compute_balances,
    compute_net_balances,
    compute_totals_by_person,
)

__all__ = [
    "Settings",
    "load_settings",
    "Database",
    "Balance",
    "Expense",
    "LedgerSummary",
    "User",
    "Roster",
    "ExpenseLedger",
    "compute_average",
    "compute_balances",
    "compute_net_balances",
    "compute_totals_by_person",
]
