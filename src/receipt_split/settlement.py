"""Debt settlement engine.

Reduces many-to-many expense obligations to a short list of pairwise
transfers. Every function here is pure: it takes a snapshot of expenses and
the roster, and never touches storage or shared state.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .exceptions import ValidationError
from .models import MAX_AMOUNT, Balance, Expense, LedgerSummary, User

logger = logging.getLogger(__name__)

# Net balances within this band count as settled
EPSILON = Decimal("0.01")
CENT = Decimal("0.01")
ZERO = Decimal("0")


@dataclass
class _Party:
    """A debtor or creditor with the magnitude still to be settled."""

    name: str
    remaining: Decimal


def round_currency(amount: Decimal) -> Decimal:
    """
    Round an amount to cents using ROUND_HALF_UP.

    Args:
        amount: Unrounded amount

    Returns:
        Amount quantized to 2 decimal places

    Raises:
        ValidationError: If the amount has too many digits to hold cents
    """
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValidationError(f"Amount {amount} is too large to round to cents") from e


def validate_expenses(
    expenses: Iterable[Expense], roster: Iterable[User]
) -> list[User]:
    """
    Check that expenses can be settled over the given roster.

    Args:
        expenses: Expenses to check
        roster: Users balances are computed over

    Returns:
        The roster as a list, in roster order

    Raises:
        ValidationError: If the roster is empty, an expense has a non-positive
            amount or no participants, or references a user outside the roster
    """
    users = list(roster)
    if not users:
        raise ValidationError("Cannot compute balances over an empty roster")

    known_ids = {user.id for user in users}
    for expense in expenses:
        if expense.amount <= 0:
            raise ValidationError(
                f"Expense {expense.id} has non-positive amount {expense.amount}"
            )
        if expense.amount > MAX_AMOUNT:
            raise ValidationError(
                f"Expense {expense.id} amount {expense.amount} exceeds {MAX_AMOUNT}"
            )
        if not expense.participants:
            raise ValidationError(f"Expense {expense.id} has no participants")
        if expense.paid_by not in known_ids:
            raise ValidationError(
                f"Expense {expense.id} was paid by unknown user '{expense.paid_by}'"
            )
        unknown = [p for p in expense.participants if p not in known_ids]
        if unknown:
            raise ValidationError(
                f"Expense {expense.id} has unknown participants: {', '.join(unknown)}"
            )

    return users


def compute_net_balances(
    expenses: Iterable[Expense], roster: Iterable[User]
) -> dict[str, Decimal]:
    """
    Compute each user's net balance (total paid minus total owed).

    Shares are kept unrounded so that many small expenses do not accumulate
    rounding error.

    Returns:
        Mapping of user id to net balance; positive means the user is owed money
    """
    expenses = list(expenses)
    users = validate_expenses(expenses, roster)

    total_paid = {user.id: ZERO for user in users}
    total_owed = {user.id: ZERO for user in users}

    for expense in expenses:
        total_paid[expense.paid_by] += expense.amount
        share = expense.share
        for participant_id in expense.participants:
            total_owed[participant_id] += share

    return {user.id: total_paid[user.id] - total_owed[user.id] for user in users}


def compute_balances(
    expenses: Iterable[Expense], roster: Iterable[User]
) -> list[Balance]:
    """
    Compute the transfers that settle all debts between roster members.

    Greedy matching: the largest remaining debtor pays the largest remaining
    creditor as much as both can absorb, until either side runs out. Users
    whose net balance is within 0.01 of zero are considered settled.

    Args:
        expenses: Snapshot of recorded expenses
        roster: Users balances are computed over; ties between equal
            magnitudes keep roster order

    Returns:
        Transfers in the order they were generated (largest debt first)

    Raises:
        ValidationError: If the input cannot be settled (see validate_expenses)
    """
    expenses = list(expenses)
    users = validate_expenses(expenses, roster)
    if not expenses:
        return []

    net = compute_net_balances(expenses, users)

    debtors = sorted(
        (_Party(user.name, -net[user.id]) for user in users if net[user.id] < -EPSILON),
        key=lambda party: party.remaining,
        reverse=True,
    )
    creditors = sorted(
        (_Party(user.name, net[user.id]) for user in users if net[user.id] > EPSILON),
        key=lambda party: party.remaining,
        reverse=True,
    )

    balances: list[Balance] = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]
        transfer = min(debtor.remaining, creditor.remaining)

        if transfer > EPSILON:
            balances.append(
                Balance(
                    from_=debtor.name,
                    to=creditor.name,
                    amount=round_currency(transfer),
                )
            )

        debtor.remaining -= transfer
        creditor.remaining -= transfer

        if debtor.remaining < EPSILON:
            i += 1
        if creditor.remaining < EPSILON:
            j += 1

    logger.debug(
        f"Settled {len(debtors)} debtors and {len(creditors)} creditors "
        f"with {len(balances)} transfers"
    )

    return balances


def compute_total(expenses: Iterable[Expense]) -> Decimal:
    """Total amount spent across all expenses."""
    return sum((expense.amount for expense in expenses), ZERO)


def compute_totals_by_person(
    expenses: Iterable[Expense], roster: Iterable[User]
) -> dict[str, Decimal]:
    """
    Sum what each user paid, keyed by display name.

    Users who paid nothing appear with 0. Keys follow roster order.
    """
    expenses = list(expenses)
    users = validate_expenses(expenses, roster)

    names = {user.id: user.name for user in users}
    totals = {user.name: ZERO for user in users}
    for expense in expenses:
        totals[names[expense.paid_by]] += expense.amount

    return totals


def compute_average(expenses: Iterable[Expense], roster: Iterable[User]) -> Decimal:
    """
    Total spend divided by roster size.

    This is neither the average expense nor a participation-weighted share:
    it is what each user would have paid had every expense included everyone.
    """
    expenses = list(expenses)
    users = validate_expenses(expenses, roster)
    return compute_total(expenses) / len(users)


def summarize(expenses: Iterable[Expense], roster: Iterable[User]) -> LedgerSummary:
    """Run every settlement computation over one snapshot."""
    expenses = list(expenses)
    users = validate_expenses(expenses, roster)

    return LedgerSummary(
        expense_count=len(expenses),
        total=compute_total(expenses),
        average=compute_average(expenses, users),
        totals_by_person=compute_totals_by_person(expenses, users),
        balances=compute_balances(expenses, users),
    )
