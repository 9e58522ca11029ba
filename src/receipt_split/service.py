"""Application state for the shared expense ledger.

The ledger owns the in-memory expense list and is handed to the presentation
layer explicitly. The settlement engine only ever sees immutable snapshots
of that list.
"""

import logging
import uuid
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from .categorizer import Category, Classifier, classify_description, totals_by_category
from .config import Settings
from .db import Database
from .exceptions import ValidationError
from .models import Expense, LedgerSummary
from .receipts import attach_receipt
from .report import generate_pdf_report
from .settlement import summarize, validate_expenses

logger = logging.getLogger(__name__)


def new_expense_id() -> str:
    """Generate a unique expense id."""
    return uuid.uuid4().hex


class ExpenseLedger:
    """The append-only list of shared expenses and the operations over it."""

    def __init__(
        self,
        settings: Settings,
        database: Database,
        classifier: Classifier = classify_description,
    ):
        """Initialize the ledger and load stored expenses."""
        self.settings = settings
        self.db = database
        self.roster = settings.get_roster()
        self.classifier = classifier
        self._expenses: list[Expense] = self.db.load_expenses()

    @property
    def expenses(self) -> tuple[Expense, ...]:
        """Immutable snapshot of the recorded expenses, oldest first."""
        return tuple(self._expenses)

    def record_expense(
        self,
        description: str,
        amount: Decimal | str,
        paid_by: str,
        participants: Iterable[str],
        receipt_path: Path,
        date: datetime | None = None,
    ) -> Expense:
        """
        Build an expense from user input and add it to the ledger.

        Args:
            description: What the money was spent on
            amount: Positive amount
            paid_by: Payer id or display name
            participants: Participant ids or display names
            receipt_path: Receipt photo to attach (mandatory)
            date: When the expense happened, defaults to now

        Returns:
            The recorded expense

        Raises:
            ValidationError: If the input is invalid or the receipt is unusable
            StorageError: If the ledger cannot be saved; the expense is still
                kept in memory
        """
        payer = self.roster.resolve(paid_by)
        participant_ids = [self.roster.resolve(token).id for token in participants]
        if not participant_ids:
            raise ValidationError("At least one participant is required")

        expense_id = new_expense_id()

        # Validate the fields before the receipt is copied
        fields = {
            "id": expense_id,
            "description": description,
            "amount": amount,
            "paid_by": payer.id,
            "participants": participant_ids,
            "date": date or datetime.now(),
        }
        try:
            Expense(**fields, receipt_uri=str(receipt_path))
        except PydanticValidationError as e:
            raise ValidationError(_describe_errors(e)) from e

        stored_receipt = attach_receipt(
            Path(receipt_path), self.settings.receipts_dir, expense_id
        )
        expense = Expense(**fields, receipt_uri=str(stored_receipt))

        self.add_expense(expense)
        return expense

    def add_expense(self, expense: Expense) -> None:
        """
        Append an expense and persist the ledger.

        Raises:
            ValidationError: If the expense references users outside the roster
            StorageError: If saving fails; the in-memory list keeps the expense
        """
        validate_expenses([expense], self.roster)

        self._expenses.append(expense)
        logger.info(
            f"Added expense '{expense.description}' ({expense.amount}) "
            f"paid by {self.roster.get_user_name(expense.paid_by)}"
        )

        self.db.save_expenses(self._expenses)

    def summary(self) -> LedgerSummary:
        """Totals, average and settlement transfers for the current snapshot."""
        return summarize(self.expenses, self.roster)

    def totals_by_category(self) -> dict[Category, Decimal]:
        """Spend per category using the ledger's classifier."""
        return totals_by_category(self.expenses, self.classifier)

    def generate_report(self, output_path: Path | None = None) -> Path:
        """
        Render the PDF report for the current snapshot.

        Args:
            output_path: Destination file; defaults to a timestamped file in
                the configured reports directory

        Returns:
            Path of the written report
        """
        if not self._expenses:
            raise ValidationError("There are no expenses to report")

        if output_path is None:
            stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
            output_path = self.settings.reports_dir / f"expenses-{stamp}.pdf"

        snapshot = self.expenses
        summary = summarize(snapshot, self.roster)

        return generate_pdf_report(
            snapshot,
            summary.balances,
            summary.totals_by_person,
            output_path,
            roster=self.roster,
            average=summary.average,
            currency_symbol=self.settings.currency_symbol,
            title=self.settings.report_title,
            classifier=self.classifier,
        )

    def clear(self) -> None:
        """Remove every expense from memory and storage."""
        self._expenses = []
        self.db.clear_expenses()
        logger.info("Cleared the expense ledger")


def _describe_errors(error: PydanticValidationError) -> str:
    """Flatten pydantic errors into a single readable message."""
    parts = []
    for item in error.errors():
        field = ".".join(str(loc) for loc in item["loc"])
        parts.append(f"{field}: {item['msg']}")
    return "; ".join(parts)
