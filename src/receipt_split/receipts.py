"""Receipt photo handling."""

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel

from .exceptions import ReceiptError
from .models import Expense

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = frozenset({".jpg", ".jpeg", ".png", ".heic", ".webp"})


class ReceiptEntry(BaseModel):
    """An expense paired with its receipt photo, as shown in the gallery."""

    expense: Expense
    path: Path
    exists: bool


def attach_receipt(source: Path, receipts_dir: Path, expense_id: str) -> Path:
    """
    Copy a receipt photo into the receipts directory.

    Args:
        source: Photo to attach
        receipts_dir: Directory that owns stored receipts
        expense_id: Expense the receipt belongs to, used as the file name

    Returns:
        Path of the stored copy

    Raises:
        ReceiptError: If the photo is missing, not a file, or not an image
    """
    source = Path(source).expanduser()
    if not source.exists():
        raise ReceiptError(str(source), f"Receipt photo not found: {source}")
    if not source.is_file():
        raise ReceiptError(str(source), f"Receipt photo is not a file: {source}")

    suffix = source.suffix.lower()
    if suffix not in IMAGE_SUFFIXES:
        raise ReceiptError(
            str(source),
            f"Receipt must be an image ({', '.join(sorted(IMAGE_SUFFIXES))}): {source}",
        )

    receipts_dir.mkdir(parents=True, exist_ok=True)
    destination = receipts_dir / f"{expense_id}{suffix}"
    try:
        shutil.copy2(source, destination)
    except OSError as e:
        raise ReceiptError(str(source), f"Could not store receipt: {e}") from e

    logger.info(f"Stored receipt for expense {expense_id} at {destination}")
    return destination


def list_receipts(expenses: Iterable[Expense]) -> list[ReceiptEntry]:
    """Pair every expense with its receipt and flag receipts that went missing."""
    entries = []
    for expense in expenses:
        path = Path(expense.receipt_uri)
        exists = path.is_file()
        if not exists:
            logger.warning(f"Receipt for expense {expense.id} is missing: {path}")
        entries.append(ReceiptEntry(expense=expense, path=path, exists=exists))
    return entries
