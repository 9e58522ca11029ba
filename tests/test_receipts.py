"""Tests for receipt photo handling."""

import pytest

from receipt_split.exceptions import ReceiptError, ValidationError
from receipt_split.receipts import attach_receipt, list_receipts


class TestAttachReceipt:
    """Tests for attach_receipt."""

    def test_copies_photo_named_after_expense(self, receipt_photo, tmp_path):
        receipts_dir = tmp_path / "receipts"

        stored = attach_receipt(receipt_photo, receipts_dir, "abc123")

        assert stored == receipts_dir / "abc123.jpg"
        assert stored.read_bytes() == receipt_photo.read_bytes()
        assert receipt_photo.exists()

    def test_missing_photo(self, tmp_path):
        with pytest.raises(ReceiptError, match="not found") as exc_info:
            attach_receipt(tmp_path / "missing.png", tmp_path / "receipts", "e1")

        assert exc_info.value.path.endswith("missing.png")

    def test_directory_is_not_a_photo(self, tmp_path):
        with pytest.raises(ReceiptError, match="not a file"):
            attach_receipt(tmp_path, tmp_path / "receipts", "e1")

    def test_rejects_non_image(self, tmp_path):
        notes = tmp_path / "notes.txt"
        notes.write_text("lunch")

        with pytest.raises(ReceiptError, match="must be an image"):
            attach_receipt(notes, tmp_path / "receipts", "e1")

    def test_receipt_error_is_validation_error(self, tmp_path):
        """A missing receipt is rejected like any other invalid expense."""
        with pytest.raises(ValidationError):
            attach_receipt(tmp_path / "missing.jpg", tmp_path / "receipts", "e1")


class TestListReceipts:
    """Tests for list_receipts."""

    def test_flags_missing_files(self, make_expense, receipt_photo):
        present = make_expense("e1", "10", "1", ["1"]).model_copy(
            update={"receipt_uri": str(receipt_photo)}
        )
        gone = make_expense("e2", "20", "2", ["2"])

        entries = list_receipts([present, gone])

        assert [(e.expense.id, e.exists) for e in entries] == [
            ("e1", True),
            ("e2", False),
        ]
        assert entries[0].path == receipt_photo

    def test_empty(self):
        assert list_receipts([]) == []
