"""SQLite persistence for Receipt Split."""

import logging
import sqlite3
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .exceptions import StorageError
from .models import Expense

logger = logging.getLogger(__name__)

# The whole expense list lives under this single key
EXPENSES_KEY = "split_expenses"

_expense_list = TypeAdapter(list[Expense])


class Database:
    """SQLite-backed key-value store holding the expense list."""

    def __init__(self, db_path: Path):
        """Initialize database connection.

        Raises:
            StorageError: If the file cannot be opened as a SQLite database
        """
        self.db_path = db_path
        self.conn = None
        try:
            self.conn = sqlite3.connect(str(db_path))
            self.conn.row_factory = sqlite3.Row
            self._init_schema()
        except sqlite3.Error as e:
            logger.error(f"Failed to open database {db_path}: {e}")
            if self.conn is not None:
                self.conn.close()
            raise StorageError(f"Could not open database {db_path}: {e}") from e

    def _init_schema(self):
        """Initialize database schema."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """
        )
        self.conn.commit()

    def close(self):
        """Close database connection."""
        self.conn.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    # ========================================================================
    # Key-value operations
    # ========================================================================

    def get_value(self, key: str) -> str | None:
        """Get a stored value by key."""
        cursor = self.conn.cursor()
        cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
        row = cursor.fetchone()
        return str(row["value"]) if row else None

    def set_value(self, key: str, value: str):
        """Set a stored value."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO kv_store (key, value, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
            """,
            (key, value, datetime.now().isoformat()),
        )
        self.conn.commit()

    def delete_value(self, key: str):
        """Remove a stored value."""
        cursor = self.conn.cursor()
        cursor.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        self.conn.commit()

    # ========================================================================
    # Expense list operations
    # ========================================================================

    def load_expenses(self) -> list[Expense]:
        """
        Load the stored expense list.

        Returns an empty list on first run and whenever the stored value
        cannot be read or decoded; the failure is logged.
        """
        try:
            raw = self.get_value(EXPENSES_KEY)
            if raw is None:
                logger.debug("No stored expenses yet")
                return []
            expenses = _expense_list.validate_json(raw)
        except (sqlite3.Error, PydanticValidationError) as e:
            logger.error(f"Error loading expenses: {e}")
            return []

        logger.info(f"Loaded {len(expenses)} expenses from {self.db_path}")
        return expenses

    def save_expenses(self, expenses: Sequence[Expense]):
        """
        Replace the stored expense list.

        Raises:
            StorageError: If the list cannot be written
        """
        try:
            payload = _expense_list.dump_json(list(expenses)).decode()
            self.set_value(EXPENSES_KEY, payload)
        except sqlite3.Error as e:
            logger.error(f"Error saving expenses: {e}")
            raise StorageError(f"Could not save expenses: {e}") from e

        logger.debug(f"Saved {len(expenses)} expenses")

    def clear_expenses(self):
        """Remove the stored expense list; failures are logged."""
        try:
            self.delete_value(EXPENSES_KEY)
        except sqlite3.Error as e:
            logger.error(f"Error clearing expenses: {e}")
            return

        logger.info("Cleared stored expenses")
