"""Expense service for database operations."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from logger import get_logger
from models.expense import Expense

logger = get_logger(__name__)

# SQL Query Constants
_EXPENSE_FIELDS = "id, category_id, amount, description, expense_date"

# Automatically generate placeholders from field count
_EXPENSE_INSERT_PLACEHOLDERS = f"({', '.join(['?'] * len(_EXPENSE_FIELDS.split(',')))})"

# Newest first, id as a stable tie-break
_EXPENSE_ORDER = "ORDER BY expense_date DESC, id"


class ExpenseService:
    """Service for managing expenses."""

    def __init__(self, db_manager):
        """Initialize the expense service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def create(self, expense: Expense, conn=None) -> Expense:
        """Create a single expense in the database.

        Args:
            expense: Expense object to insert. Its category must already exist.
            conn: Optional connection of an enclosing transaction.

        Returns:
            The same Expense object.

        Raises:
            PersistenceError: If the insert fails (e.g., duplicate ID, unknown category).
        """
        with self.db_manager.transaction(conn, reason="create expense") as c:
            c.execute(
                f"INSERT INTO expenses ({_EXPENSE_FIELDS}) VALUES {_EXPENSE_INSERT_PLACEHOLDERS}",
                expense.to_row(),
            )

        logger.debug(f"Created expense {expense.id} ({expense.amount})")
        return expense

    def restore(self, expenses: List[Expense], conn=None) -> int:
        """Insert expenses keeping their original IDs.

        Expenses whose ID is already present are left untouched.

        Args:
            expenses: Expense objects to insert.
            conn: Optional connection of an enclosing transaction.

        Returns:
            Number of expenses actually inserted.
        """
        if not expenses:
            return 0

        with self.db_manager.transaction(conn, reason="restore expenses") as c:
            before = c.total_changes
            c.executemany(
                f"""
                INSERT OR IGNORE INTO expenses ({_EXPENSE_FIELDS})
                VALUES {_EXPENSE_INSERT_PLACEHOLDERS}
                """,
                [e.to_row() for e in expenses],
            )
            return c.total_changes - before

    def delete(self, expense_id: str, conn=None) -> bool:
        """Delete an expense by ID.

        Args:
            expense_id: The expense ID to delete.
            conn: Optional connection of an enclosing transaction.

        Returns:
            True if the expense was deleted, False if not found.
        """
        with self.db_manager.transaction(conn, reason="delete expense") as c:
            cursor = c.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
            return cursor.rowcount > 0

    def delete_by_category(self, category_id: int, conn=None) -> int:
        """Delete every expense filed under a category.

        Args:
            category_id: The category whose expenses are removed.
            conn: Optional connection of an enclosing transaction.

        Returns:
            Number of expenses deleted.
        """
        with self.db_manager.transaction(conn, reason="delete expenses") as c:
            cursor = c.execute(
                "DELETE FROM expenses WHERE category_id = ?", (category_id,)
            )
            return cursor.rowcount

    def find(self, expense_id: str, conn=None) -> Optional[Expense]:
        """Get a single expense by ID.

        Args:
            expense_id: The expense ID.
            conn: Optional connection to read through.

        Returns:
            Expense object if found, None otherwise.
        """
        with self.db_manager.snapshot(conn) as c:
            row = c.execute(
                f"SELECT {_EXPENSE_FIELDS} FROM expenses WHERE id = ?",
                (expense_id,),
            ).fetchone()

            if row:
                return self._row_to_expense(row)
            return None

    def find_all(self, conn=None) -> List[Expense]:
        """Get all expenses, newest first."""
        with self.db_manager.snapshot(conn) as c:
            rows = c.execute(
                f"SELECT {_EXPENSE_FIELDS} FROM expenses {_EXPENSE_ORDER}"
            ).fetchall()
            return [self._row_to_expense(row) for row in rows]

    def find_by_category(self, category_id: int, conn=None) -> List[Expense]:
        """Get all expenses for a specific category.

        Args:
            category_id: The category ID to filter by.
            conn: Optional connection to read through.

        Returns:
            List of Expense objects ordered by date (newest first).
        """
        with self.db_manager.snapshot(conn) as c:
            rows = c.execute(
                f"""
                SELECT {_EXPENSE_FIELDS}
                FROM expenses
                WHERE category_id = ?
                {_EXPENSE_ORDER}
                """,
                (category_id,),
            ).fetchall()
            return [self._row_to_expense(row) for row in rows]

    def count_by_category(self, category_id: int, conn=None) -> int:
        """Count the expenses that depend on a category."""
        with self.db_manager.snapshot(conn) as c:
            row = c.execute(
                "SELECT COUNT(*) FROM expenses WHERE category_id = ?", (category_id,)
            ).fetchone()
            return row[0]

    def _row_to_expense(self, row: tuple) -> Expense:
        """Convert a database row to an Expense object."""
        return Expense(
            id=row[0],
            category_id=row[1],
            amount=Decimal(row[2]),
            description=row[3],
            date=datetime.fromisoformat(row[4]),
        )
