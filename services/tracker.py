"""Entry points used by the presentation layer."""

from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional, Union

from errors import NotFoundError
from logger import get_logger
from models.category import Category
from models.expense import Expense, parse_amount
from models.undo import UndoSnapshot
from services.notifier import ChangeEvent

logger = get_logger(__name__)


class ExpenseTracker:
    """One method per user action; each action is one committed transaction.

    Change notifications are raised by the database manager's commit hook,
    so every action that changes data fires exactly one notification.
    """

    def __init__(self, db_manager, categories, expenses, lifecycle, queries, notifier):
        self.db_manager = db_manager
        self.categories = categories
        self.expenses = expenses
        self.lifecycle = lifecycle
        self.queries = queries
        self.notifier = notifier

    def add_expense(
        self,
        amount: Union[Decimal, int, float, str],
        category_name: str,
        description: str = "",
        date: Optional[datetime] = None,
    ) -> Expense:
        """File a new expense under a category name.

        An unknown name creates the category; a soft-deleted one is reactivated.

        Args:
            amount: Non-negative amount.
            category_name: Category to file under (trimmed, case-sensitive).
            description: Optional free text.
            date: When the expense happened; defaults to now.

        Returns:
            The created Expense.

        Raises:
            ValidationError: If the amount or category name is invalid.
            PersistenceError: If the database rejects the write.
        """
        amount = parse_amount(amount)

        with self.db_manager.transaction(reason=f"add expense to {category_name}") as conn:
            category, _ = self.categories.resolve_or_create(category_name, conn=conn)
            expense = Expense.new(category.id, amount, description, date)
            self.expenses.create(expense, conn=conn)

        logger.info(f"Added expense {expense.id} of {amount} to '{category.name}'")
        return expense

    def delete_expense(self, expense_id: str) -> None:
        """Delete a single expense.

        Raises:
            NotFoundError: If no expense has this ID.
        """
        with self.db_manager.transaction(reason="delete expense") as conn:
            if not self.expenses.delete(expense_id, conn=conn):
                raise NotFoundError(f"Expense with ID {expense_id} not found")

        logger.info(f"Deleted expense {expense_id}")

    def add_category(self, name: str) -> Category:
        """Add a category from the editor, reactivating a soft-deleted one."""
        return self.lifecycle.add_category(name)

    def soft_delete_category(self, name: str) -> bool:
        """Hide a category from pickers and grouped views, keeping its expenses."""
        return self.lifecycle.soft_delete(name)

    def hard_delete_category(self, name: str, confirmed: bool = False) -> UndoSnapshot:
        """Permanently delete a category and its expenses (undoable once)."""
        return self.lifecycle.hard_delete(name, confirmed=confirmed)

    def undo_last_category_deletion(self) -> Optional[Category]:
        """Undo the last category deletion; None if there is nothing to undo."""
        return self.lifecycle.undo()

    def pending_undo(self) -> Optional[UndoSnapshot]:
        return self.lifecycle.pending_undo()

    def categories_for_picker(self) -> List[str]:
        return self.queries.categories_for_picker()

    def categories_with_expenses(self) -> List[str]:
        return self.queries.categories_with_expenses()

    def expenses_for(self, category_name: str) -> List[Expense]:
        return self.queries.expenses_for(category_name)

    def subscribe_to_changes(
        self, handler: Callable[[ChangeEvent], None]
    ) -> Callable[[], None]:
        """Register a change handler; returns a callable that unsubscribes it."""
        return self.notifier.subscribe(handler)
