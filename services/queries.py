"""Read-only views derived from committed expense and category data.

Nothing here is cached: every call re-reads the database inside a single
read transaction, so all statements of one call see the same commit.
"""

from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Tuple

from models.expense import Expense

UNCATEGORIZED = "Uncategorized"

_GROUPED_EXPENSES_QUERY = """
    SELECT e.id, e.category_id, e.amount, e.description, e.expense_date,
           c.name, c.is_deleted
    FROM expenses e
    LEFT JOIN categories c ON c.id = e.category_id
    ORDER BY e.expense_date DESC, e.id
"""


class QueryFacade:
    """Derived read views for pickers, grouped lists and totals."""

    def __init__(self, db_manager):
        """Initialize the query facade.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def categories_for_picker(self) -> List[str]:
        """Active category names, alphabetically sorted and de-duplicated."""
        return self.all_categories(include_deleted=False)

    def all_categories(self, include_deleted: bool = False) -> List[str]:
        """Category names, optionally including soft-deleted ones.

        Args:
            include_deleted: If True, soft-deleted categories are listed too.

        Returns:
            Sorted list of unique, non-empty names.
        """
        query = "SELECT DISTINCT name FROM categories"
        if not include_deleted:
            query += " WHERE is_deleted = 0"

        with self.db_manager.snapshot() as conn:
            rows = conn.execute(query).fetchall()

        return sorted({row[0] for row in rows if row[0]})

    def expenses_by_category(self) -> Dict[str, List[Expense]]:
        """Group every expense under its category name.

        Expenses of soft-deleted categories are included. An expense whose
        category cannot be resolved is grouped under "Uncategorized".

        Returns:
            Fresh mapping of category name to expenses, newest first.
        """
        grouped: Dict[str, List[Expense]] = defaultdict(list)
        for name, _is_deleted, expense in self._grouped_rows():
            grouped[name].append(expense)
        return dict(grouped)

    def categories_with_expenses(self) -> List[str]:
        """Active category names that have at least one expense, sorted."""
        names = {
            name
            for name, is_deleted, _ in self._grouped_rows()
            if is_deleted is False
        }
        return sorted(names)

    def expenses_for(self, category_name: str) -> List[Expense]:
        """Expenses filed under a category name, newest first.

        Works for soft-deleted categories too; unknown names give an empty list.
        """
        return self.expenses_by_category().get((category_name or "").strip(), [])

    def total_for_category(self, category_name: str) -> Decimal:
        """Sum of the amounts filed under a category; 0 for empty or unknown."""
        return sum(
            (e.amount for e in self.expenses_for(category_name)), Decimal("0")
        )

    def category_totals(self) -> List[Tuple[str, Decimal]]:
        """Per-category totals for active categories with expenses.

        Soft-deleted categories are left out, as in the spending chart.

        Returns:
            List of (name, total) tuples, largest total first, then by name.
        """
        totals: Dict[str, Decimal] = defaultdict(Decimal)
        for name, is_deleted, expense in self._grouped_rows():
            if is_deleted is False:
                totals[name] += expense.amount

        return sorted(totals.items(), key=lambda item: (-item[1], item[0]))

    def grand_total(self) -> Decimal:
        """Sum of ``category_totals()``."""
        return sum((total for _, total in self.category_totals()), Decimal("0"))

    def _grouped_rows(self) -> List[Tuple[str, object, Expense]]:
        """Return (category name, is_deleted or None, Expense) for every expense."""
        with self.db_manager.snapshot() as conn:
            rows = conn.execute(_GROUPED_EXPENSES_QUERY).fetchall()

        result = []
        for row in rows:
            expense = Expense(
                id=row[0],
                category_id=row[1],
                amount=Decimal(row[2]),
                description=row[3],
                date=datetime.fromisoformat(row[4]),
            )
            if row[5] is None:
                result.append((UNCATEGORIZED, None, expense))
            else:
                result.append((row[5], bool(row[6]), expense))
        return result
