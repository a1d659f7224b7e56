"""Models for the single-slot undo of a category deletion."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List

from models.category import Category
from models.expense import Expense


class DeletionKind(str, Enum):
    """How the snapshotted category was removed."""

    SOFT = "soft"
    HARD = "hard"


@dataclass(frozen=True)
class ExpenseSnapshot:
    """Lightweight copy of an expense; the category is implied by the snapshot."""

    id: str
    amount: Decimal
    description: str
    date: datetime

    @classmethod
    def of(cls, expense: Expense) -> "ExpenseSnapshot":
        return cls(
            id=expense.id,
            amount=expense.amount,
            description=expense.description,
            date=expense.date,
        )

    def to_expense(self, category_id: int) -> Expense:
        """Rebuild the expense, attached to the given category."""
        return Expense(
            id=self.id,
            category_id=category_id,
            amount=self.amount,
            description=self.description,
            date=self.date,
        )


@dataclass
class UndoSnapshot:
    """Everything needed to bring back the last deleted category.

    Attributes:
        kind: Whether the category was soft- or hard-deleted.
        category: The category as it was, with is_deleted forced to True.
        expenses: Copies of the category's expenses, in query order.
        taken_at: When the snapshot was captured.
    """

    kind: DeletionKind
    category: Category
    expenses: List[ExpenseSnapshot] = field(default_factory=list)
    taken_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def capture(
        cls, kind: DeletionKind, category: Category, expenses: List[Expense]
    ) -> "UndoSnapshot":
        return cls(
            kind=kind,
            category=Category(id=category.id, name=category.name, is_deleted=True),
            expenses=[ExpenseSnapshot.of(e) for e in expenses],
        )
