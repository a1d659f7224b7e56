"""Category lifecycle: soft delete, reactivation, permanent delete and undo.

A category moves between three states::

    ACTIVE --soft_delete--> SOFT_DELETED --add expense / add category--> ACTIVE
    ACTIVE | SOFT_DELETED --hard_delete--> DESTROYED --undo--> ACTIVE

Soft and hard deletes both leave an UndoSnapshot in the single undo slot,
replacing whatever was there. Every transition runs in one database
transaction, so a cascade either fully happens (expenses, category and
snapshot) or does not happen at all.
"""

from enum import Enum
from typing import Optional

from errors import NeedsConfirmation, NotFoundError, ValidationError
from logger import get_logger
from models.category import Category
from models.undo import DeletionKind, UndoSnapshot
from services.categories import normalize_name

logger = get_logger(__name__)


class CategoryState(str, Enum):
    ACTIVE = "active"
    SOFT_DELETED = "soft_deleted"
    DESTROYED = "destroyed"


class CategoryLifecycle:
    """State machine for categories and their dependent expenses."""

    def __init__(self, db_manager, categories, expenses, undo_slot):
        """Initialize the lifecycle.

        Args:
            db_manager: Database manager used to scope each transition.
            categories: CategoryService instance.
            expenses: ExpenseService instance.
            undo_slot: UndoSlotService instance.
        """
        self.db_manager = db_manager
        self.categories = categories
        self.expenses = expenses
        self.undo_slot = undo_slot

    def state_of(self, name: str) -> CategoryState:
        """Return the lifecycle state of the category with this name."""
        category = self.categories.find_by_name(name)
        if category is None:
            return CategoryState.DESTROYED
        if category.is_deleted:
            return CategoryState.SOFT_DELETED
        return CategoryState.ACTIVE

    def add_category(self, name: str) -> Category:
        """Add a category from the category editor.

        A soft-deleted category with the same name is reactivated instead of
        creating a second one.

        Raises:
            ValidationError: If the name is empty or an active category already has it.
        """
        name = normalize_name(name)

        with self.db_manager.transaction(reason=f"add category {name}") as conn:
            if self.categories.find_by_name(name, include_deleted=False, conn=conn):
                raise ValidationError(f"Category '{name}' already exists.")
            category, _ = self.categories.resolve_or_create(name, conn=conn)

        return category

    def soft_delete(self, name: str) -> bool:
        """Hide an active category from pickers and grouped views.

        Its expenses stay attached and remain reachable by name. An undo
        snapshot of the category and its expenses is taken first.

        Args:
            name: Exact category name.

        Returns:
            True if the category was soft-deleted, False if it had no expenses
            (it is not shown in the grouped view, so there is nothing to do).

        Raises:
            NotFoundError: If no active category has this name.
        """
        name = normalize_name(name)

        with self.db_manager.transaction(reason=f"soft-delete category {name}") as conn:
            category = self.categories.find_by_name(name, include_deleted=False, conn=conn)
            if category is None:
                raise NotFoundError(f"Category '{name}' not found")

            expenses = self.expenses.find_by_category(category.id, conn=conn)
            if not expenses:
                logger.debug(f"Category '{name}' has no expenses; soft delete skipped")
                return False

            self.undo_slot.write(
                UndoSnapshot.capture(DeletionKind.SOFT, category, expenses), conn=conn
            )
            self.categories.set_deleted(category.id, True, conn=conn)

        logger.info(f"Soft-deleted category '{name}' ({len(expenses)} expense(s) kept)")
        return True

    def hard_delete(self, name: str, confirmed: bool = False) -> UndoSnapshot:
        """Permanently delete a category together with all of its expenses.

        Args:
            name: Exact category name; active categories win over soft-deleted ones.
            confirmed: Must be True when the category still has expenses.

        Returns:
            The UndoSnapshot now held in the undo slot.

        Raises:
            NotFoundError: If no category has this name.
            NeedsConfirmation: If expenses would be removed and ``confirmed`` is
                False. Nothing is changed in that case.
            PersistenceError: If the database rejects the cascade.
        """
        name = normalize_name(name)

        with self.db_manager.transaction(reason=f"hard-delete category {name}") as conn:
            category = self.categories.find_by_name(name, conn=conn)
            if category is None:
                raise NotFoundError(f"Category '{name}' not found")

            expenses = self.expenses.find_by_category(category.id, conn=conn)
            if expenses and not confirmed:
                raise NeedsConfirmation(category.name, len(expenses))

            snapshot = UndoSnapshot.capture(DeletionKind.HARD, category, expenses)
            self.expenses.delete_by_category(category.id, conn=conn)
            self.categories.delete(category.id, conn=conn)
            self.undo_slot.write(snapshot, conn=conn)

        logger.info(
            f"Permanently deleted category '{name}' (ID: {category.id}) "
            f"and {len(expenses)} expense(s)"
        )
        return snapshot

    def undo(self) -> Optional[Category]:
        """Bring back the category held in the undo slot.

        After a hard delete the cascaded expenses are re-inserted as well.
        After a soft delete only the flag is cleared.

        Returns:
            The restored, active Category, or None if the slot was empty.
        """
        with self.db_manager.transaction(reason="undo category deletion") as conn:
            snapshot = self.undo_slot.read(conn=conn)
            if snapshot is None:
                logger.info("No category deletion to undo.")
                return None

            category = self._restore_category(snapshot.category, conn)
            # A soft delete never removed expenses; ones missing now were deleted directly.
            restored = 0
            if snapshot.kind == DeletionKind.HARD:
                restored = self.expenses.restore(
                    [e.to_expense(category.id) for e in snapshot.expenses], conn=conn
                )
            self.undo_slot.clear(conn=conn)

        logger.info(
            f"Restored category '{category.name}' (ID: {category.id}) "
            f"with {restored} expense(s)"
        )
        return category

    def pending_undo(self) -> Optional[UndoSnapshot]:
        """Return the snapshot an undo would restore, without consuming it."""
        return self.undo_slot.read()

    def _restore_category(self, original: Category, conn) -> Category:
        # An active category that took the name in the meantime absorbs the expenses.
        active = self.categories.find_by_name(original.name, include_deleted=False, conn=conn)
        if active is not None and active.id != original.id:
            logger.info(
                f"Category '{original.name}' was re-created (ID: {active.id}); "
                "merging restored expenses into it"
            )
            return active

        if self.categories.find(original.id, conn=conn) is not None:
            return self.categories.set_deleted(original.id, False, conn=conn)

        return self.categories.restore(original, conn=conn)
