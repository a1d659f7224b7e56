"""Category service for database operations."""

from typing import List, Optional, Tuple

from errors import NotFoundError, ValidationError
from logger import get_logger
from models.category import Category

logger = get_logger(__name__)

_CATEGORY_SELECT_FIELDS = "id, name, is_deleted"


def normalize_name(name: Optional[str]) -> str:
    """Trim a category name and reject empty ones.

    Raises:
        ValidationError: If the name is empty after trimming.
    """
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValidationError("Category name cannot be empty.")
    return trimmed


class CategoryService:
    """Service for managing categories.

    Mutating methods take an optional connection. Without one they run in
    their own transaction; with one they join the caller's transaction.
    """

    def __init__(self, db_manager):
        """Initialize the category service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self, include_deleted: bool = False, conn=None) -> List[Category]:
        """Get categories from the database.

        Args:
            include_deleted: If True, soft-deleted categories are included.
            conn: Optional connection to read through.

        Returns:
            List of Category objects, ordered by name.
        """
        query = f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories"
        if not include_deleted:
            query += " WHERE is_deleted = 0"
        query += " ORDER BY name, id"

        with self.db_manager.snapshot(conn) as c:
            rows = c.execute(query).fetchall()
            return [self._row_to_category(row) for row in rows]

    def find(self, category_id: int, conn=None) -> Optional[Category]:
        """Get a single category by ID.

        Args:
            category_id: The category ID to find.
            conn: Optional connection to read through.

        Returns:
            Category object if found, None otherwise.
        """
        with self.db_manager.snapshot(conn) as c:
            row = c.execute(
                f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories WHERE id = ?",
                (category_id,),
            ).fetchone()

            if row:
                return self._row_to_category(row)
            return None

    def find_by_name(
        self, name: str, include_deleted: bool = True, conn=None
    ) -> Optional[Category]:
        """Get a single category by exact (trimmed, case-sensitive) name.

        When both an active and a soft-deleted category carry the name, the
        active one wins; among soft-deleted ones the most recent wins.

        Args:
            name: The category name to find.
            include_deleted: If False, only active categories match.
            conn: Optional connection to read through.

        Returns:
            Category object if found, None otherwise.
        """
        query = f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories WHERE name = ?"
        if not include_deleted:
            query += " AND is_deleted = 0"
        query += " ORDER BY is_deleted, id DESC LIMIT 1"

        with self.db_manager.snapshot(conn) as c:
            row = c.execute(query, ((name or "").strip(),)).fetchone()

            if row:
                return self._row_to_category(row)
            return None

    def create(self, name: str, conn=None) -> Category:
        """Create a new active category.

        Args:
            name: Category name, must not match another active category.
            conn: Optional connection of an enclosing transaction.

        Returns:
            The created Category object with id populated.

        Raises:
            ValidationError: If the name is empty or already used by an active category.
        """
        name = normalize_name(name)

        with self.db_manager.transaction(conn, reason=f"create category {name}") as c:
            if self.find_by_name(name, include_deleted=False, conn=c):
                raise ValidationError(f"Category '{name}' already exists.")

            cursor = c.execute("INSERT INTO categories (name) VALUES (?)", (name,))
            category = Category(id=cursor.lastrowid, name=name)

        logger.info(f"Created category '{name}' (ID: {category.id})")
        return category

    def resolve_or_create(self, name: str, conn=None) -> Tuple[Category, bool]:
        """Return the category for a name, reactivating or creating it as needed.

        This is the only place where a category comes into existence or is
        reactivated implicitly.

        Args:
            name: Category name as typed by the user.
            conn: Optional connection of an enclosing transaction.

        Returns:
            Tuple of (active Category, True if it was created or reactivated).

        Raises:
            ValidationError: If the name is empty after trimming.
        """
        name = normalize_name(name)

        with self.db_manager.transaction(conn, reason=f"resolve category {name}") as c:
            category = self.find_by_name(name, conn=c)

            if category is None:
                return self.create(name, conn=c), True

            if category.is_deleted:
                self.set_deleted(category.id, False, conn=c)
                category.is_deleted = False
                logger.info(f"Reactivated category '{name}' (ID: {category.id})")
                return category, True

            return category, False

    def set_deleted(self, category_id: int, is_deleted: bool, conn=None) -> Category:
        """Flip the soft-delete flag of a category.

        Args:
            category_id: The category ID to update.
            is_deleted: New flag value.
            conn: Optional connection of an enclosing transaction.

        Returns:
            The updated Category object.

        Raises:
            NotFoundError: If the category does not exist.
        """
        with self.db_manager.transaction(conn, reason="update category") as c:
            cursor = c.execute(
                "UPDATE categories SET is_deleted = ? WHERE id = ?",
                (int(is_deleted), category_id),
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"Category with ID {category_id} not found")

            return self.find(category_id, conn=c)

    def restore(self, category: Category, conn=None) -> Category:
        """Insert a category again under its original ID, as active.

        Args:
            category: The category to bring back (typically from an undo snapshot).
            conn: Optional connection of an enclosing transaction.

        Returns:
            The restored Category object.
        """
        with self.db_manager.transaction(conn, reason=f"restore category {category.name}") as c:
            c.execute(
                "INSERT INTO categories (id, name, is_deleted) VALUES (?, ?, 0)",
                (category.id, category.name),
            )

        return Category(id=category.id, name=category.name, is_deleted=False)

    def delete(self, category_id: int, conn=None) -> bool:
        """Delete a category by ID.

        Fails with a PersistenceError (foreign key) if expenses still reference it.

        Args:
            category_id: The category ID to delete.
            conn: Optional connection of an enclosing transaction.

        Returns:
            True if category was deleted, False if not found.
        """
        with self.db_manager.transaction(conn, reason="delete category") as c:
            cursor = c.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            return cursor.rowcount > 0

    def _row_to_category(self, row: tuple) -> Category:
        """Convert a database row to a Category object."""
        return Category(id=row[0], name=row[1], is_deleted=bool(row[2]))
