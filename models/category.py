"""Category model for expense categorization."""

from dataclasses import dataclass


@dataclass
class Category:
    """Represents a user-defined expense category.

    Attributes:
        id: Unique identifier (auto-generated, never reused).
        name: Category name (unique among active categories).
        is_deleted: True when the category is soft-deleted and hidden from pickers.
    """

    id: int
    name: str
    is_deleted: bool = False
