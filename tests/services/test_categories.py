import pytest

from errors import NotFoundError, PersistenceError, ValidationError
from models.expense import Expense


class TestCategoryService:
    """Tests for CategoryService."""

    def test_create_category(self, services):
        """Test creating a simple category."""
        category = services.categories.create("Groceries")

        assert category.id is not None
        assert category.id > 0
        assert category.name == "Groceries"
        assert category.is_deleted is False

    def test_create_trims_name(self, services):
        """Test that surrounding whitespace is removed from the name."""
        category = services.categories.create("  Travel  ")

        assert category.name == "Travel"
        assert services.categories.find_by_name("Travel").id == category.id

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_create_empty_name_raises_error(self, services, name):
        """Test that an empty category name is rejected."""
        with pytest.raises(ValidationError, match="cannot be empty"):
            services.categories.create(name)

    def test_create_duplicate_active_name_raises_error(self, services):
        """Test that two active categories cannot share a name."""
        services.categories.create("Duplicate")

        with pytest.raises(ValidationError, match="already exists"):
            services.categories.create("Duplicate")

    def test_create_allows_name_of_soft_deleted_category(self, services):
        """Test that name uniqueness only applies to active categories."""
        old = services.categories.create("Reused")
        services.categories.set_deleted(old.id, True)

        new = services.categories.create("Reused")

        assert new.id != old.id
        assert services.categories.find_by_name("Reused").id == new.id

    def test_find_category_by_id(self, services):
        """Test finding a category by ID."""
        created = services.categories.create("Transport")

        found = services.categories.find(created.id)

        assert found == created

    def test_find_category_by_id_not_found(self, services):
        """Test finding a non-existent category returns None."""
        assert services.categories.find(9999) is None

    def test_find_by_name_case_sensitive(self, services):
        """Test that category name lookup is case-sensitive."""
        services.categories.create("Shopping")

        assert services.categories.find_by_name("shopping") is None

    def test_find_by_name_active_only(self, services):
        """Test that include_deleted=False ignores soft-deleted categories."""
        category = services.categories.create("Hidden")
        services.categories.set_deleted(category.id, True)

        assert services.categories.find_by_name("Hidden", include_deleted=False) is None
        assert services.categories.find_by_name("Hidden").is_deleted is True

    def test_find_all_ordered_by_name(self, services):
        """Test finding all categories returns them ordered by name."""
        services.categories.create("Zebra")
        services.categories.create("Alpha")
        services.categories.create("Beta")

        names = [c.name for c in services.categories.find_all()]

        assert names == ["Alpha", "Beta", "Zebra"]

    def test_find_all_excludes_soft_deleted_by_default(self, services):
        """Test that soft-deleted categories only appear with include_deleted."""
        services.categories.create("Keep")
        hidden = services.categories.create("Hidden")
        services.categories.set_deleted(hidden.id, True)

        assert [c.name for c in services.categories.find_all()] == ["Keep"]
        assert [c.name for c in services.categories.find_all(include_deleted=True)] == [
            "Hidden",
            "Keep",
        ]

    def test_find_all_empty(self, services):
        """Test finding all categories when database is empty."""
        assert services.categories.find_all() == []

    def test_resolve_or_create_creates_unknown_name(self, services):
        """Test that an unknown name creates a new category."""
        category, changed = services.categories.resolve_or_create("New")

        assert changed is True
        assert services.categories.find(category.id).name == "New"

    def test_resolve_or_create_returns_existing(self, services):
        """Test that an active category is returned unchanged."""
        existing = services.categories.create("Food")

        category, changed = services.categories.resolve_or_create(" Food ")

        assert changed is False
        assert category.id == existing.id

    def test_resolve_or_create_reactivates_soft_deleted(self, services):
        """Test that a soft-deleted category is reactivated, not duplicated."""
        existing = services.categories.create("Travel")
        services.categories.set_deleted(existing.id, True)

        category, changed = services.categories.resolve_or_create("Travel")

        assert changed is True
        assert category.id == existing.id
        assert services.categories.find(existing.id).is_deleted is False
        assert len(services.categories.find_all(include_deleted=True)) == 1

    def test_set_deleted_nonexistent_category_raises_error(self, services):
        """Test that flagging a non-existent category raises NotFoundError."""
        with pytest.raises(NotFoundError, match="Category with ID 9999 not found"):
            services.categories.set_deleted(9999, True)

    def test_restore_keeps_original_id(self, services):
        """Test that restore re-inserts a category under its old ID."""
        category = services.categories.create("Gone")
        services.categories.delete(category.id)

        restored = services.categories.restore(category)

        assert restored.id == category.id
        assert services.categories.find(category.id).is_deleted is False

    def test_delete_category(self, services):
        """Test deleting a category."""
        category = services.categories.create("ToDelete")

        assert services.categories.delete(category.id) is True
        assert services.categories.find(category.id) is None

    def test_delete_nonexistent_category(self, services):
        """Test deleting a non-existent category returns False."""
        assert services.categories.delete(9999) is False

    def test_delete_category_with_expenses_is_rejected(self, services):
        """Test that the foreign key keeps expenses from losing their category."""
        category = services.categories.create("Referenced")
        services.expenses.create(Expense.new(category.id, "10"))

        with pytest.raises(PersistenceError):
            services.categories.delete(category.id)

        assert services.categories.find(category.id) is not None

    def test_ids_are_not_reused(self, services):
        """Test that a new category never takes the ID of a deleted one."""
        category = services.categories.create("First")
        services.categories.delete(category.id)

        assert services.categories.create("Second").id > category.id

    def test_create_category_with_special_characters(self, services):
        """Test creating category with special characters."""
        category = services.categories.create("Food & Drink")

        assert services.categories.find(category.id).name == "Food & Drink"
