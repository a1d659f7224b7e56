from datetime import datetime
from decimal import Decimal

from models.category import Category
from services.queries import UNCATEGORIZED


class TestQueryFacade:
    """Tests for QueryFacade."""

    def test_categories_for_picker_sorted_active_only(self, services, tracker):
        """Test that the picker lists active names alphabetically."""
        for name in ("Zoo", "Home", "Business"):
            tracker.add_category(name)
        tracker.add_expense("1", "Hidden")
        tracker.soft_delete_category("Hidden")

        assert services.queries.categories_for_picker() == ["Business", "Home", "Zoo"]

    def test_all_categories_include_deleted(self, services, tracker):
        """Test that the editor view can include soft-deleted names."""
        tracker.add_category("Home")
        tracker.add_expense("1", "Hidden")
        tracker.soft_delete_category("Hidden")

        assert services.queries.all_categories() == ["Home"]
        assert services.queries.all_categories(include_deleted=True) == ["Hidden", "Home"]

    def test_all_categories_deduplicates_names(self, services):
        """Test that an active and a hidden category with one name are listed once."""
        old = services.categories.create("Same")
        services.categories.set_deleted(old.id, True)
        services.categories.create("Same")

        assert services.queries.all_categories(include_deleted=True) == ["Same"]

    def test_expenses_by_category_includes_hidden(self, services, tracker):
        """Test grouping covers every expense, including soft-deleted categories."""
        tracker.add_expense("1", "Food")
        tracker.add_expense("2", "Food")
        tracker.add_expense("3", "Hidden")
        tracker.soft_delete_category("Hidden")

        grouped = services.queries.expenses_by_category()

        assert set(grouped) == {"Food", "Hidden"}
        assert len(grouped["Food"]) == 2
        assert len(grouped["Hidden"]) == 1

    def test_expenses_by_category_is_recomputed(self, services, tracker):
        """Test that results reflect later commits instead of a cached copy."""
        first = services.queries.expenses_by_category()
        tracker.add_expense("1", "Food")

        assert first == {}
        assert "Food" in services.queries.expenses_by_category()

    def test_unresolved_category_grouped_as_uncategorized(self, services, db_manager_with_schema):
        """Test the sentinel group for an expense whose category link is broken."""
        with db_manager_with_schema.connect() as conn:
            conn.execute("PRAGMA foreign_keys = OFF")
            conn.execute(
                "INSERT INTO expenses (id, category_id, amount, description, expense_date) "
                "VALUES ('orphan', 4242, '9.99', 'lost', '2025-01-01T00:00:00')"
            )
            conn.commit()

        grouped = services.queries.expenses_by_category()

        assert [e.id for e in grouped[UNCATEGORIZED]] == ["orphan"]
        assert UNCATEGORIZED not in services.queries.categories_with_expenses()

    def test_categories_with_expenses(self, services, tracker):
        """Test that only active categories with expenses are listed."""
        tracker.add_category("Empty")
        tracker.add_expense("1", "Food")
        tracker.add_expense("1", "Hidden")
        tracker.soft_delete_category("Hidden")

        assert services.queries.categories_with_expenses() == ["Food"]

    def test_expenses_for_newest_first(self, services, tracker):
        old = tracker.add_expense("1", "Food", date=datetime(2024, 1, 1))
        new = tracker.add_expense("2", "Food", date=datetime(2024, 6, 1))

        assert [e.id for e in services.queries.expenses_for("Food")] == [new.id, old.id]

    def test_expenses_for_unknown_category(self, services):
        assert services.queries.expenses_for("Nope") == []

    def test_total_for_category(self, services, tracker):
        tracker.add_expense("10.10", "Food")
        tracker.add_expense("0.20", "Food")
        tracker.add_category("Empty")

        assert services.queries.total_for_category("Food") == Decimal("10.30")
        assert services.queries.total_for_category("Empty") == Decimal("0")
        assert services.queries.total_for_category("Nope") == Decimal("0")

    def test_category_totals_largest_first(self, services, tracker):
        """Test chart totals skip hidden categories and sort by amount."""
        tracker.add_expense("5", "Food")
        tracker.add_expense("5", "Food")
        tracker.add_expense("30", "Rent")
        tracker.add_expense("1", "Books")
        tracker.add_expense("100", "Hidden")
        tracker.soft_delete_category("Hidden")

        assert services.queries.category_totals() == [
            ("Rent", Decimal("30")),
            ("Food", Decimal("10")),
            ("Books", Decimal("1")),
        ]
        assert services.queries.grand_total() == Decimal("41")

    def test_grand_total_empty(self, services):
        assert services.queries.grand_total() == Decimal("0")

    def test_queries_do_not_notify(self, services, tracker):
        """Test that reads never raise change notifications."""
        tracker.add_expense("1", "Food")
        assert services.notifier.flush(timeout=5)
        seen = []
        services.notifier.subscribe(seen.append)

        services.queries.expenses_by_category()
        services.queries.categories_for_picker()
        services.queries.total_for_category("Food")

        assert services.notifier.flush(timeout=5)
        assert seen == []

    def test_category_model_default_active(self):
        assert Category(id=1, name="X").is_deleted is False
