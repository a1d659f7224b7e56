"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager


class Services:
    """Container for all application services.

    This class provides a centralized way to access all services and makes
    it easy to inject a test database manager.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config is ignored.
    """

    def __init__(self, config: Config, db_manager=None):
        """Initialize services with configuration.

        Args:
            config: Config object containing application configuration.
            db_manager: Optional database manager for dependency injection (testing).
                       If None, creates DatabaseManager from config.
        """
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from services.categories import CategoryService
        from services.expenses import ExpenseService
        from services.lifecycle import CategoryLifecycle
        from services.notifier import ChangeNotifier
        from services.queries import QueryFacade
        from services.tracker import ExpenseTracker
        from services.undo_slot import UndoSlotService

        self.notifier = ChangeNotifier()
        self.db_manager.add_commit_listener(self.notifier.notify_changed)

        self.categories = CategoryService(self.db_manager)
        self.expenses = ExpenseService(self.db_manager)
        self.undo_slot = UndoSlotService(self.db_manager)
        self.lifecycle = CategoryLifecycle(
            self.db_manager, self.categories, self.expenses, self.undo_slot
        )
        self.queries = QueryFacade(self.db_manager)
        self.tracker = ExpenseTracker(
            self.db_manager,
            self.categories,
            self.expenses,
            self.lifecycle,
            self.queries,
            self.notifier,
        )

    def close(self) -> None:
        """Deliver pending change notifications and stop the notifier."""
        self.notifier.close()
