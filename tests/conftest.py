"""Shared pytest fixtures for all tests."""

import pytest

from cli.migrate import apply_pending
from config import Config
from db.manager import DatabaseManager
from services.base import Services


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary database.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "tally",
        db_data_dir=tmp_path / "tally" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "tally" / "logs",
        default_categories=["Personal", "Business", "Entertainment", "Home"],
    )


@pytest.fixture
def db_manager_with_schema(test_config):
    """Create a DatabaseManager whose database has all migrations applied.

    Args:
        test_config: Test configuration fixture.

    Returns:
        DatabaseManager: Database manager with schema ready.
    """
    db_manager = DatabaseManager(test_config)
    apply_pending(db_manager)
    return db_manager


@pytest.fixture
def services(test_config, db_manager_with_schema):
    """Create a Services container with test database.

    Args:
        test_config: Test configuration fixture.
        db_manager_with_schema: Database manager with schema set up.

    Yields:
        Services: Services container for testing.
    """
    services = Services(test_config, db_manager=db_manager_with_schema)
    yield services
    services.close()


@pytest.fixture
def tracker(services):
    """The ExpenseTracker of the test Services container."""
    return services.tracker
