"""Logging configuration for Tally.

Sets up logging to both file (with date-based naming) and console. Modules
log through children of the ``tally`` logger, e.g. ``tally.services.lifecycle``.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Optional

from config import Config

ROOT_LOGGER_NAME = "tally"


def log_file_path(config: Config, day: Optional[date] = None) -> Path:
    """Path of the log file for a given day (today by default)."""
    day = day or date.today()
    return config.log_dir / f"tally-{day.isoformat()}.log"


def setup_logging(config: Config) -> logging.Logger:
    """Set up application logging with file and console handlers.

    Args:
        config: Application configuration containing log settings.

    Returns:
        Configured root application logger.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(config.log_level)

    # Calling this twice must not duplicate output
    logger.handlers.clear()

    file_handler = logging.FileHandler(log_file_path(config))
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    # Console output is what the CLI user reads, so keep it bare
    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get the application logger, or one of its children.

    Args:
        name: Optional module name; ``get_logger(__name__)`` gives a child
            logger that inherits the application handlers and level.

    Returns:
        The tally logger instance.
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
