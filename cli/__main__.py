#!/usr/bin/env python3
"""
Tally CLI - Command-line interface for tracking expenses by category.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    expenses     Add, list and delete expenses
    categories   Manage categories (soft delete, purge, undo)
    report       Spending totals per category
    migrate      Database migrations

Examples:
    python -m cli migrate apply
    python -m cli expenses add 50 Travel -d flight
    python -m cli categories delete Travel
    python -m cli categories purge Travel
    python -m cli categories undo
    python -m cli report totals
"""

import sys
import argparse
from cli import categories, expenses, migrate, report
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging, get_logger


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Tally - Personal expense tracking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    # Register each command's subparser
    expenses.setup_parser(subparsers)
    categories.setup_parser(subparsers)
    report.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            if args.command == "migrate":
                # Migrate commands need db_manager for raw database operations
                args.func(args, DatabaseManager(config))
                return

            services = Services(config)
            services.notifier.subscribe(
                lambda event: get_logger().debug(
                    f"Data changed (#{event.sequence}): {event.reason}"
                )
            )
            try:
                args.func(args, services)
            finally:
                services.close()
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
