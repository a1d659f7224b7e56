#!/usr/bin/env python3

import sys
from errors import NotFoundError, ValidationError
from logger import get_logger

logger = get_logger(__name__)


def cmd_add(args, services):
    """Add an expense, creating or reactivating its category as needed."""
    try:
        expense = services.tracker.add_expense(
            args.amount, args.category, args.description or ""
        )
    except ValidationError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"✓ Added {expense.amount} to '{args.category.strip()}' (ID: {expense.id})")


def cmd_list(args, services):
    """List expenses grouped by category."""
    if args.category:
        grouped = {args.category: services.tracker.expenses_for(args.category)}
    else:
        grouped = {
            name: services.tracker.expenses_for(name)
            for name in services.tracker.categories_with_expenses()
        }

    if not any(grouped.values()):
        logger.info("No expenses found.")
        return

    for name, expenses in grouped.items():
        logger.info(f"\n{name}")
        logger.info("-" * 80)
        for expense in expenses:
            logger.info(
                f"{expense.date:%d/%m/%Y}  {expense.amount:>10}  "
                f"{expense.description}  [{expense.id}]"
            )
        logger.info(f"Total: {services.queries.total_for_category(name)}")


def cmd_delete(args, services):
    """Delete an expense by ID."""
    try:
        services.tracker.delete_expense(args.expense_id)
    except NotFoundError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"✓ Expense {args.expense_id} deleted.")


def setup_parser(subparsers):
    """Setup expenses subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "expenses",
        help="Manage expenses",
        description="Add, list and delete expenses",
    )

    expenses_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available expense commands",
        dest="subcommand",
        required=True,
    )

    add_parser = expenses_subparsers.add_parser("add", help="Add an expense")
    add_parser.add_argument("amount", help="Amount spent (non-negative)")
    add_parser.add_argument("category", help="Category name; created if unknown")
    add_parser.add_argument("-d", "--description", help="Optional description")
    add_parser.set_defaults(func=cmd_add)

    list_parser = expenses_subparsers.add_parser(
        "list", help="List expenses grouped by category"
    )
    list_parser.add_argument(
        "--category", help="Only this category (works for hidden categories too)"
    )
    list_parser.set_defaults(func=cmd_list)

    delete_parser = expenses_subparsers.add_parser("delete", help="Delete an expense")
    delete_parser.add_argument("expense_id", help="ID of the expense to delete")
    delete_parser.set_defaults(func=cmd_delete)
