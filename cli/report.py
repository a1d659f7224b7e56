#!/usr/bin/env python3

from logger import get_logger

logger = get_logger(__name__)


def cmd_totals(args, services):
    """Show spending per active category, largest first."""
    totals = services.queries.category_totals()

    if not totals:
        logger.info("No expenses recorded yet.")
        return

    grand_total = services.queries.grand_total()

    logger.info("\nSpending by category:")
    logger.info("=" * 80)
    for name, total in totals:
        share = (total / grand_total * 100) if grand_total else 0
        logger.info(f"{name:<30} {total:>12.2f}  {share:5.1f}%")
    logger.info("=" * 80)
    logger.info(f"{'Expenses':<30} {grand_total:>12.2f}")


def setup_parser(subparsers):
    """Setup report subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "report",
        help="Spending reports",
        description="Summaries of spending per category",
    )

    report_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available reports",
        dest="subcommand",
        required=True,
    )

    totals_parser = report_subparsers.add_parser(
        "totals", help="Totals per category"
    )
    totals_parser.set_defaults(func=cmd_totals)
