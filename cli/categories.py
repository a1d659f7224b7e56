#!/usr/bin/env python3

import sys
from errors import NeedsConfirmation, NotFoundError, ValidationError
from logger import get_logger

logger = get_logger(__name__)


def cmd_list(args, services):
    """List categories, optionally including soft-deleted ones."""
    categories = services.categories.find_all(include_deleted=args.all)

    if not categories:
        logger.info("No categories found.")
        return

    logger.info("\nCategories:")
    logger.info("=" * 80)
    for category in categories:
        total = services.queries.total_for_category(category.name)
        status = " (deleted)" if category.is_deleted else ""
        logger.info(f"{category.id:>4}  {category.name}{status}  total: {total}")

    logger.info(f"\nTotal categories: {len(categories)}")


def cmd_create(args, services):
    """Create a category, reactivating a soft-deleted one with the same name."""
    try:
        category = services.tracker.add_category(args.name)
    except ValidationError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"✓ Category '{category.name}' is available (ID: {category.id})")


def cmd_delete(args, services):
    """Soft-delete a category: hide it but keep its expenses."""
    try:
        changed = services.tracker.soft_delete_category(args.name)
    except (NotFoundError, ValidationError) as e:
        logger.error(str(e))
        sys.exit(1)

    if changed:
        logger.info(f"✓ Category '{args.name}' hidden. Run 'categories undo' to bring it back.")
    else:
        logger.info(f"Category '{args.name}' has no expenses; nothing to hide.")


def cmd_purge(args, services):
    """Permanently delete a category and all of its expenses."""
    try:
        try:
            snapshot = services.tracker.hard_delete_category(args.name, confirmed=args.yes)
        except NeedsConfirmation as e:
            confirm = input(f"\n{e}. Are you sure? (yes/no): ").strip().lower()
            if confirm != "yes":
                logger.info("Deletion cancelled.")
                return
            snapshot = services.tracker.hard_delete_category(args.name, confirmed=True)
    except (NotFoundError, ValidationError) as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(
        f"✓ Category '{snapshot.category.name}' deleted with "
        f"{len(snapshot.expenses)} expense(s). Run 'categories undo' to restore."
    )


def cmd_undo(args, services):
    """Undo the last category deletion."""
    category = services.tracker.undo_last_category_deletion()

    if category is None:
        logger.info("Nothing to undo.")
        return

    count = len(services.tracker.expenses_for(category.name))
    logger.info(f"✓ Restored category '{category.name}' ({count} expense(s))")


def cmd_seed(args, services):
    """Create the default categories from the configuration."""
    created_count = 0
    skipped_count = 0

    for name in services.config.default_categories:
        existing = services.categories.find_by_name(name)
        if existing:
            state = "hidden" if existing.is_deleted else "already exists"
            logger.info(f"⊘ Skipped '{name}' ({state})")
            skipped_count += 1
            continue

        try:
            category = services.tracker.add_category(name)
        except ValidationError as e:
            logger.warning(f"Skipping category '{name}': {e}")
            continue

        logger.info(f"✓ Created '{category.name}' (ID: {category.id})")
        created_count += 1

    logger.info(f"\nCreated: {created_count}")
    logger.info(f"Skipped: {skipped_count}")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="Create, list, hide, permanently delete and restore categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    list_parser = categories_subparsers.add_parser("list", help="List categories")
    list_parser.add_argument(
        "--all", action="store_true", help="Include soft-deleted categories"
    )
    list_parser.set_defaults(func=cmd_list)

    create_parser = categories_subparsers.add_parser("create", help="Create a category")
    create_parser.add_argument("name", help="Category name")
    create_parser.set_defaults(func=cmd_create)

    delete_parser = categories_subparsers.add_parser(
        "delete", help="Hide a category, keeping its expenses"
    )
    delete_parser.add_argument("name", help="Category name")
    delete_parser.set_defaults(func=cmd_delete)

    purge_parser = categories_subparsers.add_parser(
        "purge", help="Permanently delete a category and its expenses"
    )
    purge_parser.add_argument("name", help="Category name")
    purge_parser.add_argument(
        "--yes", action="store_true", help="Do not ask for confirmation"
    )
    purge_parser.set_defaults(func=cmd_purge)

    undo_parser = categories_subparsers.add_parser(
        "undo", help="Undo the last category deletion"
    )
    undo_parser.set_defaults(func=cmd_undo)

    seed_parser = categories_subparsers.add_parser(
        "seed", help="Create the default categories"
    )
    seed_parser.set_defaults(func=cmd_seed)
