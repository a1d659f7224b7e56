"""Storage for the single-slot undo register."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from models.category import Category
from models.undo import DeletionKind, ExpenseSnapshot, UndoSnapshot


class UndoSlotService:
    """Reads and writes the one stored UndoSnapshot.

    The slot lives in the database so it is written in the same transaction
    as the deletion it describes. Writing always replaces whatever was there.
    """

    def __init__(self, db_manager):
        self.db_manager = db_manager

    def write(self, snapshot: UndoSnapshot, conn=None) -> None:
        """Store a snapshot, discarding any previous one."""
        with self.db_manager.transaction(conn, reason="write undo slot") as c:
            self.clear(conn=c)
            c.execute(
                """
                INSERT INTO undo_slot (slot, kind, category_id, category_name, taken_at)
                VALUES (1, ?, ?, ?, ?)
                """,
                (
                    snapshot.kind.value,
                    snapshot.category.id,
                    snapshot.category.name,
                    snapshot.taken_at.isoformat(),
                ),
            )
            c.executemany(
                """
                INSERT INTO undo_slot_expenses
                    (position, expense_id, amount, description, expense_date)
                VALUES (?, ?, ?, ?, ?)
                """,
                [
                    (
                        position,
                        e.id,
                        str(e.amount),
                        e.description,
                        e.date.isoformat(),
                    )
                    for position, e in enumerate(snapshot.expenses)
                ],
            )

    def read(self, conn=None) -> Optional[UndoSnapshot]:
        """Return the stored snapshot, or None if the slot is empty."""
        with self.db_manager.snapshot(conn) as c:
            head = c.execute(
                "SELECT kind, category_id, category_name, taken_at FROM undo_slot WHERE slot = 1"
            ).fetchone()
            if head is None:
                return None

            rows = c.execute(
                """
                SELECT expense_id, amount, description, expense_date
                FROM undo_slot_expenses
                ORDER BY position
                """
            ).fetchall()

        return UndoSnapshot(
            kind=DeletionKind(head[0]),
            category=Category(id=head[1], name=head[2], is_deleted=True),
            expenses=[
                ExpenseSnapshot(
                    id=row[0],
                    amount=Decimal(row[1]),
                    description=row[2],
                    date=datetime.fromisoformat(row[3]),
                )
                for row in rows
            ],
            taken_at=datetime.fromisoformat(head[3]),
        )

    def clear(self, conn=None) -> None:
        """Empty the slot."""
        with self.db_manager.transaction(conn, reason="clear undo slot") as c:
            c.execute("DELETE FROM undo_slot_expenses")
            c.execute("DELETE FROM undo_slot")
