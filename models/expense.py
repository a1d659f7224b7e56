from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Union
import uuid

from errors import ValidationError


def parse_amount(value: Union[Decimal, int, float, str]) -> Decimal:
    """Convert user input to a non-negative, finite Decimal.

    Raises:
        ValidationError: If the value is not a number, is negative, or is not finite.
    """
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Amount must be a number, got {value!r}")

    if not amount.is_finite():
        raise ValidationError(f"Amount must be finite, got {value!r}")
    if amount < 0:
        raise ValidationError(f"Amount cannot be negative, got {value!r}")
    return amount


@dataclass
class Expense:
    id: str  # uuid4 hex, kept across delete/undo
    category_id: int
    amount: Decimal  # always non-negative
    description: str
    date: datetime

    @classmethod
    def new(
        cls,
        category_id: int,
        amount: Union[Decimal, int, float, str],
        description: Optional[str] = "",
        date: Optional[datetime] = None,
    ) -> "Expense":
        """Create an Expense with a fresh id, defaulting the date to now."""
        return cls(
            id=uuid.uuid4().hex,
            category_id=category_id,
            amount=parse_amount(amount),
            description=description or "",
            date=date or datetime.now(),
        )

    def to_row(self) -> tuple:
        """Convert expense to a row tuple for database storage."""
        return (
            self.id,
            self.category_id,
            str(self.amount),
            self.description,
            self.date.isoformat(),
        )
