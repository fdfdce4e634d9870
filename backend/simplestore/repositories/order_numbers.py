"""
Human-readable document numbers: ``{PREFIX}{YYYYMMDD}{NNN}``.

The sequence restarts every day per prefix and is padded to three digits;
past 999 it simply grows wider. The next value is derived from the highest
existing suffix for the day, so numbers freed by a deletion are not reused
while a later number still exists.
"""

import datetime as dt
from typing import Iterable, Optional

from sqlalchemy import select

PURCHASE_ORDER_PREFIX = "PO"
SALES_ORDER_PREFIX = "SO"
RETURN_PREFIX = "RET"


def number_stem(prefix: str, on_date: dt.date) -> str:
    return f"{prefix}{on_date:%Y%m%d}"


def format_order_number(prefix: str, on_date: dt.date, sequence: int) -> str:
    return f"{number_stem(prefix, on_date)}{sequence:03d}"


def parse_sequence(number: str, stem: str) -> Optional[int]:
    """Return the numeric suffix of ``number`` when it belongs to ``stem``."""
    if not number or not number.startswith(stem):
        return None
    suffix = number[len(stem):]
    if not suffix.isdigit():
        return None
    return int(suffix)


def next_sequence(existing: Iterable[str], stem: str) -> int:
    sequences = [parse_sequence(number, stem) for number in existing]
    return max((seq for seq in sequences if seq is not None), default=0) + 1


def next_order_number(db, column, prefix: str, on_date: dt.date) -> str:
    """Allocate the next number for ``prefix`` on ``on_date``.

    Args:
        db: SQLAlchemy session (the creating transaction)
        column: Mapped column holding the numbers, e.g. SalesOrder.order_number
        prefix: PO, SO or RET
        on_date: Creation date
    """
    stem = number_stem(prefix, on_date)
    existing = db.execute(select(column).where(column.like(f"{stem}%"))).scalars()
    return format_order_number(prefix, on_date, next_sequence(existing, stem))
