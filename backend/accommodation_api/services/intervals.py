"""Date range overlap predicates shared by pricing rules and blocked periods.

Two flavours exist:

* closed ranges, used when validating rules and blocks against each other:
  both endpoints belong to the range, so ``[1, 5]`` and ``[5, 9]`` overlap;
* the search window test, where the requested stay is half-open
  (``check_out`` is the departure day) and a block may have no end.

Each predicate has a pure form and a SQLAlchemy clause form so that the
same semantics apply in memory and in queries.
"""

from __future__ import annotations

import datetime
from typing import Any

from sqlalchemy import ColumnElement, and_, or_


def overlaps(
    a_start: datetime.date,
    a_end: datetime.date,
    b_start: datetime.date,
    b_end: datetime.date,
) -> bool:
    """Return True when the closed ranges share at least one day."""

    return a_start <= b_end and b_start <= a_end


def overlaps_open(
    block_start: datetime.date,
    block_end: datetime.date | None,
    window_start: datetime.date,
    window_end: datetime.date,
) -> bool:
    """Return True when a block conflicts with a requested stay window."""

    if block_start >= window_end:
        return False
    return block_end is None or block_end > window_start


def overlap_clause(
    start_column: Any,
    end_column: Any,
    start: datetime.date,
    end: datetime.date,
) -> ColumnElement[bool]:
    """SQL form of :func:`overlaps` against a stored range."""

    return and_(start_column <= end, end_column >= start)


def open_overlap_clause(
    start_column: Any,
    end_column: Any,
    window_start: datetime.date,
    window_end: datetime.date,
) -> ColumnElement[bool]:
    """SQL form of :func:`overlaps_open` against a stored block."""

    return and_(
        start_column < window_end,
        or_(end_column.is_(None), end_column > window_start),
    )


def iter_nights(check_in: datetime.date, nights: int):
    """Yield each night of a stay starting at ``check_in``."""

    for offset in range(nights):
        yield check_in + datetime.timedelta(days=offset)


__all__ = [
    "iter_nights",
    "open_overlap_clause",
    "overlap_clause",
    "overlaps",
    "overlaps_open",
]
