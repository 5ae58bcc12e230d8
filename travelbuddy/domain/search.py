"""
Trip search helpers.

Route search matches departure and arrival exactly (case-insensitive)
and tolerates a few days of slack around the requested date, so a
traveler asking for the 10th also sees trips leaving on the 8th-12th.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional


def date_window(on_date: date, days: int) -> tuple[date, date]:
    """Inclusive ``(start, end)`` range of *days* either side of *on_date*."""
    if days < 0:
        raise ValueError(f"days must be >= 0, got {days}")
    delta = timedelta(days=days)
    return on_date - delta, on_date + delta


def normalize_query(query: Optional[str]) -> Optional[str]:
    """Lower-cased, trimmed search text; ``None`` when there is nothing to match."""
    if query is None:
        return None
    query = query.strip().lower()
    return query or None
