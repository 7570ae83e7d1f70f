"""Ordering and grouping of entries by publication year."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .types import Entry, YearGroups

logger = logging.getLogger(__name__)

UNKNOWN_YEAR = "Unknown"


def entry_year(entry: Entry) -> str:
    """Return the entry's ``year`` field, or ``"Unknown"`` when it has none."""
    return entry.get("year") or UNKNOWN_YEAR


def year_value(year: str) -> int:
    """Numeric value of a year string; non-numeric years count as 0."""
    try:
        return int(year)
    except ValueError:
        return 0


def sort_by_year(entries: Iterable[Entry]) -> list[Entry]:
    """Sort entries newest first, keeping document order within a year."""
    return sorted(entries, key=lambda entry: year_value(entry.get("year")), reverse=True)


def group_by_year(entries: Iterable[Entry]) -> YearGroups:
    """Group entries by year.

    Groups are ordered by year descending; ``Unknown`` and any other
    non-numeric year come last. Entries inside a group keep their order.
    """
    grouped: YearGroups = {}
    for entry in entries:
        grouped.setdefault(entry_year(entry), []).append(entry)

    ordered_years = sorted(grouped, key=lambda year: (not year.isdigit(), -year_value(year)))
    logger.debug(f"Grouped entries into {len(ordered_years)} years")
    return {year: grouped[year] for year in ordered_years}
