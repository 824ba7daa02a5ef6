"""
Query/Filter functions.

Pure selections over a list of entries. A date range is inclusive on both
ends; an inverted range matches nothing rather than raising.
"""

from datetime import date, timedelta
from typing import Iterable

from src.engine.ordering import entry_day
from src.models.ledger import (
    DateRange,
    Entry,
    EntryKind,
    SearchResult,
    TodaysTotals,
)


def default_search_range(today: date, lookback_days: int = 365) -> DateRange:
    """
    The range the lookup view opens with: one year back to today.

    With the default lookback this is the same calendar day a year earlier
    (February 29 falls back to February 28).
    """
    if lookback_days == 365:
        try:
            start = today.replace(year=today.year - 1)
        except ValueError:
            start = today.replace(year=today.year - 1, day=28)
    else:
        start = today - timedelta(days=lookback_days)
    return DateRange(start=start, end=today)


def _in_range(entries: Iterable[Entry], date_range: DateRange) -> list[Entry]:
    if date_range.is_empty:
        return []
    return [entry for entry in entries if date_range.contains(entry_day(entry))]


def _result(matches: list[Entry]) -> SearchResult:
    return SearchResult(
        matches=matches,
        total=sum(entry.effective_amount for entry in matches),
    )


def search_by_person(
    entries: Iterable[Entry],
    person_id: int,
    date_range: DateRange,
) -> SearchResult:
    """Income given by one person within the range. Expenses never match."""
    matches = [
        entry for entry in _in_range(entries, date_range)
        if entry.is_income and entry.person_id == person_id
    ]
    return _result(matches)


def search_by_category(
    entries: Iterable[Entry],
    kind: EntryKind,
    category: str,
    date_range: DateRange,
) -> SearchResult:
    """Entries of the given kind and exact category within the range."""
    matches = [
        entry for entry in _in_range(entries, date_range)
        if entry.kind == kind and entry.category == category
    ]
    return _result(matches)


def todays_totals(entries: Iterable[Entry], today: date) -> TodaysTotals:
    """Income and expense totals for entries dated exactly `today`."""
    total_income = 0
    total_expense = 0
    for entry in entries:
        if entry_day(entry) != today:
            continue
        if entry.is_income:
            total_income += entry.effective_amount
        else:
            total_expense += entry.effective_amount
    return TodaysTotals(total_income=total_income, total_expense=total_expense)
