"""One-call recomputation of everything the main ledger view shows."""

from datetime import date
from typing import Iterable

from src.engine.ordering import compute_display_feed
from src.engine.today import compute_today_split
from src.engine.windows import compute_window_totals
from src.models.ledger import Entry, LedgerDashboard, Person


def compute_dashboard(
    entries: Iterable[Entry],
    people: Iterable[Person],
    today: date,
) -> LedgerDashboard:
    """
    Run every aggregation over the same snapshot.

    The inputs are materialized once so a generator is not consumed by the
    first component.
    """
    entries = list(entries)
    people = list(people)

    totals, breakdown = compute_window_totals(entries, today)
    return LedgerDashboard(
        today=today,
        feed=compute_display_feed(entries, people),
        today_split=compute_today_split(entries, today),
        period_totals=totals,
        breakdown=breakdown,
    )
