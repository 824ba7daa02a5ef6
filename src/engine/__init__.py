"""
Ledger aggregation engine.

Pure functions of (entries, roster, today). Nothing here reads the clock,
touches storage or logs; callers pass an immutable snapshot and get a
fresh result back.
"""

from src.engine.dashboard import compute_dashboard
from src.engine.errors import LedgerComputationError, MalformedDateError
from src.engine.ordering import (
    chronological_order,
    collation_key,
    compute_display_feed,
    entry_day,
    resolve_person_name,
)
from src.engine.today import compute_today_split
from src.engine.windows import compute_window_totals, week_start, year_start

__all__ = [
    "LedgerComputationError",
    "MalformedDateError",
    "chronological_order",
    "collation_key",
    "compute_dashboard",
    "compute_display_feed",
    "compute_today_split",
    "compute_window_totals",
    "entry_day",
    "resolve_person_name",
    "week_start",
    "year_start",
]
