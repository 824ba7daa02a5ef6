"""
Query Execution Engine

DESIGN DECISION: Query execution is DETERMINISTIC.
The lookup view builds a LedgerQuery; this engine runs it against a fresh
snapshot of the entity store and returns exactly what matched.

Nothing is cached between calls. Every execution reads the store once and
works on that snapshot only.
"""

from datetime import date
from typing import Callable, Optional

from src.engine.ordering import resolve_person_name
from src.models.ledger import DateRange, EntryKind, LedgerSnapshot
from src.models.query import LedgerQuery, LedgerQueryResult
from src.queries.filters import (
    default_search_range,
    search_by_category,
    search_by_person,
    todays_totals,
)
from src.services.storage import EntityStoreInterface


class QueryExecutionError(Exception):
    """Error during query execution."""
    pass


class LedgerQueryExecutor:
    """
    Executes ledger queries against an entity store.

    GUARANTEES:
    - Only returns real entries from the store
    - Never raises; a failed query comes back with success=False
    - Clear "no data found" (result_count == 0) if nothing matches
    """

    def __init__(
        self,
        store: EntityStoreInterface,
        today: Optional[Callable[[], date]] = None,
        lookback_days: int = 365,
    ):
        self._store = store
        self._today = today or date.today
        self._lookback_days = lookback_days

    def execute(self, query: LedgerQuery) -> LedgerQueryResult:
        """
        Execute a query and return results.

        Missing range bounds default to the last year up to today.
        """
        try:
            snapshot = self._store.snapshot()
            today = self._today()

            if query.query_type == "person":
                return self._execute_person(query, snapshot, today)
            elif query.query_type == "category":
                return self._execute_category(query, snapshot, today)
            elif query.query_type == "today":
                return self._execute_today(query, snapshot, today)
            else:
                raise QueryExecutionError(f"Unknown query type: {query.query_type}")

        except Exception as e:
            return LedgerQueryResult(
                query_id=query.query_id,
                success=False,
                error_message=str(e),
                query_description=f"Query failed: {str(e)}",
            )

    def _range_for(self, query: LedgerQuery, today: date) -> DateRange:
        default = default_search_range(today, self._lookback_days)
        return DateRange(
            start=query.date_from or default.start,
            end=query.date_to or default.end,
        )

    def _execute_person(
        self,
        query: LedgerQuery,
        snapshot: LedgerSnapshot,
        today: date,
    ) -> LedgerQueryResult:
        """Income given by one person."""
        date_range = self._range_for(query, today)
        result = search_by_person(snapshot.entries, query.person_id, date_range)

        name = resolve_person_name(query.person_id, snapshot.person_names())
        desc_parts = [f"Income from {name}", self._date_range_str(date_range)]

        return LedgerQueryResult(
            query_id=query.query_id,
            success=True,
            matches=result.matches,
            total=result.total,
            result_count=len(result.matches),
            query_description=" | ".join(desc_parts),
        )

    def _execute_category(
        self,
        query: LedgerQuery,
        snapshot: LedgerSnapshot,
        today: date,
    ) -> LedgerQueryResult:
        """Entries of one kind and category."""
        date_range = self._range_for(query, today)
        result = search_by_category(snapshot.entries, query.kind, query.category, date_range)

        label = "Income" if query.kind == EntryKind.INCOME else "Expense"
        desc_parts = [f"{label} in {query.category}", self._date_range_str(date_range)]

        return LedgerQueryResult(
            query_id=query.query_id,
            success=True,
            matches=result.matches,
            total=result.total,
            result_count=len(result.matches),
            query_description=" | ".join(desc_parts),
        )

    def _execute_today(
        self,
        query: LedgerQuery,
        snapshot: LedgerSnapshot,
        today: date,
    ) -> LedgerQueryResult:
        """Totals for entries dated today, independent of any range."""
        totals = todays_totals(snapshot.entries, today)
        matches = [entry for entry in snapshot.entries if entry.entry_date == today]

        return LedgerQueryResult(
            query_id=query.query_id,
            success=True,
            matches=matches,
            total=totals.total_income - totals.total_expense,
            result_count=len(matches),
            total_income=totals.total_income,
            total_expense=totals.total_expense,
            query_description=f"Today's totals {self._date_range_str(DateRange(start=today, end=today))}",
        )

    def _date_range_str(self, date_range: DateRange) -> str:
        """Format date range for description."""
        date_from, date_to = date_range.start, date_range.end
        if date_range.is_empty:
            return "empty range"
        if date_from == date_to:
            return f"on {date_from.strftime('%d %b %Y')}"
        elif date_from.month == date_to.month and date_from.year == date_to.year:
            return f"in {date_from.strftime('%B %Y')}"
        elif date_from.year == date_to.year:
            return f"from {date_from.strftime('%b')} to {date_to.strftime('%b %Y')}"
        else:
            return f"from {date_from.strftime('%b %Y')} to {date_to.strftime('%b %Y')}"
