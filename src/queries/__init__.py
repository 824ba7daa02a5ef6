"""Query execution package."""

from src.queries.executor import LedgerQueryExecutor, QueryExecutionError
from src.queries.filters import (
    default_search_range,
    search_by_category,
    search_by_person,
    todays_totals,
)

__all__ = [
    "LedgerQueryExecutor",
    "QueryExecutionError",
    "default_search_range",
    "search_by_category",
    "search_by_person",
    "todays_totals",
]
