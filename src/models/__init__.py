"""
Data Models Package

This package contains all Pydantic models used by the offering ledger.
All data flowing through the system must conform to these schemas.
"""

from src.models.ledger import (
    ANONYMOUS_PERSON_NAME,
    DEFAULT_EXPENSE_CATEGORIES,
    INCOME_DISPLAY_PRIORITY,
    UNSPECIFIED_PERSON_NAME,
    CategoryWindowBreakdown,
    DateRange,
    Entry,
    EntryKind,
    IncomeCategory,
    LedgerDashboard,
    LedgerSnapshot,
    PeriodTotals,
    Person,
    Position,
    RecurringCategory,
    RunningBalanceEntry,
    SearchResult,
    TodaySplit,
    TodaysTotals,
)
from src.models.query import LedgerQuery, LedgerQueryResult
from src.models.validation import EntryDraft, ValidationIssue, ValidationResult

__all__ = [
    # Constants
    "ANONYMOUS_PERSON_NAME",
    "DEFAULT_EXPENSE_CATEGORIES",
    "INCOME_DISPLAY_PRIORITY",
    "UNSPECIFIED_PERSON_NAME",
    # Ledger models
    "CategoryWindowBreakdown",
    "DateRange",
    "Entry",
    "EntryKind",
    "IncomeCategory",
    "LedgerDashboard",
    "LedgerSnapshot",
    "PeriodTotals",
    "Person",
    "Position",
    "RecurringCategory",
    "RunningBalanceEntry",
    "SearchResult",
    "TodaySplit",
    "TodaysTotals",
    # Query models
    "LedgerQuery",
    "LedgerQueryResult",
    # Validation models
    "EntryDraft",
    "ValidationIssue",
    "ValidationResult",
]
