"""
Core Data Models for the Offering Ledger

These models define the schemas for everything the ledger stores and
everything the aggregation engine derives from it.

DESIGN DECISION: Stored records (Person, Entry) are frozen pydantic models.
Entries are immutable once created; the engine only ever reads them, so
passing the same list to several computations can never leak state between
them.

Derived results (RunningBalanceEntry, PeriodTotals, ...) are recomputed from
scratch on every change and are never persisted.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class EntryKind(str, Enum):
    """Direction of money for an entry. Amounts are never stored negative."""
    INCOME = "income"
    EXPENSE = "expense"


class IncomeCategory(str, Enum):
    """
    Closed vocabulary of income categories.

    Declared in the order the capture form offers them. The display
    priority used for same-day ordering is a separate list
    (INCOME_DISPLAY_PRIORITY) because the two orders differ.
    """
    TITHE = "tithe"
    THANKSGIVING = "thanksgiving"
    BUILDING_FUND = "building fund"
    MISSIONS = "missions"
    WEEKLY_OFFERING = "weekly offering"
    SEASONAL_OFFERING = "seasonal offering"
    BIRTHDAY_THANKS = "birthday thanks"
    VISITATION_THANKS = "visitation thanks"
    THOUSANDFOLD_OFFERING = "thousand-fold offering"
    OTHER = "other"


class RecurringCategory(str, Enum):
    """
    The six income categories tracked individually in the weekly breakdown.

    Together they make up the congregation's operating fund. Declaration
    order is the order the breakdown is reported in.
    """
    WEEKLY_OFFERING = IncomeCategory.WEEKLY_OFFERING.value
    TITHE = IncomeCategory.TITHE.value
    THANKSGIVING = IncomeCategory.THANKSGIVING.value
    BIRTHDAY_THANKS = IncomeCategory.BIRTHDAY_THANKS.value
    VISITATION_THANKS = IncomeCategory.VISITATION_THANKS.value
    THOUSANDFOLD_OFFERING = IncomeCategory.THOUSANDFOLD_OFFERING.value


class Position(str, Enum):
    """Role of a person within the congregation."""
    PASTOR = "pastor"
    PASTORS_WIFE = "pastor's wife"
    ASSOCIATE_PASTOR = "associate pastor"
    EVANGELIST = "evangelist"
    ELDER = "elder"
    SENIOR_DEACONESS = "senior deaconess"
    DEACON = "deacon"
    MEMBER = "member"
    YOUNG_ADULT = "young adult"
    YOUTH_GROUP = "youth group"
    SUNDAY_SCHOOL = "sunday school"
    ANONYMOUS = "anonymous"
    OTHER = "other"


# Same-day income is displayed in this order (first shown first).
INCOME_DISPLAY_PRIORITY: tuple[str, ...] = (
    IncomeCategory.TITHE.value,
    IncomeCategory.MISSIONS.value,
    IncomeCategory.BUILDING_FUND.value,
    IncomeCategory.THANKSGIVING.value,
    IncomeCategory.WEEKLY_OFFERING.value,
    IncomeCategory.SEASONAL_OFFERING.value,
    IncomeCategory.BIRTHDAY_THANKS.value,
    IncomeCategory.VISITATION_THANKS.value,
    IncomeCategory.THOUSANDFOLD_OFFERING.value,
    IncomeCategory.OTHER.value,
)

DEFAULT_EXPENSE_CATEGORIES: tuple[str, ...] = (
    "operations",
    "missions support",
    "relief",
)

# Display name for a person id that no longer resolves
UNSPECIFIED_PERSON_NAME = "unspecified"
# Sort name for an entry recorded without any person
ANONYMOUS_PERSON_NAME = "anonymous"


# =============================================================================
# STORED RECORDS
# =============================================================================

class Person(BaseModel):
    """
    A contributor on the roster.

    Only name and position are editable. Name collisions are allowed;
    the id is what entries refer to.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: int = Field(..., description="Unique person id")
    name: str = Field(..., min_length=1, max_length=100)
    position: Position = Field(default=Position.MEMBER)


class Entry(BaseModel):
    """
    One income or expense record.

    The amount is always the magnitude; its sign comes from `kind`.
    `person_id` is a weak reference: it may dangle after the person is
    removed, and that is not an error.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
        populate_by_name=True,
    )

    id: int = Field(..., description="Unique entry id, increasing in creation order")
    kind: EntryKind
    entry_date: date = Field(..., alias="date")
    category: str = Field(..., min_length=1, max_length=100)
    amount: int = Field(..., description="Currency units, strictly positive for valid entries")
    person_id: Optional[int] = Field(default=None, alias="personId")
    note: Optional[str] = Field(default=None, max_length=500)

    @property
    def effective_amount(self) -> int:
        """
        Amount this entry contributes to any sum.

        A non-positive amount contributes nothing, so one bad record
        cannot skew the totals of every other entry.
        """
        return self.amount if self.amount > 0 else 0

    @property
    def signed_amount(self) -> int:
        """Contribution of this entry to a balance."""
        if self.kind == EntryKind.INCOME:
            return self.effective_amount
        return -self.effective_amount

    @property
    def is_income(self) -> bool:
        return self.kind == EntryKind.INCOME


# =============================================================================
# DERIVED RESULTS
# =============================================================================

class RunningBalanceEntry(BaseModel):
    """An entry together with the cumulative balance up to and including it."""
    model_config = ConfigDict(frozen=True)

    entry: Entry
    balance: int
    person_name: Optional[str] = Field(
        default=None,
        description="Resolved display name for income entries",
    )


class TodaySplit(BaseModel):
    """Cumulative balance split at the start of `today`."""
    model_config = ConfigDict(frozen=True)

    previous_balance: int = 0
    todays_change: int = 0

    @property
    def todays_balance(self) -> int:
        return self.previous_balance + self.todays_change


class PeriodTotals(BaseModel):
    """Income and expense sums for the week-to-date and year-to-date windows."""
    model_config = ConfigDict(frozen=True)

    weekly_income: int = 0
    weekly_expense: int = 0
    yearly_income: int = 0
    yearly_expense: int = 0

    @property
    def weekly_balance(self) -> int:
        return self.weekly_income - self.weekly_expense

    @property
    def yearly_balance(self) -> int:
        return self.yearly_income - self.yearly_expense


class CategoryWindowBreakdown(BaseModel):
    """
    Week-to-date income per recurring category, plus the two special funds.

    `recurring` always holds every RecurringCategory, in declaration order,
    even when nothing was given to it this week.
    """
    model_config = ConfigDict(frozen=True)

    recurring: dict[RecurringCategory, int] = Field(default_factory=dict, validate_default=True)
    missions: int = 0
    building_fund: int = 0

    @field_validator('recurring')
    @classmethod
    def fill_recurring(cls, v: dict[RecurringCategory, int]) -> dict[RecurringCategory, int]:
        """Populate every recurring category so lookups never miss."""
        return {category: v.get(category, 0) for category in RecurringCategory}

    @property
    def recurring_total(self) -> int:
        return sum(self.recurring.values())

    def amount_for(self, category: str) -> int:
        """
        Weekly total for a breakdown line given by its category name.

        Covers the recurring categories and the two special funds; any
        other category has no line of its own and reports 0.
        """
        if category == IncomeCategory.MISSIONS.value:
            return self.missions
        if category == IncomeCategory.BUILDING_FUND.value:
            return self.building_fund
        try:
            return self.recurring[RecurringCategory(category)]
        except ValueError:
            return 0


class DateRange(BaseModel):
    """
    Inclusive date range used by searches.

    An inverted range (start after end) is allowed and simply matches
    nothing.
    """
    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @property
    def is_empty(self) -> bool:
        return self.start > self.end

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


class SearchResult(BaseModel):
    """Matching entries and the sum of their amounts."""
    model_config = ConfigDict(frozen=True)

    matches: list[Entry] = Field(default_factory=list)
    total: int = 0


class TodaysTotals(BaseModel):
    """Unsigned income and expense sums for entries dated exactly today."""
    model_config = ConfigDict(frozen=True)

    total_income: int = 0
    total_expense: int = 0


class LedgerDashboard(BaseModel):
    """Everything the main ledger view shows, computed in one pass."""
    model_config = ConfigDict(frozen=True)

    today: date
    feed: list[RunningBalanceEntry] = Field(default_factory=list)
    today_split: TodaySplit = Field(default_factory=TodaySplit)
    period_totals: PeriodTotals = Field(default_factory=PeriodTotals)
    breakdown: CategoryWindowBreakdown = Field(default_factory=CategoryWindowBreakdown)


# =============================================================================
# SNAPSHOT
# =============================================================================

class LedgerSnapshot(BaseModel):
    """
    The full contents of the entity store at one point in time.

    This is both what the engine reads and the document exported and
    imported for backups.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    people: list[Person] = Field(default_factory=list)
    entries: list[Entry] = Field(default_factory=list)
    expense_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXPENSE_CATEGORIES),
        alias="expenseCategories",
    )

    @field_validator('people')
    @classmethod
    def unique_person_ids(cls, v: list[Person]) -> list[Person]:
        ids = [person.id for person in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Person ids must be unique")
        return v

    @field_validator('entries')
    @classmethod
    def unique_entry_ids(cls, v: list[Entry]) -> list[Entry]:
        ids = [entry.id for entry in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Entry ids must be unique")
        return v

    def person_names(self) -> dict[int, str]:
        return {person.id: person.name for person in self.people}
