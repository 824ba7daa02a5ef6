"""
Window Aggregation

Week-to-date and year-to-date totals, plus the weekly per-category
breakdown of the operating fund.

Windows are inclusive on both ends:
    yearly: [January 1 of today's year, today]
    weekly: [the Sunday on or before today, today]

Entries dated after today are outside both windows.
"""

from datetime import date, timedelta
from typing import Iterable

from src.engine.ordering import entry_day
from src.models.ledger import (
    CategoryWindowBreakdown,
    Entry,
    IncomeCategory,
    PeriodTotals,
    RecurringCategory,
)


_RECURRING_BY_NAME: dict[str, RecurringCategory] = {
    category.value: category for category in RecurringCategory
}


def week_start(today: date) -> date:
    """The most recent Sunday on or before `today`."""
    # date.weekday() is Monday=0; shift so Sunday=0
    days_since_sunday = (today.weekday() + 1) % 7
    return today - timedelta(days=days_since_sunday)


def year_start(today: date) -> date:
    return date(today.year, 1, 1)


def compute_window_totals(
    entries: Iterable[Entry],
    today: date,
) -> tuple[PeriodTotals, CategoryWindowBreakdown]:
    """
    Reduce all entries into weekly/yearly totals and the weekly breakdown.

    Income in categories outside the recurring set and the two special
    funds still counts toward weekly income, it just has no line of its
    own in the breakdown.

    Returns:
        (period_totals, weekly_category_breakdown)
    """
    weekly_from = week_start(today)
    yearly_from = year_start(today)

    weekly_income = 0
    weekly_expense = 0
    yearly_income = 0
    yearly_expense = 0

    recurring = {category: 0 for category in RecurringCategory}
    missions = 0
    building_fund = 0

    for entry in entries:
        day = entry_day(entry)
        if day > today:
            continue

        amount = entry.effective_amount

        if day >= yearly_from:
            if entry.is_income:
                yearly_income += amount
            else:
                yearly_expense += amount

        if day >= weekly_from:
            if entry.is_income:
                weekly_income += amount
                if entry.category in _RECURRING_BY_NAME:
                    recurring[_RECURRING_BY_NAME[entry.category]] += amount
                elif entry.category == IncomeCategory.MISSIONS.value:
                    missions += amount
                elif entry.category == IncomeCategory.BUILDING_FUND.value:
                    building_fund += amount
            else:
                weekly_expense += amount

    totals = PeriodTotals(
        weekly_income=weekly_income,
        weekly_expense=weekly_expense,
        yearly_income=yearly_income,
        yearly_expense=yearly_expense,
    )
    breakdown = CategoryWindowBreakdown(
        recurring=recurring,
        missions=missions,
        building_fund=building_fund,
    )
    return totals, breakdown
