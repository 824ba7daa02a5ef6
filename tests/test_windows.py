"""
Tests for weekly/yearly window aggregation and the category breakdown.
"""

from datetime import date

import pytest

from src.engine import compute_window_totals, week_start, year_start
from src.models.ledger import EntryKind, RecurringCategory
from tests.conftest import SCENARIO_TODAY


class TestWindowBounds:
    """Tests for week_start / year_start."""

    @pytest.mark.parametrize("today, expected", [
        (date(2024, 1, 7), date(2024, 1, 7)),    # Sunday itself
        (date(2024, 1, 8), date(2024, 1, 7)),    # Monday
        (date(2024, 1, 13), date(2024, 1, 7)),   # Saturday
        (date(2024, 1, 3), date(2023, 12, 31)),  # week crossing the year
    ])
    def test_week_start_is_sunday(self, today, expected):
        """The week starts on the Sunday on or before today."""
        assert week_start(today) == expected
        assert week_start(today).isoweekday() == 7

    def test_year_start(self):
        assert year_start(date(2024, 8, 15)) == date(2024, 1, 1)


class TestPeriodTotals:
    """Tests for weekly and yearly totals."""

    def test_example_scenario(self, scenario_entries):
        """Jan 7 is a Sunday, so only Jan 7 is in the week; the year holds both days."""
        totals, _ = compute_window_totals(scenario_entries, SCENARIO_TODAY)
        assert totals.weekly_income == 1000
        assert totals.weekly_expense == 300
        assert totals.weekly_balance == 700
        assert totals.yearly_income == 1500
        assert totals.yearly_expense == 300
        assert totals.yearly_balance == 1200

    def test_whole_week_counts_later_in_the_week(self, scenario_entries):
        """By Saturday Jan 13 the week covers Jan 7 onward, Jan 6 still excluded."""
        totals, breakdown = compute_window_totals(scenario_entries, date(2024, 1, 13))
        assert totals.weekly_income == 1000
        assert breakdown.recurring[RecurringCategory.TITHE] == 1000

    def test_empty_input_all_zero(self):
        """Nothing in, zeros out."""
        totals, breakdown = compute_window_totals([], SCENARIO_TODAY)
        assert totals.weekly_income == totals.weekly_expense == 0
        assert totals.yearly_income == totals.yearly_expense == 0
        assert totals.weekly_balance == totals.yearly_balance == 0
        assert breakdown.missions == breakdown.building_fund == 0

    def test_sunday_boundary(self, make_entry):
        """An entry on the week's Sunday is in; the Saturday before is out."""
        today = date(2024, 3, 13)  # Wednesday, week starts Sunday Mar 10
        entries = [
            make_entry(1, entry_date=date(2024, 3, 10), amount=10),
            make_entry(2, entry_date=date(2024, 3, 9), amount=1000),
        ]
        totals, _ = compute_window_totals(entries, today)
        assert totals.weekly_income == 10
        assert totals.yearly_income == 1010

    def test_new_year_boundary(self, make_entry):
        """January 1 is in the year; December 31 is not."""
        today = date(2025, 1, 1)
        entries = [
            make_entry(1, entry_date=date(2025, 1, 1), amount=10),
            make_entry(2, entry_date=date(2024, 12, 31), amount=1000),
        ]
        totals, _ = compute_window_totals(entries, today)
        assert totals.yearly_income == 10
        # Dec 31 2024 is a Tuesday; the week began Sunday Dec 29
        assert totals.weekly_income == 1010

    def test_future_entries_excluded(self, make_entry):
        """Entries after today are in neither window."""
        entries = [
            make_entry(1, entry_date=SCENARIO_TODAY, amount=10),
            make_entry(2, entry_date=date(2024, 1, 8), amount=1000),
            make_entry(3, EntryKind.EXPENSE, date(2024, 12, 31), "operations", 500),
        ]
        totals, _ = compute_window_totals(entries, SCENARIO_TODAY)
        assert totals.weekly_income == totals.yearly_income == 10
        assert totals.weekly_expense == totals.yearly_expense == 0

    def test_invalid_amount_contributes_nothing(self, make_entry):
        """A zero amount is skipped without affecting others."""
        entries = [
            make_entry(1, entry_date=SCENARIO_TODAY, amount=0),
            make_entry(2, entry_date=SCENARIO_TODAY, amount=40),
        ]
        totals, breakdown = compute_window_totals(entries, SCENARIO_TODAY)
        assert totals.weekly_income == 40
        assert breakdown.recurring[RecurringCategory.TITHE] == 40


class TestCategoryBreakdown:
    """Tests for the weekly recurring-category breakdown."""

    def test_all_keys_present_when_empty(self):
        """Every recurring category is present, at zero."""
        _, breakdown = compute_window_totals([], SCENARIO_TODAY)
        assert set(breakdown.recurring) == set(RecurringCategory)
        assert len(breakdown.recurring) == 6
        assert all(amount == 0 for amount in breakdown.recurring.values())

    def test_keys_in_declaration_order(self):
        """The breakdown is reported in a fixed order."""
        _, breakdown = compute_window_totals([], SCENARIO_TODAY)
        assert list(breakdown.recurring) == list(RecurringCategory)

    def test_example_scenario_tithe(self, scenario_entries):
        """Only Jan 7's tithe falls in the week."""
        _, breakdown = compute_window_totals(scenario_entries, SCENARIO_TODAY)
        assert breakdown.amount_for("tithe") == 1000
        assert breakdown.recurring_total == 1000

    def test_special_funds_tracked_separately(self, make_entry):
        """Missions and building fund have their own totals outside the recurring set."""
        entries = [
            make_entry(1, category="missions", amount=70),
            make_entry(2, category="building fund", amount=30),
            make_entry(3, category="missions", amount=5),
            make_entry(4, category="weekly offering", amount=200),
        ]
        totals, breakdown = compute_window_totals(entries, SCENARIO_TODAY)
        assert breakdown.missions == 75
        assert breakdown.building_fund == 30
        assert breakdown.recurring[RecurringCategory.WEEKLY_OFFERING] == 200
        assert breakdown.recurring_total == 200
        assert totals.weekly_income == 305

    def test_other_categories_only_in_weekly_income(self, make_entry):
        """Seasonal offering and 'other' count toward income but have no line."""
        entries = [
            make_entry(1, category="seasonal offering", amount=11),
            make_entry(2, category="other", amount=22),
        ]
        totals, breakdown = compute_window_totals(entries, SCENARIO_TODAY)
        assert totals.weekly_income == 33
        assert breakdown.recurring_total == 0
        assert breakdown.missions == breakdown.building_fund == 0

    def test_expenses_never_in_breakdown(self, make_entry):
        """An expense that happens to share a category name is not income."""
        entries = [
            make_entry(1, EntryKind.EXPENSE, SCENARIO_TODAY, "tithe", 80),
            make_entry(2, EntryKind.EXPENSE, SCENARIO_TODAY, "missions", 80),
        ]
        totals, breakdown = compute_window_totals(entries, SCENARIO_TODAY)
        assert totals.weekly_expense == 160
        assert breakdown.recurring[RecurringCategory.TITHE] == 0
        assert breakdown.missions == 0

    def test_last_weeks_income_excluded(self, make_entry):
        """Only the current week is broken down."""
        entries = [
            make_entry(1, entry_date=date(2024, 1, 6), category="thanksgiving", amount=50),
            make_entry(2, entry_date=SCENARIO_TODAY, category="thanksgiving", amount=5),
        ]
        _, breakdown = compute_window_totals(entries, SCENARIO_TODAY)
        assert breakdown.recurring[RecurringCategory.THANKSGIVING] == 5


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
