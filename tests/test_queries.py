"""
Tests for the lookup filters and the query executor.
"""

from datetime import date
from uuid import uuid4

import pytest
from pydantic import ValidationError

from src.models.ledger import DateRange, EntryKind, LedgerSnapshot
from src.models.query import LedgerQuery
from src.queries import (
    LedgerQueryExecutor,
    default_search_range,
    search_by_category,
    search_by_person,
    todays_totals,
)
from src.services.storage import InMemoryEntityStore
from tests.conftest import SCENARIO_TODAY


JANUARY = DateRange(start=date(2024, 1, 1), end=date(2024, 1, 31))


class TestDefaultSearchRange:
    """Tests for default_search_range."""

    def test_one_year_back(self):
        date_range = default_search_range(date(2024, 3, 15))
        assert date_range.start == date(2023, 3, 15)
        assert date_range.end == date(2024, 3, 15)

    def test_leap_day_falls_back(self):
        """February 29 has no counterpart a year earlier."""
        date_range = default_search_range(date(2024, 2, 29))
        assert date_range.start == date(2023, 2, 28)

    def test_custom_lookback(self):
        date_range = default_search_range(date(2024, 1, 31), lookback_days=30)
        assert date_range.start == date(2024, 1, 1)


class TestSearchByPerson:
    """Tests for search_by_person."""

    def test_income_for_person(self, scenario_entries):
        """Both of Kim's tithes are found and summed."""
        result = search_by_person(scenario_entries, 1, JANUARY)
        assert [entry.id for entry in result.matches] == [1, 3]
        assert result.total == 1500

    def test_expense_never_matches(self, make_entry):
        """An expense tagged with a person is not that person's giving."""
        entries = [make_entry(1, EntryKind.EXPENSE, SCENARIO_TODAY, "relief", 50, person_id=1)]
        result = search_by_person(entries, 1, JANUARY)
        assert result.matches == []
        assert result.total == 0

    def test_range_is_inclusive(self, make_entry):
        """Entries on either end of the range are included."""
        entries = [
            make_entry(1, entry_date=date(2024, 1, 1), person_id=2, amount=10),
            make_entry(2, entry_date=date(2024, 1, 31), person_id=2, amount=20),
            make_entry(3, entry_date=date(2024, 2, 1), person_id=2, amount=40),
        ]
        result = search_by_person(entries, 2, JANUARY)
        assert result.total == 30

    def test_inverted_range_matches_nothing(self, scenario_entries):
        """A start after the end is an empty range, not an error."""
        inverted = DateRange(start=date(2024, 1, 31), end=date(2024, 1, 1))
        result = search_by_person(scenario_entries, 1, inverted)
        assert result.matches == []
        assert result.total == 0


class TestSearchByCategory:
    """Tests for search_by_category."""

    def test_exact_category_and_kind(self, scenario_entries):
        result = search_by_category(scenario_entries, EntryKind.EXPENSE, "utilities", JANUARY)
        assert [entry.id for entry in result.matches] == [2]
        assert result.total == 300

    def test_kind_must_match(self, make_entry):
        """An income 'missions' entry is not found by an expense search."""
        entries = [make_entry(1, category="missions", amount=5)]
        result = search_by_category(entries, EntryKind.EXPENSE, "missions", JANUARY)
        assert result.matches == []

    def test_total_skips_invalid_amounts(self, make_entry):
        entries = [
            make_entry(1, category="other", amount=0),
            make_entry(2, category="other", amount=12),
        ]
        result = search_by_category(entries, EntryKind.INCOME, "other", JANUARY)
        assert len(result.matches) == 2
        assert result.total == 12


class TestTodaysTotals:
    """Tests for todays_totals."""

    def test_scenario(self, scenario_entries):
        totals = todays_totals(scenario_entries, SCENARIO_TODAY)
        assert totals.total_income == 1000
        assert totals.total_expense == 300

    def test_other_days_ignored(self, scenario_entries):
        totals = todays_totals(scenario_entries, date(2024, 1, 8))
        assert totals.total_income == totals.total_expense == 0


class TestLedgerQuery:
    """Tests for LedgerQuery validation."""

    def test_person_query_needs_person(self):
        with pytest.raises(ValidationError):
            LedgerQuery(query_type="person")

    def test_category_query_needs_kind_and_category(self):
        with pytest.raises(ValidationError):
            LedgerQuery(query_type="category", category="tithe")

    def test_unknown_query_type_rejected(self):
        with pytest.raises(ValidationError):
            LedgerQuery(query_type="forecast")


class TestLedgerQueryExecutor:
    """Tests for LedgerQueryExecutor."""

    @pytest.fixture
    def executor(self, people, scenario_entries) -> LedgerQueryExecutor:
        store = InMemoryEntityStore(LedgerSnapshot(people=people, entries=scenario_entries))
        return LedgerQueryExecutor(store, today=lambda: SCENARIO_TODAY)

    def test_person_query_with_default_range(self, executor):
        """Without bounds the last year up to today is searched."""
        result = executor.execute(LedgerQuery(query_type="person", person_id=1))
        assert result.success
        assert result.result_count == 2
        assert result.total == 1500
        assert result.data_found
        assert result.query_description.startswith("Income from Kim")

    def test_category_query_description(self, executor):
        query = LedgerQuery(
            query_type="category",
            kind=EntryKind.EXPENSE,
            category="utilities",
            date_from=date(2024, 1, 1),
            date_to=date(2024, 1, 31),
        )
        result = executor.execute(query)
        assert result.total == 300
        assert result.query_description == "Expense in utilities | in January 2024"

    def test_no_data_found(self, executor):
        """A person with no giving yields an empty, successful result."""
        result = executor.execute(LedgerQuery(query_type="person", person_id=3))
        assert result.success
        assert not result.data_found
        assert result.total == 0

    def test_inverted_range_is_empty(self, executor):
        query = LedgerQuery(
            query_type="person",
            person_id=1,
            date_from=date(2024, 2, 1),
            date_to=date(2024, 1, 1),
        )
        result = executor.execute(query)
        assert result.success
        assert result.result_count == 0
        assert "empty range" in result.query_description

    def test_today_query(self, executor):
        """Today's totals come back with both sides and the net."""
        result = executor.execute(LedgerQuery(query_type="today"))
        assert result.total_income == 1000
        assert result.total_expense == 300
        assert result.total == 700
        assert result.result_count == 2

    def test_dangling_person_described_as_unspecified(self, executor):
        result = executor.execute(LedgerQuery(query_type="person", person_id=404))
        assert result.query_description.startswith("Income from unspecified")

    def test_store_failure_reported_not_raised(self):
        """A broken store yields success=False instead of an exception."""

        class BrokenStore:
            def snapshot(self):
                raise RuntimeError("disk on fire")

        executor = LedgerQueryExecutor(BrokenStore(), today=lambda: SCENARIO_TODAY)
        query_id = uuid4()
        result = executor.execute(LedgerQuery(query_id=query_id, query_type="today"))
        assert not result.success
        assert result.query_id == query_id
        assert "disk on fire" in result.error_message


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
