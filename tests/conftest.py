"""
Shared fixtures for the offering ledger tests.

No real files or clocks are used unless a test asks for tmp_path;
`today` is always pinned.
"""

from datetime import date
from typing import Optional

import pytest

from src.models.ledger import (
    Entry,
    EntryKind,
    LedgerSnapshot,
    Person,
    Position,
)
from src.services.access_gate import AccessGate
from src.services.storage import InMemoryEntityStore


# Sunday
SCENARIO_TODAY = date(2024, 1, 7)


@pytest.fixture
def make_entry():
    """Factory for entries with sensible defaults."""
    def _make(
        entry_id: int,
        kind: EntryKind = EntryKind.INCOME,
        entry_date: date = SCENARIO_TODAY,
        category: str = "tithe",
        amount: int = 100,
        person_id: Optional[int] = None,
        note: Optional[str] = None,
    ) -> Entry:
        return Entry(
            id=entry_id,
            kind=kind,
            entry_date=entry_date,
            category=category,
            amount=amount,
            person_id=person_id,
            note=note,
        )
    return _make


@pytest.fixture
def people() -> list[Person]:
    return [
        Person(id=1, name="Kim", position=Position.DEACON),
        Person(id=2, name="Lee", position=Position.ELDER),
        Person(id=3, name="Park", position=Position.MEMBER),
    ]


@pytest.fixture
def scenario_entries(make_entry) -> list[Entry]:
    """
    Two tithes from Kim on consecutive days and a utilities bill.

    Jan 6 income 500, Jan 7 income 1000, Jan 7 expense 300.
    """
    return [
        make_entry(1, EntryKind.INCOME, date(2024, 1, 7), "tithe", 1000, person_id=1),
        make_entry(2, EntryKind.EXPENSE, date(2024, 1, 7), "utilities", 300),
        make_entry(3, EntryKind.INCOME, date(2024, 1, 6), "tithe", 500, person_id=1),
    ]


@pytest.fixture
def store(people) -> InMemoryEntityStore:
    return InMemoryEntityStore(LedgerSnapshot(people=people))


@pytest.fixture
def gate() -> AccessGate:
    gate = AccessGate()
    gate.create_code("1234", "1234")
    return gate
