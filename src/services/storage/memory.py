"""
In-Memory Entity Store

Holds the ledger in plain dicts. Used directly in tests and as the base for
the JSON file store, which only adds loading and persisting.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from src.engine.ordering import collation_key
from src.log import get_logger
from src.models.ledger import (
    DEFAULT_EXPENSE_CATEGORIES,
    Entry,
    LedgerSnapshot,
    Person,
    Position,
)
from src.services.storage.interface import (
    DuplicateError,
    EntityStoreInterface,
    NotFoundError,
)


logger = get_logger(__name__)


class InMemoryEntityStore(EntityStoreInterface):
    """
    Dict-backed entity store.

    The roster is kept sorted by name. Entries are kept in insertion
    order; the engine does its own ordering.
    """

    def __init__(
        self,
        snapshot: Optional[LedgerSnapshot] = None,
        default_expense_categories: Optional[list[str]] = None,
    ):
        self._people: dict[int, Person] = {}
        self._entries: dict[int, Entry] = {}
        self._expense_categories: list[str] = list(
            default_expense_categories or DEFAULT_EXPENSE_CATEGORIES
        )
        if snapshot is not None:
            self._load(snapshot)

    def _load(self, snapshot: LedgerSnapshot) -> None:
        self._people = {person.id: person for person in snapshot.people}
        self._entries = {entry.id: entry for entry in snapshot.entries}
        self._expense_categories = list(snapshot.expense_categories)

    def _changed(self) -> None:
        """Hook called after every mutation, before it is kept."""
        pass

    @contextmanager
    def _committing(self) -> Iterator[None]:
        """
        Apply a mutation, then run the change hook.

        If the hook fails the collections are restored to what they were
        before the mutation, so memory never runs ahead of the backing.
        """
        saved = (dict(self._people), dict(self._entries), list(self._expense_categories))
        try:
            yield
            self._changed()
        except Exception:
            self._people, self._entries, self._expense_categories = saved
            raise

    def _sorted_people(self) -> list[Person]:
        return sorted(
            self._people.values(),
            key=lambda person: (collation_key(person.name), person.id),
        )

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            people=self._sorted_people(),
            entries=list(self._entries.values()),
            expense_categories=list(self._expense_categories),
        )

    def replace(self, snapshot: LedgerSnapshot) -> None:
        with self._committing():
            self._load(snapshot)
        logger.info(
            "store_replaced",
            people=len(self._people),
            entries=len(self._entries),
            expense_categories=len(self._expense_categories),
        )

    # People

    def get_person(self, person_id: int) -> Optional[Person]:
        return self._people.get(person_id)

    def add_person(self, name: str, position: Position) -> Person:
        person = Person(
            id=self.allocate_id(self._people),
            name=name,
            position=position,
        )
        with self._committing():
            self._people[person.id] = person
        logger.info("person_added", person_id=person.id, position=person.position.value)
        return person

    def update_person(self, person: Person) -> Person:
        if person.id not in self._people:
            raise NotFoundError(f"Person not found: {person.id}")
        with self._committing():
            self._people[person.id] = person
        logger.info("person_updated", person_id=person.id)
        return person

    def remove_person(self, person_id: int) -> bool:
        if person_id not in self._people:
            return False
        with self._committing():
            del self._people[person_id]
        logger.info("person_removed", person_id=person_id)
        return True

    # Entries

    def get_entry(self, entry_id: int) -> Optional[Entry]:
        return self._entries.get(entry_id)

    def next_entry_id(self) -> int:
        return self.allocate_id(self._entries)

    def add_entry(self, entry: Entry) -> Entry:
        if entry.id in self._entries:
            raise DuplicateError(f"Entry already exists: {entry.id}")
        with self._committing():
            self._entries[entry.id] = entry
        logger.info(
            "entry_added",
            entry_id=entry.id,
            kind=entry.kind.value,
            category=entry.category,
            amount=entry.amount,
        )
        return entry

    def update_entry(self, entry: Entry) -> Entry:
        if entry.id not in self._entries:
            raise NotFoundError(f"Entry not found: {entry.id}")
        with self._committing():
            self._entries[entry.id] = entry
        logger.info("entry_updated", entry_id=entry.id)
        return entry

    def delete_entry(self, entry_id: int) -> bool:
        if entry_id not in self._entries:
            return False
        with self._committing():
            del self._entries[entry_id]
        logger.info("entry_deleted", entry_id=entry_id)
        return True

    # Expense vocabulary

    def add_expense_category(self, category: str) -> list[str]:
        if category in self._expense_categories:
            raise DuplicateError(f"Expense category already exists: {category}")
        with self._committing():
            self._expense_categories.append(category)
        logger.info("expense_category_added", category=category)
        return list(self._expense_categories)
