"""
Abstract Entity Store Interface

DESIGN DECISION: The ledger's people, entries and expense vocabulary live
behind an abstract store. This allows us to:
1. Use in-memory storage for tests
2. Persist to a JSON file in production
3. Swap in a database later without touching the engine

The aggregation engine never talks to a store. Callers take a snapshot()
and hand its lists to the engine.
"""

from abc import ABC, abstractmethod
import time
from typing import Iterable, Optional

from src.models.ledger import (
    Entry,
    LedgerSnapshot,
    Person,
    Position,
)


class EntityStoreInterface(ABC):
    """
    Abstract interface for the ledger's entity store.

    Any backing (memory, JSON file, database) must implement these methods.
    Ids are allocated by the store and are unique and increasing.
    """

    @abstractmethod
    def snapshot(self) -> LedgerSnapshot:
        """
        Read the whole store.

        Returns:
            An immutable snapshot of people, entries and expense categories
        """
        pass

    @abstractmethod
    def replace(self, snapshot: LedgerSnapshot) -> None:
        """
        Replace every collection at once (used by import).

        Args:
            snapshot: The new contents

        Raises:
            StorageError: If the new contents cannot be stored
        """
        pass

    # ------------------------------------------------------------------
    # People
    # ------------------------------------------------------------------

    @abstractmethod
    def get_person(self, person_id: int) -> Optional[Person]:
        """
        Retrieve a person by id.

        Returns:
            The person if on the roster, None otherwise
        """
        pass

    @abstractmethod
    def add_person(self, name: str, position: Position) -> Person:
        """
        Add a person to the roster.

        Returns:
            The stored person with its allocated id
        """
        pass

    @abstractmethod
    def update_person(self, person: Person) -> Person:
        """
        Change a person's name and position.

        Raises:
            NotFoundError: If the person is not on the roster
        """
        pass

    @abstractmethod
    def remove_person(self, person_id: int) -> bool:
        """
        Remove a person from the roster.

        Entries referring to them are left untouched.

        Returns:
            True if a person was removed
        """
        pass

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    @abstractmethod
    def get_entry(self, entry_id: int) -> Optional[Entry]:
        pass

    @abstractmethod
    def next_entry_id(self) -> int:
        """Allocate an id for an entry about to be added."""
        pass

    @abstractmethod
    def add_entry(self, entry: Entry) -> Entry:
        """
        Append an entry.

        Raises:
            DuplicateError: If an entry with the same id exists
        """
        pass

    @abstractmethod
    def update_entry(self, entry: Entry) -> Entry:
        """
        Replace a stored entry with the same id.

        Raises:
            NotFoundError: If no entry has that id
        """
        pass

    @abstractmethod
    def delete_entry(self, entry_id: int) -> bool:
        """
        Delete an entry by id.

        Returns:
            True if an entry was deleted
        """
        pass

    # ------------------------------------------------------------------
    # Expense vocabulary
    # ------------------------------------------------------------------

    @abstractmethod
    def add_expense_category(self, category: str) -> list[str]:
        """
        Append a new expense category.

        Returns:
            The updated vocabulary

        Raises:
            DuplicateError: If the exact name already exists
        """
        pass

    # ------------------------------------------------------------------
    # Id allocation
    # ------------------------------------------------------------------

    def _now_ms(self) -> int:
        return int(time.time() * 1000)

    def allocate_id(self, existing_ids: Iterable[int]) -> int:
        """
        Next id for a new record.

        Wall-clock milliseconds, bumped past the largest existing id so ids
        stay unique and increase in creation order even within the same
        millisecond.
        """
        highest = max(existing_ids, default=0)
        return max(highest + 1, self._now_ms())


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
