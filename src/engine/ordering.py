"""
Ordering & Running Balance

Produces the ledger's display feed: every entry, newest first, each carrying
the cumulative balance of all entries up to and including it in
chronological order.

The algorithm has two steps:

1. Sort ascending into chronological order and accumulate the balance.
   Ties on the same date are broken by:
     - income before expense,
     - for income, the *reverse* of the display priority of its category,
     - for income of the same category, person name in *descending*
       collation order,
     - entry id ascending (creation order).
2. Reverse the whole sequence for display. The balances stay as computed in
   step 1, so reading the feed backwards reproduces chronological order.

The reversed tie-breaks in step 1 are what make step 2 show same-day income
by category priority (tithe first) and then by name ascending.

Entry ids are unique, so the order is total and fully deterministic.
"""

from datetime import date
from functools import lru_cache
from typing import Iterable, Optional
import unicodedata

from pyuca import Collator

from src.engine.errors import MalformedDateError
from src.models.ledger import (
    ANONYMOUS_PERSON_NAME,
    INCOME_DISPLAY_PRIORITY,
    UNSPECIFIED_PERSON_NAME,
    Entry,
    EntryKind,
    Person,
    RunningBalanceEntry,
)


# Ascending rank of each income category. The display priority is reversed
# so that, after the final reversal, the highest priority is shown first.
# Categories not listed share the last slot.
_CATEGORY_SORT_RANK: dict[str, int] = {
    category: rank
    for rank, category in enumerate(reversed(INCOME_DISPLAY_PRIORITY))
}
_UNLISTED_CATEGORY_RANK = len(INCOME_DISPLAY_PRIORITY)

_KIND_RANK = {
    EntryKind.INCOME: 0,
    EntryKind.EXPENSE: 1,
}


# Korean collation puts Hangul, then Han, ahead of every other script.
# Names that open with a digit or symbol sort before all letters.
_LEADING_NON_LETTER = 0
_LEADING_HANGUL = 1
_LEADING_HAN = 2
_LEADING_OTHER_SCRIPT = 3

CollationKey = tuple[int, tuple[int, ...]]


@lru_cache(maxsize=1)
def _collator() -> Collator:
    return Collator()


_HANGUL_BLOCKS = (
    (0xAC00, 0xD7A3),  # syllables
    (0x1100, 0x11FF),  # conjoining jamo
    (0x3130, 0x318F),  # compatibility jamo
    (0xA960, 0xA97F),  # jamo extended-A
    (0xD7B0, 0xD7FF),  # jamo extended-B
)


def _is_hangul(ch: str) -> bool:
    code = ord(ch)
    return any(low <= code <= high for low, high in _HANGUL_BLOCKS)


def _leading_script(name: str) -> int:
    stripped = name.strip()
    if not stripped:
        return _LEADING_NON_LETTER
    first = stripped[0]
    if _is_hangul(first):
        return _LEADING_HANGUL
    if not first.isalpha():
        return _LEADING_NON_LETTER
    if unicodedata.name(first, "").startswith("CJK"):
        return _LEADING_HAN
    return _LEADING_OTHER_SCRIPT


def collation_key(name: str) -> CollationKey:
    """
    Key used to order person names in Korean dictionary order.

    Within a script group names compare by the Unicode Collation
    Algorithm: accents and case only break ties between otherwise equal
    letters, and decomposed text sorts like its precomposed form.
    """
    normalized = unicodedata.normalize("NFD", name)
    return _leading_script(name), tuple(_collator().sort_key(normalized))


def resolve_person_name(person_id: Optional[int], names: dict[int, str]) -> str:
    """Display name for a person reference; dangling or missing ids are 'unspecified'."""
    if person_id is None:
        return UNSPECIFIED_PERSON_NAME
    return names.get(person_id, UNSPECIFIED_PERSON_NAME)


def _sort_name(entry: Entry, names: dict[int, str]) -> str:
    if entry.person_id is None:
        return ANONYMOUS_PERSON_NAME
    return names.get(entry.person_id, UNSPECIFIED_PERSON_NAME)


def entry_day(entry: Entry) -> date:
    """
    The calendar date of an entry.

    Raises MalformedDateError if the value cannot be ordered against
    other dates. Validated entries always carry a `date`.
    """
    value = entry.entry_date
    if not isinstance(value, date):
        raise MalformedDateError(entry.id, value)
    return value


def chronological_order(
    entries: Iterable[Entry],
    people: Iterable[Person],
) -> list[Entry]:
    """
    Sort entries into the order the running balance is accumulated in.

    Built from stable sorts, least significant key first.
    """
    names = {person.id: person.name for person in people}
    ordered = sorted(entries, key=lambda entry: entry.id)

    # Same-day, same-category income: name descending. Expenses share one
    # key here so they keep their id order.
    ordered.sort(
        key=lambda entry: collation_key(_sort_name(entry, names)) if entry.is_income else (),
        reverse=True,
    )

    def major_key(entry: Entry) -> tuple[date, int, int]:
        if entry.is_income:
            category_rank = _CATEGORY_SORT_RANK.get(entry.category, _UNLISTED_CATEGORY_RANK)
        else:
            category_rank = 0
        return entry_day(entry), _KIND_RANK[entry.kind], category_rank

    ordered.sort(key=major_key)
    return ordered


def compute_display_feed(
    entries: Iterable[Entry],
    people: Iterable[Person],
) -> list[RunningBalanceEntry]:
    """
    Build the display feed, newest first, with running balances attached.

    Args:
        entries: All ledger entries, in any order
        people: The current roster, used to resolve names

    Returns:
        One RunningBalanceEntry per entry. Income entries carry the
        resolved person name; expenses do not.

    Raises:
        MalformedDateError: If an entry's date cannot be ordered
    """
    people = list(people)
    names = {person.id: person.name for person in people}

    running_balance = 0
    chronological = []
    for entry in chronological_order(entries, people):
        running_balance += entry.signed_amount
        chronological.append(
            RunningBalanceEntry(
                entry=entry,
                balance=running_balance,
                person_name=resolve_person_name(entry.person_id, names) if entry.is_income else None,
            )
        )

    chronological.reverse()
    return chronological
