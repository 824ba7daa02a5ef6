"""
Snapshot JSON codec.

One document holds the whole ledger:

    {
      "people": [{"id": 1, "name": "...", "position": "deacon"}, ...],
      "entries": [{"id": 2, "kind": "income", "date": "2024-01-07",
                   "category": "tithe", "amount": 1000, "personId": 1}, ...],
      "expenseCategories": ["operations", ...]
    }

Backups written by the earlier browser version use different key names
(`members`, `transactions`, and per entry `type`, `memberId`, `memo`) and
Korean vocabulary. Those documents are recognised and translated on load.
"""

import json
from typing import Any

from pydantic import ValidationError

from src.log import get_logger
from src.models.ledger import (
    IncomeCategory,
    LedgerSnapshot,
    Position,
)
from src.services.storage.interface import StorageError

logger = get_logger(__name__)


class SnapshotError(StorageError):
    """Base exception for snapshot import/export."""
    pass


class SnapshotFormatError(SnapshotError):
    """The document is not a valid ledger snapshot."""
    pass


LEGACY_INCOME_CATEGORIES = {
    "십일조": IncomeCategory.TITHE.value,
    "감사헌금": IncomeCategory.THANKSGIVING.value,
    "건축헌금": IncomeCategory.BUILDING_FUND.value,
    "선교헌금": IncomeCategory.MISSIONS.value,
    "주정헌금": IncomeCategory.WEEKLY_OFFERING.value,
    "절기헌금": IncomeCategory.SEASONAL_OFFERING.value,
    "생일감사": IncomeCategory.BIRTHDAY_THANKS.value,
    "심방감사": IncomeCategory.VISITATION_THANKS.value,
    "일천번제": IncomeCategory.THOUSANDFOLD_OFFERING.value,
    "기타": IncomeCategory.OTHER.value,
}

LEGACY_POSITIONS = {
    "목사": Position.PASTOR.value,
    "사모": Position.PASTORS_WIFE.value,
    "부목사": Position.ASSOCIATE_PASTOR.value,
    "전도사": Position.EVANGELIST.value,
    "장로": Position.ELDER.value,
    "권사": Position.SENIOR_DEACONESS.value,
    "집사": Position.DEACON.value,
    "성도": Position.MEMBER.value,
    "청년": Position.YOUNG_ADULT.value,
    "중고등부": Position.YOUTH_GROUP.value,
    "주일학교": Position.SUNDAY_SCHOOL.value,
    "무명": Position.ANONYMOUS.value,
    "기타": Position.OTHER.value,
}

LEGACY_EXPENSE_CATEGORIES = {
    "운영비": "operations",
    "선교비": "missions support",
    "구제비": "relief",
}


def snapshot_to_dict(snapshot: LedgerSnapshot) -> dict[str, Any]:
    """Convert a snapshot to the JSON-ready document."""
    return {
        "people": [person.model_dump(mode="json") for person in snapshot.people],
        "entries": [
            entry.model_dump(mode="json", by_alias=True, exclude_none=True)
            for entry in snapshot.entries
        ],
        "expenseCategories": list(snapshot.expense_categories),
    }


def dump_snapshot(snapshot: LedgerSnapshot) -> str:
    """Serialize a snapshot as pretty-printed JSON."""
    return json.dumps(snapshot_to_dict(snapshot), indent=2, ensure_ascii=False)


def _is_legacy(document: dict[str, Any]) -> bool:
    return "members" in document or "transactions" in document


_POSITION_VALUES = {position.value for position in Position}


def _legacy_position(member: dict[str, Any]) -> str:
    """Translate a legacy position; anything outside the vocabulary becomes 'other'."""
    raw = member.get("position")
    position = LEGACY_POSITIONS.get(raw, raw)
    if position in _POSITION_VALUES:
        return position
    logger.warning(
        "legacy_position_unknown",
        person_id=member.get("id"),
        position=raw,
        mapped_to=Position.OTHER.value,
    )
    return Position.OTHER.value


def _translate_legacy(document: dict[str, Any]) -> dict[str, Any]:
    """Map a legacy backup onto the current document layout."""
    people = [
        {
            "id": member.get("id"),
            "name": member.get("name"),
            "position": _legacy_position(member),
        }
        for member in document["members"]
    ]

    entries = []
    for tx in document["transactions"]:
        kind = tx.get("type")
        category = tx.get("category")
        if kind == "income":
            category = LEGACY_INCOME_CATEGORIES.get(category, category)
        else:
            category = LEGACY_EXPENSE_CATEGORIES.get(category, category)
        entries.append({
            "id": tx.get("id"),
            "kind": kind,
            "date": tx.get("date"),
            "category": category,
            "amount": tx.get("amount"),
            "personId": tx.get("memberId"),
            "note": tx.get("memo") or None,
        })

    expense_categories = [
        LEGACY_EXPENSE_CATEGORIES.get(category, category)
        for category in document["expenseCategories"]
    ]
    return {
        "people": people,
        "entries": entries,
        "expenseCategories": expense_categories,
    }


def snapshot_from_dict(document: Any) -> LedgerSnapshot:
    """
    Validate a decoded document into a snapshot.

    Applies the same rules as freshly entered data: unique ids, parseable
    dates, strictly positive amounts.

    Raises:
        SnapshotFormatError: If anything is missing or invalid
    """
    if not isinstance(document, dict):
        raise SnapshotFormatError("Snapshot must be a JSON object")

    if _is_legacy(document):
        required = ("members", "transactions", "expenseCategories")
    else:
        required = ("people", "entries", "expenseCategories")
    missing = [key for key in required if key not in document]
    if missing:
        raise SnapshotFormatError(f"Snapshot is missing: {', '.join(missing)}")

    if _is_legacy(document):
        try:
            document = _translate_legacy(document)
        except (AttributeError, TypeError) as e:
            raise SnapshotFormatError(f"Malformed legacy snapshot: {e}") from e

    try:
        snapshot = LedgerSnapshot.model_validate(document)
    except ValidationError as e:
        raise SnapshotFormatError(f"Invalid snapshot: {e}") from e

    bad_amounts = [entry.id for entry in snapshot.entries if entry.amount <= 0]
    if bad_amounts:
        raise SnapshotFormatError(f"Entries with non-positive amounts: {bad_amounts}")

    return snapshot


def load_snapshot(text: str) -> LedgerSnapshot:
    """Parse a JSON snapshot document."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotFormatError(f"Snapshot is not valid JSON: {e}") from e
    return snapshot_from_dict(document)
