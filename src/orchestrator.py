"""
Main Orchestrator for the Offering Ledger

This module ties together all the components and defines the flows for:
1. Capture (form draft -> validate -> store)
2. Roster management (add freely; edit/remove behind the access gate)
3. Recomputation (store snapshot -> engine -> dashboard)
4. Lookup (structured query -> executor -> result)
5. Backup (export/import behind the access gate)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches the store without passing validation
- The engine only ever sees a snapshot, never the store
- Guarded flows pass the access gate before anything else happens
- Every recomputation starts from scratch
"""

from datetime import date
from typing import Callable, Optional

from src.config import get_settings
from src.engine import LedgerComputationError, compute_dashboard, resolve_person_name
from src.log import configure_logging, get_logger
from src.models.ledger import (
    Entry,
    EntryKind,
    LedgerDashboard,
    LedgerSnapshot,
    Person,
    Position,
)
from src.models.query import LedgerQuery, LedgerQueryResult
from src.models.validation import EntryDraft, ValidationResult
from src.queries import LedgerQueryExecutor
from src.services.access_gate import AccessGate, GuardedAction
from src.services.snapshot import SnapshotService
from src.services.storage import (
    EntityStoreInterface,
    InMemoryEntityStore,
    JsonFileEntityStore,
)
from src.validation import EntryValidator


logger = get_logger(__name__)


class EntryRejectedError(Exception):
    """Captured data failed validation and was not stored."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__("; ".join(result.error_messages) or "Validation failed")


class RosterEditor:
    """
    Edit and remove access to the roster.

    Only handed out by LedgerService.open_roster_editor, after the access
    gate has let the caller through.
    """

    def __init__(self, store: EntityStoreInterface, validator: EntryValidator):
        self._store = store
        self._validator = validator

    @property
    def people(self) -> list[Person]:
        return self._store.snapshot().people

    def update_person(self, person_id: int, name: str, position: str) -> Person:
        """
        Change a person's name and position.

        Raises:
            EntryRejectedError: If the new values are invalid
            NotFoundError: If the person is not on the roster
        """
        result = self._validator.validate_person(name, position)
        if not result.is_valid:
            raise EntryRejectedError(result)
        return self._store.update_person(
            Person(id=person_id, name=name, position=Position(position))
        )

    def remove_person(self, person_id: int) -> bool:
        """
        Take a person off the roster.

        Their past entries stay as they are and from now on resolve to
        the 'unspecified' name.
        """
        return self._store.remove_person(person_id)


class LedgerService:
    """
    Orchestrates every ledger flow over one entity store.

    `today` is injectable so tests can pin the date; in production it is
    the wall-clock date at the time of each call.
    """

    def __init__(
        self,
        store: EntityStoreInterface,
        gate: Optional[AccessGate] = None,
        validator: Optional[EntryValidator] = None,
        today: Optional[Callable[[], date]] = None,
        lookback_days: int = 365,
    ):
        self._store = store
        self._gate = gate or AccessGate()
        self._today = today or date.today
        self._validator = validator or EntryValidator(store, today=self._today)
        self._snapshots = SnapshotService(store, self._gate)
        self._query_executor = LedgerQueryExecutor(
            store,
            today=self._today,
            lookback_days=lookback_days,
        )

    @property
    def store(self) -> EntityStoreInterface:
        return self._store

    @property
    def gate(self) -> AccessGate:
        return self._gate

    # ------------------------------------------------------------------
    # Recomputation
    # ------------------------------------------------------------------

    def dashboard(self, today: Optional[date] = None) -> LedgerDashboard:
        """
        Recompute the main view from a fresh snapshot.

        Raises:
            LedgerComputationError: If the snapshot holds an unorderable entry
        """
        today = today or self._today()
        snapshot = self._store.snapshot()
        try:
            result = compute_dashboard(snapshot.entries, snapshot.people, today)
        except LedgerComputationError as e:
            logger.error("recompute_failed", today=today.isoformat(), error=str(e))
            raise

        logger.debug(
            "recomputed",
            today=today.isoformat(),
            entries=len(snapshot.entries),
            people=len(snapshot.people),
        )
        return result

    def person_name(self, person_id: Optional[int]) -> str:
        """Display name for a person reference."""
        return resolve_person_name(person_id, self._store.snapshot().person_names())

    # ------------------------------------------------------------------
    # Capture
    # ------------------------------------------------------------------

    def validate_entry(self, draft: EntryDraft) -> ValidationResult:
        return self._validator.validate(draft)

    def add_entry(self, draft: EntryDraft) -> Entry:
        """
        Validate a captured entry and store it.

        Raises:
            EntryRejectedError: If validation finds an error
        """
        result = self._validator.validate(draft)
        if not result.is_valid:
            logger.info(
                "entry_rejected",
                kind=draft.kind.value,
                errors=result.error_messages,
            )
            raise EntryRejectedError(result)

        entry = Entry(
            id=self._store.next_entry_id(),
            kind=draft.kind,
            entry_date=draft.entry_date,
            category=draft.category,
            amount=draft.amount,
            person_id=draft.person_id,
            note=draft.note or None,
        )
        return self._store.add_entry(entry)

    def delete_entry(self, entry_id: int) -> bool:
        return self._store.delete_entry(entry_id)

    def add_expense_category(self, category: str) -> list[str]:
        """
        Add a new expense category.

        Raises:
            ValueError: If the name is empty
            DuplicateError: If the exact name already exists
        """
        name = self._validator.normalize_expense_category(category)
        return self._store.add_expense_category(name)

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------

    def add_person(self, name: str, position: str = Position.MEMBER.value) -> Person:
        """
        Add a person to the roster. Not guarded.

        Raises:
            EntryRejectedError: If the name or position is invalid
        """
        result = self._validator.validate_person(name, position)
        if not result.is_valid:
            raise EntryRejectedError(result)
        return self._store.add_person(name.strip(), Position(position))

    def open_roster_editor(
        self,
        code: str,
        confirmation: Optional[str] = None,
    ) -> RosterEditor:
        """
        Pass the access gate and get edit/remove access to the roster.

        Raises:
            AccessGateError: If the code is refused
        """
        self._gate.authorize(GuardedAction.EDIT_ROSTER, code, confirmation)
        return RosterEditor(self._store, self._validator)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def search(self, query: LedgerQuery) -> LedgerQueryResult:
        """Run a structured lookup. Never raises; see result.success."""
        result = self._query_executor.execute(query)
        logger.info(
            "query_executed",
            query_id=str(query.query_id),
            query_type=query.query_type,
            result_count=result.result_count,
            success=result.success,
        )
        return result

    def search_by_person(
        self,
        person_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> LedgerQueryResult:
        return self.search(LedgerQuery(
            query_type="person",
            person_id=person_id,
            date_from=date_from,
            date_to=date_to,
        ))

    def search_by_category(
        self,
        kind: EntryKind,
        category: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> LedgerQueryResult:
        return self.search(LedgerQuery(
            query_type="category",
            kind=kind,
            category=category,
            date_from=date_from,
            date_to=date_to,
        ))

    def todays_totals(self) -> LedgerQueryResult:
        return self.search(LedgerQuery(query_type="today"))

    # ------------------------------------------------------------------
    # Backup
    # ------------------------------------------------------------------

    def export_json(self, code: str, confirmation: Optional[str] = None) -> str:
        return self._snapshots.export_json(code, confirmation)

    def import_json(
        self,
        text: str,
        code: str,
        confirmation: Optional[str] = None,
    ) -> LedgerSnapshot:
        return self._snapshots.import_json(text, code, confirmation)

    @property
    def snapshots(self) -> SnapshotService:
        return self._snapshots


def create_app_components(
    use_storage: bool = True,
) -> LedgerService:
    """
    Factory function to build the ledger service from settings.

    Args:
        use_storage: Whether to use the configured backing store.
                    Set to False for an in-memory ledger.

    Returns:
        A ready LedgerService
    """
    configure_logging()
    settings = get_settings()
    storage_settings = settings.storage

    if use_storage and storage_settings.backend == "json":
        store = JsonFileEntityStore(
            storage_settings.data_path,
            save_attempts=storage_settings.save_retry_attempts,
            default_expense_categories=storage_settings.expense_categories_list,
        )
        gate = AccessGate(credential_path=storage_settings.access_code_path)
    else:
        store = InMemoryEntityStore(
            default_expense_categories=storage_settings.expense_categories_list,
        )
        gate = AccessGate()

    logger.info(
        "ledger_started",
        backend=type(store).__name__,
        environment=settings.app.app_environment,
    )
    return LedgerService(
        store,
        gate=gate,
        lookback_days=settings.app.search_lookback_days,
    )
