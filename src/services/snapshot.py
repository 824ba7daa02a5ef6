"""
Snapshot Export / Import

Backs up the whole ledger to a JSON document and restores it again.
Both directions pass through the access gate first.

IMPORTANT: An import is all or nothing. The document is fully parsed and
validated before the store is touched, so a bad file never leaves the
ledger half replaced.
"""

from datetime import date
from pathlib import Path
from typing import Optional

from src.log import get_logger
from src.models.ledger import LedgerSnapshot
from src.services.access_gate import AccessGate, GuardedAction
from src.services.storage import (
    EntityStoreInterface,
    SnapshotError,
    SnapshotFormatError,
    dump_snapshot,
    load_snapshot,
)


logger = get_logger(__name__)


def backup_file_name(today: date) -> str:
    """File name for a backup taken on `today`."""
    return f"ledger_backup_{today.isoformat()}.json"


class SnapshotService:
    """Gate-protected export and import of the full ledger."""

    def __init__(self, store: EntityStoreInterface, gate: AccessGate):
        self._store = store
        self._gate = gate

    def export_json(self, code: str, confirmation: Optional[str] = None) -> str:
        """
        Serialize the current ledger.

        Raises:
            AccessGateError: If the code is refused
        """
        self._gate.authorize(GuardedAction.EXPORT, code, confirmation)
        snapshot = self._store.snapshot()
        logger.info(
            "snapshot_exported",
            people=len(snapshot.people),
            entries=len(snapshot.entries),
        )
        return dump_snapshot(snapshot)

    def export_to_directory(
        self,
        directory: Path,
        today: date,
        code: str,
        confirmation: Optional[str] = None,
    ) -> Path:
        """Write a dated backup file into `directory` and return its path."""
        text = self.export_json(code, confirmation)
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / backup_file_name(today)
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise SnapshotError(f"Failed to write backup {path}: {e}") from e
        return path

    def import_json(
        self,
        text: str,
        code: str,
        confirmation: Optional[str] = None,
    ) -> LedgerSnapshot:
        """
        Replace the whole ledger with a backup.

        Raises:
            AccessGateError: If the code is refused
            SnapshotFormatError: If the document is invalid (store untouched)
        """
        self._gate.authorize(GuardedAction.IMPORT, code, confirmation)
        try:
            snapshot = load_snapshot(text)
        except SnapshotFormatError as e:
            logger.warning("snapshot_import_rejected", reason=str(e))
            raise

        self._store.replace(snapshot)
        logger.info(
            "snapshot_imported",
            people=len(snapshot.people),
            entries=len(snapshot.entries),
            expense_categories=len(snapshot.expense_categories),
        )
        return snapshot

    def import_file(
        self,
        path: Path,
        code: str,
        confirmation: Optional[str] = None,
    ) -> LedgerSnapshot:
        """Read a backup file and import it."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise SnapshotError(f"Failed to read backup {path}: {e}") from e
        return self.import_json(text, code, confirmation)
