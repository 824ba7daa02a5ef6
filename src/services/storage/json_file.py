"""
JSON File Entity Store

DESIGN DECISION: A single JSON document on disk is the production backing.
1. The data volume is one congregation's history, so the whole ledger fits
   comfortably in memory
2. The file is the same document the export produces, so a backup can be
   dropped in place
3. No database setup required

TRADEOFFS:
- Every mutation rewrites the whole file (fine at this scale)
- Single writer only; there is no locking between processes

Writes go to a temporary file first and are then renamed over the target,
so a crash mid-write never leaves a truncated ledger behind.
"""

import os
from pathlib import Path
from typing import Optional

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from src.log import get_logger
from src.models.ledger import LedgerSnapshot
from src.services.storage.codec import dump_snapshot, load_snapshot
from src.services.storage.interface import StorageError
from src.services.storage.memory import InMemoryEntityStore


logger = get_logger(__name__)


class JsonFileEntityStore(InMemoryEntityStore):
    """
    Entity store persisted to a JSON file after every change.

    A missing file is treated as an empty ledger and is created on the
    first write.
    """

    def __init__(
        self,
        path: Path | str,
        save_attempts: int = 3,
        default_expense_categories: Optional[list[str]] = None,
    ):
        self._path = Path(path)
        self._save_attempts = save_attempts
        super().__init__(self._read(), default_expense_categories)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Optional[LedgerSnapshot]:
        if not self._path.exists():
            logger.info("ledger_file_missing", path=str(self._path))
            return None
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read ledger file {self._path}: {e}") from e
        snapshot = load_snapshot(text)
        logger.info(
            "ledger_file_loaded",
            path=str(self._path),
            people=len(snapshot.people),
            entries=len(snapshot.entries),
        )
        return snapshot

    def _write(self, text: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(text, encoding="utf-8")
        os.replace(tmp_path, self._path)

    def _changed(self) -> None:
        """Persist the current contents."""
        text = dump_snapshot(self.snapshot())
        write = retry(
            stop=stop_after_attempt(self._save_attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )(self._write)
        try:
            write(text)
        except OSError as e:
            logger.error("ledger_file_write_failed", path=str(self._path), error=str(e))
            raise StorageError(f"Failed to write ledger file {self._path}: {e}") from e
