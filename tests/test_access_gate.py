"""
Tests for the access gate and gate-protected snapshot export/import.
"""

from datetime import date
import json

import pytest

from src.models.ledger import LedgerSnapshot, Position
from src.services.access_gate import (
    AccessDeniedError,
    AccessGate,
    GuardedAction,
    InvalidAccessCodeError,
)
from src.services.snapshot import SnapshotService, backup_file_name
from src.services.storage import (
    InMemoryEntityStore,
    JsonFileEntityStore,
    SnapshotFormatError,
    StorageError,
)


class TestAccessGate:
    """Tests for AccessGate."""

    def test_starts_unconfigured(self):
        assert not AccessGate().is_configured

    @pytest.mark.parametrize("code", ["123", "12345", "abcd", "12 4", ""])
    def test_code_must_be_four_digits(self, code):
        with pytest.raises(InvalidAccessCodeError):
            AccessGate().create_code(code, code)

    def test_confirmation_must_match(self):
        with pytest.raises(InvalidAccessCodeError, match="do not match"):
            AccessGate().create_code("1234", "4321")

    def test_code_not_stored_in_clear(self, gate):
        assert "1234" not in gate.credential.digest
        assert len(bytes.fromhex(gate.credential.salt)) == 16

    def test_verify(self, gate):
        gate.verify("1234")
        with pytest.raises(AccessDeniedError):
            gate.verify("9999")

    def test_verify_without_code(self):
        with pytest.raises(AccessDeniedError, match="No access code"):
            AccessGate().verify("1234")

    def test_first_authorize_creates_code(self):
        """The first guarded action sets the code from code + confirmation."""
        gate = AccessGate()
        gate.authorize(GuardedAction.EXPORT, "2468", "2468")
        assert gate.is_configured
        gate.authorize(GuardedAction.IMPORT, "2468")
        with pytest.raises(AccessDeniedError):
            gate.authorize(GuardedAction.IMPORT, "1357")

    def test_first_authorize_needs_confirmation(self):
        gate = AccessGate()
        with pytest.raises(InvalidAccessCodeError):
            gate.authorize(GuardedAction.EDIT_ROSTER, "2468")
        assert not gate.is_configured

    def test_credential_file_round_trip(self, tmp_path):
        """A code created once is enforced by a later gate on the same file."""
        path = tmp_path / "access.json"
        AccessGate(credential_path=path).create_code("1234", "1234")
        assert "1234" not in path.read_text(encoding="utf-8")

        later = AccessGate(credential_path=path)
        assert later.is_configured
        later.verify("1234")
        with pytest.raises(AccessDeniedError):
            later.verify("0000")


class TestSnapshotService:
    """Tests for SnapshotService."""

    @pytest.fixture
    def service(self, store, gate, make_entry) -> SnapshotService:
        store.add_entry(make_entry(1, person_id=1, amount=1000))
        return SnapshotService(store, gate)

    def test_backup_file_name(self):
        assert backup_file_name(date(2024, 1, 7)) == "ledger_backup_2024-01-07.json"

    def test_export_requires_code(self, service):
        with pytest.raises(AccessDeniedError):
            service.export_json("0000")

    def test_export_json(self, service):
        document = json.loads(service.export_json("1234"))
        assert [person["name"] for person in document["people"]] == ["Kim", "Lee", "Park"]
        assert document["entries"][0]["amount"] == 1000

    def test_export_to_directory(self, service, tmp_path):
        path = service.export_to_directory(tmp_path / "backups", date(2024, 1, 7), "1234")
        assert path.name == "ledger_backup_2024-01-07.json"
        assert json.loads(path.read_text(encoding="utf-8"))["expenseCategories"]

    def test_export_then_import_into_new_store(self, service, store, gate):
        """A backup restores into an empty ledger unchanged."""
        text = service.export_json("1234")
        target = InMemoryEntityStore()
        SnapshotService(target, gate).import_json(text, "1234")
        assert target.snapshot() == store.snapshot()

    def test_import_requires_code(self, service, store):
        before = store.snapshot()
        with pytest.raises(AccessDeniedError):
            service.import_json(json.dumps({"people": [], "entries": [], "expenseCategories": []}), "9999")
        assert store.snapshot() == before

    def test_bad_document_leaves_store_untouched(self, service, store):
        """Validation happens before anything is replaced."""
        before = store.snapshot()
        bad = json.dumps({
            "people": [],
            "entries": [{"id": 1, "kind": "income", "date": "not a date",
                         "category": "tithe", "amount": 5}],
            "expenseCategories": [],
        })
        with pytest.raises(SnapshotFormatError):
            service.import_json(bad, "1234")
        assert store.snapshot() == before

    def test_unwritable_import_leaves_ledger_untouched(self, gate, tmp_path, monkeypatch):
        """An import the backing cannot save does not replace the ledger."""
        store = JsonFileEntityStore(tmp_path / "ledger.json", save_attempts=1)
        store.add_person("Kim", Position.DEACON)
        before = store.snapshot()

        def disk_full(text):
            raise OSError("No space left on device")

        monkeypatch.setattr(store, "_write", disk_full)
        with pytest.raises(StorageError):
            SnapshotService(store, gate).import_json(LedgerSnapshot().model_dump_json(by_alias=True), "1234")
        assert store.snapshot() == before

    def test_import_legacy_file(self, service, store, tmp_path):
        path = tmp_path / "old_backup.json"
        path.write_text(json.dumps({
            "members": [{"id": 7, "name": "박영희", "position": "권사"}],
            "transactions": [
                {"id": 70, "type": "income", "date": "2023-12-31",
                 "category": "감사헌금", "amount": 300, "memberId": 7},
            ],
            "expenseCategories": ["운영비"],
        }, ensure_ascii=False), encoding="utf-8")

        service.import_file(path, "1234")
        snapshot = store.snapshot()
        assert snapshot.people[0].position == Position.SENIOR_DEACONESS
        assert snapshot.entries[0].category == "thanksgiving"
        assert snapshot.expense_categories == ["operations"]

    def test_import_replaces_everything(self, service, store):
        service.import_json(LedgerSnapshot().model_dump_json(by_alias=True), "1234")
        assert store.snapshot().people == []
        assert store.snapshot().entries == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
