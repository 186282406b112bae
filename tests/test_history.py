"""
History ledger tests.
"""

from app.crud import history as history_crud
from app.models.application import ApplicationStatus


class TestHistoryLedger:

    def test_record_entry(self, any_store):
        entry = history_crud.record(any_store, "app-1", ApplicationStatus.SENT, ApplicationStatus.INTERVIEW, "rec-1", notes="Call on Monday")

        assert entry["applicationId"] == "app-1"
        assert entry["oldStatus"] == "SENT"
        assert entry["newStatus"] == "INTERVIEW"
        assert entry["changedBy"] == "rec-1"
        assert entry["notes"] == "Call on Monday"
        assert entry["changedAt"]
        assert entry["id"]

    def test_first_entry_has_no_old_status(self, any_store):
        entry = history_crud.record(any_store, "app-1", None, ApplicationStatus.TO_APPLY, "cand-1")

        assert "oldStatus" not in entry
        assert "notes" not in entry

    def test_newest_first_and_scoped(self, any_store):
        history_crud.record(any_store, "app-1", None, ApplicationStatus.TO_APPLY, "cand-1")
        history_crud.record(any_store, "app-1", ApplicationStatus.TO_APPLY, ApplicationStatus.SENT, "cand-1")
        history_crud.record(any_store, "app-2", None, ApplicationStatus.SENT, "cand-2")
        history_crud.record(any_store, "app-1", ApplicationStatus.SENT, ApplicationStatus.INTERVIEW, "rec-1")

        entries = history_crud.list_for_application(any_store, "app-1")

        assert [e["newStatus"] for e in entries] == ["INTERVIEW", "SENT", "TO_APPLY"]
        changed_at = [e["changedAt"] for e in entries]
        assert changed_at == sorted(changed_at, reverse=True)

    def test_same_timestamp_keeps_recording_order(self, any_store, monkeypatch):
        monkeypatch.setattr(history_crud, "now_iso", lambda: "2026-03-01T10:00:00+00:00")

        history_crud.record(any_store, "app-1", None, ApplicationStatus.TO_APPLY, "cand-1")
        history_crud.record(any_store, "app-1", ApplicationStatus.TO_APPLY, ApplicationStatus.INTERVIEW, "rec-1")
        history_crud.record(any_store, "app-1", ApplicationStatus.INTERVIEW, ApplicationStatus.ACCEPTED, "rec-1")

        entries = history_crud.list_for_application(any_store, "app-1")

        assert [(e.get("oldStatus"), e["newStatus"]) for e in entries] == [
            ("INTERVIEW", "ACCEPTED"),
            ("TO_APPLY", "INTERVIEW"),
            (None, "TO_APPLY"),
        ]
        assert [e["sequence"] for e in entries] == [3, 2, 1]

    def test_unknown_application(self, any_store):
        assert history_crud.list_for_application(any_store, "nothing") == []

    def test_no_mutation_api(self):
        public = {name for name in dir(history_crud) if not name.startswith("_")}

        assert not public & {"update", "delete", "patch"}
