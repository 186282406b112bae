"""
Record store adapter tests, run against both backends.
"""

import pytest
from sqlalchemy.exc import OperationalError

from app.core.errors import NotFoundError, StoreError, VersionConflictError
from app.core.store import APPLICATIONS, JOBS, SqlRecordStore


class TestRecordStore:

    def test_put_and_get(self, any_store):
        stored = any_store.put(JOBS, "job-1", {"title": "Analyst", "recruiterId": "rec-1"})

        assert stored["id"] == "job-1"
        assert stored["version"] == 1
        assert any_store.get(JOBS, "job-1") == stored

    def test_get_missing(self, any_store):
        assert any_store.get(JOBS, "missing") is None

    def test_put_strips_empty_fields(self, any_store):
        stored = any_store.put(JOBS, "job-1", {"title": "Analyst", "salary": None})

        assert "salary" not in stored
        assert "salary" not in any_store.get(JOBS, "job-1")

    def test_put_overwrites_and_bumps_version(self, any_store):
        any_store.put(JOBS, "job-1", {"title": "Analyst", "salary": "40k"})
        stored = any_store.put(JOBS, "job-1", {"title": "Senior Analyst"})

        assert stored["version"] == 2
        assert stored["title"] == "Senior Analyst"
        assert "salary" not in stored

    def test_find_by_equality(self, any_store):
        any_store.put(APPLICATIONS, "a1", {"userId": "u1", "jobId": "j1"})
        any_store.put(APPLICATIONS, "a2", {"userId": "u1", "jobId": "j2"})
        any_store.put(APPLICATIONS, "a3", {"userId": "u2", "jobId": "j1"})
        any_store.put(JOBS, "j1", {"userId": "u1"})

        assert {r["id"] for r in any_store.find(APPLICATIONS, {"userId": "u1"})} == {"a1", "a2"}
        assert {r["id"] for r in any_store.find(APPLICATIONS, {"userId": "u1", "jobId": "j1"})} == {"a1"}
        assert len(any_store.find(APPLICATIONS)) == 3
        assert any_store.find(APPLICATIONS, {"userId": "nobody"}) == []

    def test_find_on_boolean(self, any_store):
        any_store.put(JOBS, "j1", {"archived": False})
        any_store.put(JOBS, "j2", {"archived": True})

        assert [r["id"] for r in any_store.find(JOBS, {"archived": False})] == ["j1"]

    def test_patch_merges(self, any_store):
        any_store.put(JOBS, "job-1", {"title": "Analyst", "location": "Paris"})

        patched = any_store.patch(JOBS, "job-1", {"location": "Nantes", "salary": None})

        assert patched == {"id": "job-1", "version": 2, "title": "Analyst", "location": "Nantes"}
        assert any_store.get(JOBS, "job-1") == patched

    def test_patch_missing(self, any_store):
        with pytest.raises(NotFoundError):
            any_store.patch(JOBS, "missing", {"title": "x"})

    def test_conditional_patch(self, any_store):
        any_store.put(JOBS, "job-1", {"title": "Analyst"})

        any_store.patch(JOBS, "job-1", {"title": "A"}, expected_version=1)
        with pytest.raises(VersionConflictError):
            any_store.patch(JOBS, "job-1", {"title": "B"}, expected_version=1)

        assert any_store.get(JOBS, "job-1")["title"] == "A"

    def test_delete(self, any_store):
        any_store.put(JOBS, "job-1", {"title": "Analyst"})

        assert any_store.delete(JOBS, "job-1") is True
        assert any_store.delete(JOBS, "job-1") is False
        assert any_store.get(JOBS, "job-1") is None

    def test_collections_are_separate(self, any_store):
        any_store.put(JOBS, "same-id", {"kind": "job"})
        any_store.put(APPLICATIONS, "same-id", {"kind": "application"})

        assert any_store.get(JOBS, "same-id")["kind"] == "job"
        assert any_store.get(APPLICATIONS, "same-id")["kind"] == "application"

    def test_returned_records_are_copies(self, any_store):
        any_store.put(JOBS, "job-1", {"requirements": ["Python"]})

        record = any_store.get(JOBS, "job-1")
        record["requirements"].append("Go")

        assert any_store.get(JOBS, "job-1")["requirements"] == ["Python"]

    def test_new_ids_are_unique(self, any_store):
        assert len({any_store.new_id() for _ in range(50)}) == 50


class TestSqlStoreErrors:

    def test_database_failure_becomes_store_error(self, db_session, monkeypatch):
        store = SqlRecordStore(db_session)

        def broken_query(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

        monkeypatch.setattr(db_session, "query", broken_query)

        with pytest.raises(StoreError) as exc_info:
            store.get(JOBS, "job-1")

        assert exc_info.value.retryable is True
        assert isinstance(exc_info.value.original_error, OperationalError)
