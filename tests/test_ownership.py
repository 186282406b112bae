"""
Actor relationship resolution and the job ownership guard.
"""

import pytest

from app.core.errors import NotFoundError, PermissionDeniedError
from app.crud import application as application_crud
from app.services import lifecycle, ownership
from app.services.lifecycle import Relationship
from conftest import ADMIN, CANDIDATE, OTHER_CANDIDATE, OTHER_RECRUITER, RECRUITER


def application_record(**fields):
    return {"id": "app-1", "userId": CANDIDATE.id, "status": "SENT", **fields}


class TestResolveActorRelationship:

    def test_owner(self, store):
        rel = lifecycle.resolve_actor_relationship(store, application_record(), CANDIDATE)

        assert rel.kind == Relationship.OWNER
        assert rel.needs_patch is False

    def test_direct_recruiter(self, store):
        rel = lifecycle.resolve_actor_relationship(store, application_record(recruiterId=RECRUITER.id), RECRUITER)

        assert rel.kind == Relationship.RECRUITER_DIRECT
        assert rel.needs_patch is False

    def test_admin(self, store):
        rel = lifecycle.resolve_actor_relationship(store, application_record(), ADMIN)

        assert rel.kind == Relationship.ADMIN

    def test_recruiter_via_job(self, store, job):
        rel = lifecycle.resolve_actor_relationship(store, application_record(jobId=job.id), RECRUITER)

        assert rel.kind == Relationship.RECRUITER_VIA_JOB
        assert rel.needs_patch is True

    def test_direct_match_skips_job_lookup(self, store, monkeypatch):
        def fail(*args, **kwargs):
            raise AssertionError("job lookup not expected")

        monkeypatch.setattr(ownership, "resolve_recruiter_via_job", fail)

        rel = lifecycle.resolve_actor_relationship(store, application_record(recruiterId=RECRUITER.id, jobId="j"), RECRUITER)

        assert rel.kind == Relationship.RECRUITER_DIRECT

    @pytest.mark.parametrize("fields", [
        {},
        {"jobId": "missing-job"},
    ])
    def test_none(self, store, fields):
        for actor in (RECRUITER, OTHER_CANDIDATE):
            rel = lifecycle.resolve_actor_relationship(store, application_record(**fields), actor)
            assert rel.kind == Relationship.NONE

    def test_other_recruiters_job(self, store, job):
        rel = lifecycle.resolve_actor_relationship(store, application_record(jobId=job.id), OTHER_RECRUITER)

        assert rel.kind == Relationship.NONE


class TestJobOwnershipGuard:

    def test_resolve_requires_job_id(self, store):
        assert ownership.resolve_recruiter_via_job(store, None, RECRUITER.id) is False
        assert ownership.resolve_recruiter_via_job(store, "", RECRUITER.id) is False

    def test_resolve_owner(self, store, job):
        assert ownership.resolve_recruiter_via_job(store, job.id, RECRUITER.id) is True
        assert ownership.resolve_recruiter_via_job(store, job.id, OTHER_RECRUITER.id) is False

    def test_can_mutate(self, job):
        record = job.model_dump(by_alias=True)

        assert ownership.can_mutate_job(record, RECRUITER)
        assert ownership.can_mutate_job(record, ADMIN)
        assert not ownership.can_mutate_job(record, OTHER_RECRUITER)
        assert not ownership.can_mutate_job(record, CANDIDATE)

    def test_can_delete(self, store, job):
        assert ownership.can_delete_job(store, job.id) is True

        application_crud.create(store, {"jobId": job.id, "userId": CANDIDATE.id, "status": "SENT"})

        assert ownership.can_delete_job(store, job.id) is False

    def test_require_job_owner(self, store, job):
        assert ownership.require_job_owner(store, job.id, RECRUITER)["id"] == job.id

        with pytest.raises(PermissionDeniedError):
            ownership.require_job_owner(store, job.id, OTHER_RECRUITER)
        with pytest.raises(NotFoundError):
            ownership.require_job_owner(store, "missing", RECRUITER)
