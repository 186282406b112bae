"""
Application endpoints and read-side queries.
"""

import pytest

from app.core.errors import NotFoundError, PermissionDeniedError
from app.crud import application as application_crud
from app.schemas.application import ApplicationFilters
from app.services import applications as application_service
from app.services import lifecycle
from conftest import ADMIN, CANDIDATE, OTHER_CANDIDATE, OTHER_RECRUITER, RECRUITER, auth_headers


def seed(store, user_id=CANDIDATE.id, **fields):
    data = {
        "title": "Developer",
        "company": "Acme",
        "userId": user_id,
        "status": "SENT",
        "applicationDate": "2026-04-10",
        **fields,
    }
    return application_crud.create(store, data)


class TestApplicationQueries:

    def test_candidate_sees_own_newest_first(self, store):
        seed(store, title="Older", applicationDate="2026-01-05")
        seed(store, title="Newer", applicationDate="2026-06-01")
        seed(store, user_id=OTHER_CANDIDATE.id, title="Not mine")

        titles = [a.title for a in application_service.list_applications(store, CANDIDATE)]

        assert titles == ["Newer", "Older"]

    def test_recruiter_sees_received_including_legacy(self, store, job):
        seed(store, title="Direct", recruiterId=RECRUITER.id)
        seed(store, title="Through job", jobId=job.id)
        seed(store, title="Someone else's", recruiterId=OTHER_RECRUITER.id)

        titles = {a.title for a in application_service.list_applications(store, RECRUITER)}

        assert titles == {"Direct", "Through job"}

    def test_recruiter_list_has_no_duplicates(self, store, job):
        seed(store, recruiterId=RECRUITER.id, jobId=job.id)

        assert len(application_service.list_applications(store, RECRUITER)) == 1

    def test_admin_sees_everything(self, store):
        seed(store)
        seed(store, user_id=OTHER_CANDIDATE.id)

        assert len(application_service.list_applications(store, ADMIN)) == 2

    @pytest.mark.parametrize("filters, titles", [
        ({"status": "INTERVIEW"}, {"Data"}),
        ({"contract_type": "STAGE"}, {"Intern", "Legacy"}),
        ({"search_query": "ACME"}, {"Developer"}),
        ({"search_query": "data"}, {"Data"}),
        ({"start_date": "2026-03-01"}, {"Developer", "Data", "Legacy"}),
        ({"end_date": "2026-03-01"}, {"Intern", "Legacy"}),
        ({"start_date": "2026-02-01", "end_date": "2026-04-10"}, {"Developer", "Legacy"}),
    ])
    def test_filters(self, store, filters, titles):
        seed(store, title="Developer", company="Acme", applicationDate="2026-04-10T09:30:00+00:00")
        seed(store, title="Data", company="Globex", status="INTERVIEW", applicationDate="2026-05-01")
        seed(store, title="Intern", company="Initech", contractType="STAGE", applicationDate="2026-01-15")
        seed(store, title="Legacy", company="Umbrella", contractType="Stage", status="Envoyée", applicationDate="2026-03-01")

        results = application_service.list_applications(store, CANDIDATE, ApplicationFilters(**filters))

        assert {a.title for a in results} == titles

    def test_get_application_visibility(self, store, application):
        for actor in (CANDIDATE, RECRUITER, ADMIN):
            assert application_service.get_application(store, application.id, actor).id == application.id

        for actor in (OTHER_CANDIDATE, OTHER_RECRUITER):
            with pytest.raises(PermissionDeniedError):
                application_service.get_application(store, application.id, actor)

        with pytest.raises(NotFoundError):
            application_service.get_application(store, "missing", CANDIDATE)

    def test_history_newest_first(self, store, application):
        lifecycle.commit_application_update(store, application.id, CANDIDATE, {"status": "SENT"})
        lifecycle.commit_application_update(store, application.id, RECRUITER, {"status": "INTERVIEW"})

        history = application_service.get_application_history(store, application.id, RECRUITER)

        assert [h.new_status.value for h in history] == ["INTERVIEW", "SENT", "TO_APPLY"]
        assert history[-1].old_status is None

    def test_history_requires_visibility(self, store, application):
        with pytest.raises(PermissionDeniedError):
            application_service.get_application_history(store, application.id, OTHER_CANDIDATE)

    def test_has_applied(self, store, job, application):
        assert application_service.has_applied(store, CANDIDATE, job.id) is True
        assert application_service.has_applied(store, OTHER_CANDIDATE, job.id) is False


class TestApplicationEndpoints:

    def test_create(self, client, job, sample_application_data):
        response = client.post(
            "/api/v1/applications/",
            json={**sample_application_data, "jobId": job.id},
            headers=auth_headers(CANDIDATE)
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "TO_APPLY"
        assert data["statusLabel"] == "À postuler"
        assert data["userId"] == CANDIDATE.id
        assert data["recruiterId"] == RECRUITER.id
        assert data["followUpCount"] == 0

    def test_create_rejects_user_id(self, client, sample_application_data):
        response = client.post(
            "/api/v1/applications/",
            json={**sample_application_data, "userId": OTHER_CANDIDATE.id},
            headers=auth_headers(CANDIDATE)
        )

        assert response.status_code == 422

    def test_create_twice_on_same_job(self, client, job, sample_application_data):
        payload = {**sample_application_data, "jobId": job.id}

        first = client.post("/api/v1/applications/", json=payload, headers=auth_headers(CANDIDATE))
        second = client.post("/api/v1/applications/", json=payload, headers=auth_headers(CANDIDATE))

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["code"] == "ALREADY_APPLIED"

    def test_create_unknown_job(self, client, sample_application_data):
        response = client.post(
            "/api/v1/applications/",
            json={**sample_application_data, "jobId": "missing"},
            headers=auth_headers(CANDIDATE)
        )

        assert response.status_code == 404

    def test_list_with_filters(self, client, store):
        seed(store, title="Developer")
        seed(store, title="Data", status="INTERVIEW")

        response = client.get("/api/v1/applications/?status=INTERVIEW", headers=auth_headers(CANDIDATE))

        assert response.status_code == 200
        assert [a["title"] for a in response.json()] == ["Data"]

    def test_lifecycle_over_http(self, client, application, notifier):
        url = f"/api/v1/applications/{application.id}"

        submitted = client.patch(url, json={"status": "SENT"}, headers=auth_headers(CANDIDATE))
        locked = client.patch(url, json={"title": "Edit"}, headers=auth_headers(CANDIDATE))
        interview = client.patch(url, json={"status": "INTERVIEW"}, headers=auth_headers(RECRUITER))
        skipped = client.patch(url, json={"status": "SENT"}, headers=auth_headers(RECRUITER))
        accepted = client.patch(url, json={"status": "ACCEPTED"}, headers=auth_headers(RECRUITER))
        after_terminal = client.patch(url, json={"status": "REFUSED"}, headers=auth_headers(RECRUITER))
        delete = client.delete(url, headers=auth_headers(CANDIDATE))

        assert submitted.status_code == 200
        assert locked.status_code == 423
        assert locked.json()["code"] == "LOCKED"
        assert interview.json()["status"] == "INTERVIEW"
        assert skipped.status_code == 409
        assert accepted.json()["statusLabel"] == "Acceptée"
        assert after_terminal.status_code == 409
        assert after_terminal.json()["code"] == "INVALID_TRANSITION"
        assert delete.status_code == 423
        assert len(notifier.calls) == 3

        history = client.get(f"{url}/history", headers=auth_headers(CANDIDATE)).json()
        assert [h["newStatus"] for h in history] == ["ACCEPTED", "INTERVIEW", "SENT", "TO_APPLY"]

    def test_patch_denied(self, client, application):
        response = client.patch(
            f"/api/v1/applications/{application.id}",
            json={"status": "INTERVIEW"},
            headers=auth_headers(OTHER_RECRUITER)
        )

        assert response.status_code == 403

    def test_patch_missing(self, client):
        response = client.patch("/api/v1/applications/missing", json={"notes": "x"}, headers=auth_headers(CANDIDATE))

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_get_and_delete(self, client, application):
        url = f"/api/v1/applications/{application.id}"

        assert client.get(url, headers=auth_headers(RECRUITER)).status_code == 200
        assert client.get(url, headers=auth_headers(OTHER_CANDIDATE)).status_code == 403
        assert client.delete(url, headers=auth_headers(RECRUITER)).status_code == 403
        assert client.delete(url, headers=auth_headers(CANDIDATE)).status_code == 204
        assert client.get(url, headers=auth_headers(CANDIDATE)).status_code == 404

    def test_follow_up_and_duplicate(self, client, store):
        record = seed(store)
        url = f"/api/v1/applications/{record['id']}"

        follow_up = client.post(f"{url}/follow-up", headers=auth_headers(CANDIDATE))
        duplicate = client.post(f"{url}/duplicate", headers=auth_headers(CANDIDATE))

        assert follow_up.status_code == 200
        assert follow_up.json()["followUpCount"] == 1
        assert duplicate.status_code == 201
        assert duplicate.json()["status"] == "TO_APPLY"
        assert duplicate.json()["id"] != record["id"]

    def test_requires_token(self, client):
        response = client.get("/api/v1/applications/")

        assert response.status_code in (401, 403)
