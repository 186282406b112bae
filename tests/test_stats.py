"""
Stats aggregator tests.
"""

import pytest

from app.crud import application as application_crud
from app.crud import user as user_crud
from app.models.application import ApplicationStatus
from app.models.user import UserRole
from app.services import stats as stats_service
from conftest import ADMIN, CANDIDATE, RECRUITER, auth_headers

S = ApplicationStatus


def app(status, application_date="2026-03-10", updated_at="2026-03-20T12:00:00+00:00", **fields):
    return {
        "id": fields.pop("id", f"{status}-{application_date}"),
        "status": status,
        "applicationDate": application_date,
        "updatedAt": updated_at,
        **fields,
    }


class TestApplicationStats:

    def test_empty(self):
        stats = stats_service.application_stats([])

        assert stats.total == 0
        assert stats.success_rate == 0
        assert stats.interviews == 0
        assert stats.evolution == []
        assert set(stats.by_status) == set(ApplicationStatus)

    def test_success_rate_zero_when_nothing_sent(self):
        stats = stats_service.application_stats([app("TO_APPLY"), app("TO_APPLY")])

        assert stats.total == 2
        assert stats.success_rate == 0

    def test_counts(self):
        stats = stats_service.application_stats([
            app("TO_APPLY", "2026-01-03"),
            app("SENT", "2026-01-20"),
            app("INTERVIEW", "2026-02-01"),
            app("ACCEPTED", "2026-02-15"),
            app("REFUSED", "2026-02-28"),
            app("Refus", "2026-03-01"),
        ])

        assert stats.total == 6
        assert stats.by_status[S.REFUSED] == 2
        assert stats.interviews == 2
        # 1 accepted out of 5 that left TO_APPLY
        assert stats.success_rate == 20.0
        assert [(p.date, p.count) for p in stats.evolution] == [("2026-01", 2), ("2026-02", 3), ("2026-03", 1)]

    def test_success_rate_rounding(self):
        stats = stats_service.application_stats([app("ACCEPTED"), app("SENT"), app("REFUSED")])

        assert stats.success_rate == 33.33


class TestRecruiterStats:

    def test_breakdown(self):
        jobs = [{"id": "j1"}, {"id": "j2"}]
        stats = stats_service.recruiter_stats(jobs, [
            app("TO_APPLY"), app("SENT"), app("Envoyée"),
            app("INTERVIEW"), app("ACCEPTED"), app("REFUSED"), app("REFUSED"),
        ])

        assert stats.total_jobs == 2
        assert stats.total_applications == 7
        assert stats.pending_applications == 3
        assert stats.interview_applications == 1
        assert stats.accepted_applications == 1
        assert stats.refused_applications == 2

    def test_advanced(self):
        jobs = [
            {"id": "j1", "title": "Backend", "company": "Acme"},
            {"id": "j2", "title": "Frontend", "company": "Acme"},
        ]
        applications = [
            app("SENT", jobId="j1", id="a1"),
            app("INTERVIEW", "2026-03-01", "2026-03-04T10:00:00+00:00", jobId="j1", id="a2"),
            app("REFUSED", "2026-03-01", "2026-03-11T09:00:00+00:00", jobId="j1", id="a3"),
            app("ACCEPTED", "2026-03-01", "2026-03-02T23:00:00+00:00", jobId="j2", id="a4"),
            app("REFUSED", "2026-03-01", "2026-03-02T00:00:00+00:00", jobId="deleted", id="a5"),
        ]

        stats = stats_service.recruiter_advanced_stats(jobs, applications)

        # 4 of 5 no longer pending
        assert stats.response_rate == 80.0
        # floor days: 3, 10, 1, 1 -> mean 3.75 -> 4
        assert stats.average_processing_days == 4
        assert [(t.job_id, t.count) for t in stats.top_jobs] == [("j1", 3), ("j2", 1), ("deleted", 1)]
        assert stats.top_jobs[0].title == "Backend"
        assert stats.top_jobs[2].title is None

    def test_advanced_empty(self):
        stats = stats_service.recruiter_advanced_stats([], [])

        assert stats.response_rate == 0
        assert stats.average_processing_days == 0
        assert stats.top_jobs == []

    def test_top_jobs_limited_to_five(self):
        applications = [app("SENT", jobId=f"j{i}", id=f"a{i}") for i in range(8)]

        stats = stats_service.recruiter_advanced_stats([], applications)

        assert len(stats.top_jobs) == 5

    def test_evolution_keeps_last_months(self):
        months = ["2025-10", "2025-11", "2025-12", "2026-01", "2026-02", "2026-03", "2026-04", "2026-05"]
        applications = [app("SENT", f"{m}-05", id=m) for m in months]

        stats = stats_service.recruiter_advanced_stats([], applications, evolution_months=6)

        assert [p.date for p in stats.evolution] == months[-6:]


class TestAdminStats:

    def test_users_by_role(self):
        users = [
            {"id": "u1", "role": "ADMIN"},
            {"id": "u2", "role": "RECRUITER"},
            {"id": "u3", "role": "CANDIDATE"},
            {"id": "u4", "role": "CANDIDATE"},
        ]

        stats = stats_service.admin_stats(users, [{"id": "j1"}], [app("SENT")])

        assert stats.total_users == 4
        assert stats.total_recruiters == 1
        assert stats.total_candidates == 2
        assert stats.users_by_role[UserRole.ADMIN] == 1
        assert stats.total_jobs == 1
        assert stats.total_applications == 1


class TestGetStats:

    @pytest.fixture
    def seeded(self, store, job, application):
        application_crud.create(store, {
            "title": "Other", "company": "Globex", "userId": "cand-2",
            "status": "INTERVIEW", "applicationDate": "2026-02-01", "recruiterId": RECRUITER.id,
        })
        user_crud.create(store, CANDIDATE.id, {"name": "Camille", "email": "camille@example.com", "role": "CANDIDATE"})
        user_crud.create(store, RECRUITER.id, {"name": "Robin", "email": "robin@example.com", "role": "RECRUITER"})
        return store

    def test_candidate_scope(self, seeded):
        stats = stats_service.get_stats(seeded, CANDIDATE)

        assert stats.role == UserRole.CANDIDATE
        assert stats.applications.total == 1
        assert stats.recruiter is None
        assert stats.admin is None

    def test_recruiter_scope(self, seeded):
        stats = stats_service.get_stats(seeded, RECRUITER)

        assert stats.applications.total == 2
        assert stats.recruiter.total_jobs == 1
        assert stats.recruiter.pending_applications == 1
        assert stats.advanced.response_rate == 50.0

    def test_admin_scope(self, seeded):
        stats = stats_service.get_stats(seeded, ADMIN)

        assert stats.applications.total == 2
        assert stats.admin.total_users == 2
        assert stats.admin.total_jobs == 1

    def test_endpoint(self, client, seeded):
        response = client.get("/api/v1/stats/", headers=auth_headers(RECRUITER))

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "RECRUITER"
        assert data["applications"]["byStatus"]["INTERVIEW"] == 1
        assert data["recruiter"]["totalApplications"] == 2
        assert "responseRate" in data["advanced"]
