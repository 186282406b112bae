"""
Stats aggregator.

Pure reducers over application/job/user records that the caller has already
scoped to an actor. Each reducer walks its input once and does no I/O; only
get_stats touches the store, to fetch the scoped records.
"""

import logging
import math
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional
from app.core.config import settings
from app.core.store import RecordStore
from app.crud import job as job_crud
from app.crud import user as user_crud
from app.models.application import PENDING_STATUSES, ApplicationStatus, parse_status
from app.models.user import Actor, UserRole
from app.services.applications import scoped_applications
from app.schemas.stats import (
    AdminStats,
    AggregatedStats,
    ApplicationStats,
    EvolutionPoint,
    RecruiterAdvancedStats,
    RecruiterStats,
    TopJob,
)

logger = logging.getLogger(__name__)

S = ApplicationStatus

TOP_JOBS_LIMIT = 5

_SECONDS_PER_DAY = 24 * 60 * 60


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _percentage(part: int, whole: int) -> float:
    """part/whole as a percentage rounded to 2 decimals; 0 when whole is 0"""
    if whole <= 0:
        return 0.0
    return _round_half_up(part / whole * 100, 2)


def _month_key(application: Dict[str, Any]) -> Optional[str]:
    application_date = application.get("applicationDate")
    if not application_date or len(application_date) < 7:
        return None
    return application_date[:7]


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _processing_days(application: Dict[str, Any]) -> Optional[int]:
    """Whole days between applicationDate and updatedAt, or None if unparseable"""
    applied, updated = application.get("applicationDate"), application.get("updatedAt")
    if not applied or not updated:
        return None
    try:
        delta = _parse_timestamp(updated) - _parse_timestamp(applied)
    except ValueError:
        logger.debug(f"Skipping unparseable dates on application {application.get('id')}")
        return None
    return math.floor(delta.total_seconds() / _SECONDS_PER_DAY)


def _evolution(months: Counter, last: Optional[int] = None) -> List[EvolutionPoint]:
    points = [EvolutionPoint(date=month, count=count) for month, count in sorted(months.items())]
    if last is not None:
        points = points[-last:] if last > 0 else []
    return points


def _status_of(application: Dict[str, Any]) -> Optional[ApplicationStatus]:
    try:
        return parse_status(application.get("status"))
    except ValueError:
        logger.warning(f"Unknown status {application.get('status')!r} on application {application.get('id')}")
        return None


def application_stats(applications: Iterable[Dict[str, Any]]) -> ApplicationStats:
    """
    Counts by status, interviews, success rate and monthly evolution.

    interviews counts INTERVIEW + ACCEPTED. successRate is ACCEPTED over every
    application that left TO_APPLY, as a percentage.
    """
    total = 0
    by_status = {status: 0 for status in ApplicationStatus}
    months: Counter = Counter()

    for application in applications:
        total += 1
        status = _status_of(application)
        if status is not None:
            by_status[status] += 1
        month = _month_key(application)
        if month:
            months[month] += 1

    submitted = by_status[S.SENT] + by_status[S.INTERVIEW] + by_status[S.ACCEPTED] + by_status[S.REFUSED]

    return ApplicationStats(
        total=total,
        by_status=by_status,
        interviews=by_status[S.INTERVIEW] + by_status[S.ACCEPTED],
        success_rate=_percentage(by_status[S.ACCEPTED], submitted),
        evolution=_evolution(months),
    )


def recruiter_stats(jobs: List[Dict[str, Any]], applications: Iterable[Dict[str, Any]]) -> RecruiterStats:
    """Pending (TO_APPLY + SENT), interview, accepted and refused breakdown."""
    counts: Counter = Counter()
    total = 0
    for application in applications:
        total += 1
        status = _status_of(application)
        if status in PENDING_STATUSES:
            counts["pending"] += 1
        elif status is not None:
            counts[status] += 1

    return RecruiterStats(
        total_jobs=len(jobs),
        total_applications=total,
        pending_applications=counts["pending"],
        interview_applications=counts[S.INTERVIEW],
        accepted_applications=counts[S.ACCEPTED],
        refused_applications=counts[S.REFUSED],
    )


def recruiter_advanced_stats(
    jobs: List[Dict[str, Any]],
    applications: Iterable[Dict[str, Any]],
    evolution_months: Optional[int] = None
) -> RecruiterAdvancedStats:
    """
    Response rate, average processing time, most popular jobs, recent evolution.

    An application counts as responded once it is no longer pending.
    Processing time is measured from applicationDate to updatedAt on
    responded applications only.
    """
    if evolution_months is None:
        evolution_months = settings.STATS_EVOLUTION_MONTHS

    total = 0
    responded = 0
    processing_days_total = 0
    processed = 0
    months: Counter = Counter()
    per_job: Counter = Counter()

    for application in applications:
        total += 1
        month = _month_key(application)
        if month:
            months[month] += 1
        if application.get("jobId"):
            per_job[application["jobId"]] += 1

        status = _status_of(application)
        if status is None or status in PENDING_STATUSES:
            continue
        responded += 1
        days = _processing_days(application)
        if days is not None:
            processing_days_total += days
            processed += 1

    jobs_by_id = {job["id"]: job for job in jobs}
    top_jobs = []
    for job_id, count in per_job.most_common(TOP_JOBS_LIMIT):
        job = jobs_by_id.get(job_id, {})
        top_jobs.append(TopJob(job_id=job_id, title=job.get("title"), company=job.get("company"), count=count))

    average = int(_round_half_up(processing_days_total / processed)) if processed else 0

    return RecruiterAdvancedStats(
        response_rate=_percentage(responded, total),
        average_processing_days=average,
        top_jobs=top_jobs,
        evolution=_evolution(months, last=evolution_months),
    )


def admin_stats(
    users: List[Dict[str, Any]],
    jobs: List[Dict[str, Any]],
    applications: List[Dict[str, Any]]
) -> AdminStats:
    by_role = {role: 0 for role in UserRole}
    for user in users:
        try:
            by_role[UserRole(user.get("role"))] += 1
        except ValueError:
            logger.warning(f"User {user.get('id')} has unknown role {user.get('role')!r}")

    return AdminStats(
        total_users=len(users),
        total_recruiters=by_role[UserRole.RECRUITER],
        total_candidates=by_role[UserRole.CANDIDATE],
        total_jobs=len(jobs),
        total_applications=len(applications),
        users_by_role=by_role,
    )


def get_stats(store: RecordStore, actor: Actor) -> AggregatedStats:
    """
    Dashboard stats scoped by role.

    candidate: own applications; recruiter: received applications and own
    jobs; admin: the whole platform.
    """
    applications = scoped_applications(store, actor)
    stats = AggregatedStats(role=actor.role, applications=application_stats(applications))

    if actor.role == UserRole.RECRUITER:
        jobs = job_crud.list_by_recruiter(store, actor.id)
        stats.recruiter = recruiter_stats(jobs, applications)
        stats.advanced = recruiter_advanced_stats(jobs, applications)
    elif actor.role == UserRole.ADMIN:
        jobs = job_crud.list_all(store)
        stats.recruiter = recruiter_stats(jobs, applications)
        stats.admin = admin_stats(user_crud.list_all(store), jobs, applications)

    return stats
