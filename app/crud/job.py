"""
CRUD operations for job postings.

Implements the Repository pattern over the jobs collection. Ownership checks
are done by app.services.ownership before any of the mutating calls.
"""

from typing import Any, Dict, List, Optional
from app.core.store import APPLICATIONS, JOBS, RecordStore, now_iso
from app.schemas.job import JobSearchParams


def _newest_posted_first(jobs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(jobs, key=lambda j: j.get("postedDate") or "", reverse=True)


def create(store: RecordStore, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a new job posting.

    Args:
        store: Record store
        data: Job fields including recruiterId

    Returns:
        Stored job with id, timestamps and archived=False unless given
    """
    now = now_iso()
    job_id = store.new_id()
    job = {
        **data,
        "id": job_id,
        "archived": data.get("archived", False),
        "postedDate": data.get("postedDate") or now,
        "createdAt": now,
        "updatedAt": now,
    }
    return store.put(JOBS, job_id, job)


def get_by_id(store: RecordStore, job_id: str) -> Optional[Dict[str, Any]]:
    """Retrieve a job by its ID, or None if absent."""
    return store.get(JOBS, job_id)


def list_by_recruiter(store: RecordStore, recruiter_id: str) -> List[Dict[str, Any]]:
    """A recruiter's jobs (archived included), newest postedDate first."""
    return _newest_posted_first(store.find(JOBS, {"recruiterId": recruiter_id}))


def list_open(store: RecordStore) -> List[Dict[str, Any]]:
    """Jobs visible to candidates (not archived), newest postedDate first."""
    return _newest_posted_first(store.find(JOBS, {"archived": False}))


def list_all(store: RecordStore) -> List[Dict[str, Any]]:
    return _newest_posted_first(store.find(JOBS))


def update(store: RecordStore, job_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Patch a job and stamp updatedAt."""
    return store.patch(JOBS, job_id, {**fields, "updatedAt": now_iso()})


def delete(store: RecordStore, job_id: str) -> bool:
    """Delete a job by ID. Returns False if not found."""
    return store.delete(JOBS, job_id)


def has_applications(store: RecordStore, job_id: str) -> bool:
    """True if at least one application references the job."""
    return bool(store.find(APPLICATIONS, {"jobId": job_id}))


def search_jobs(jobs: List[Dict[str, Any]], params: JobSearchParams) -> List[Dict[str, Any]]:
    """
    Filter jobs in memory.

    The free-text query matches title, company, location, description, salary
    or any requirement, case-insensitively. Location is a substring match.
    """
    query = params.query.lower() if params.query else None
    location = params.location.lower() if params.location else None

    def matches_query(job: Dict[str, Any]) -> bool:
        haystacks = [
            job.get("title"),
            job.get("company"),
            job.get("location"),
            job.get("description"),
            job.get("salary"),
            *(job.get("requirements") or []),
        ]
        return any(query in text.lower() for text in haystacks if text)

    results = []
    for job in jobs:
        if query and not matches_query(job):
            continue
        if location and location not in (job.get("location") or "").lower():
            continue
        if params.type and job.get("type") not in (params.type.value, params.type.label):
            continue
        if params.remote is not None and job.get("remote") != params.remote:
            continue
        results.append(job)
    return results
