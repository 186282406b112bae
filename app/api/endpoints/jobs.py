import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, status

from app.core.deps import get_current_actor, get_store
from app.core.store import RecordStore
from app.models.job import JobType
from app.models.user import Actor
from app.schemas.application import HasAppliedResponse
from app.schemas.job import Job, JobCreateRequest, JobSearchParams, JobUpdateRequest
from app.services import applications as application_service
from app.services import jobs as job_service

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=Job)
def create_job(
    request: JobCreateRequest,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    """Post a job. The caller (recruiter or admin) becomes its owner."""
    return job_service.create_job(store, request, actor)


@router.get("/", response_model=List[Job])
def list_open_jobs(
    q: Optional[str] = None,
    location: Optional[str] = None,
    type: Optional[JobType] = None,
    remote: Optional[bool] = None,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    """
    Search open (non-archived) jobs.

    Args:
        q: Matches title, company, location, description, salary or requirements
        location: Substring match on location
        type: Job type code
        remote: Only remote (true) or on-site (false) jobs
    """
    params = JobSearchParams(query=q, location=location, type=type, remote=remote)
    return job_service.list_open_jobs(store, params)


@router.get("/mine", response_model=List[Job])
def list_my_jobs(
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    """The caller's own postings, archived included."""
    return job_service.list_recruiter_jobs(store, actor)


@router.get("/{job_id}", response_model=Job)
def get_job(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    return job_service.get_job(store, job_id)


@router.patch("/{job_id}", response_model=Job)
def update_job(
    job_id: str,
    request: JobUpdateRequest,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    return job_service.update_job(store, job_id, request, actor)


@router.post("/{job_id}/archive", response_model=Job)
def archive_job(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    """Hide the job from candidates without deleting it."""
    return job_service.set_job_archived(store, job_id, True, actor)


@router.post("/{job_id}/unarchive", response_model=Job)
def unarchive_job(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    return job_service.set_job_archived(store, job_id, False, actor)


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_job(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    """
    Delete a job.

    Returns 409 while any application references the job; archive it instead.
    """
    job_service.delete_job(store, job_id, actor)
    return None


@router.get("/{job_id}/has-applied", response_model=HasAppliedResponse)
def has_applied(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    """Whether the calling candidate already applied to this job."""
    return HasAppliedResponse(job_id=job_id, applied=application_service.has_applied(store, actor, job_id))
