"""
Job postings: recruiter-owned create/edit/archive/delete plus candidate-facing
queries.
"""

import logging
from typing import List, Optional, Union
from app.core.errors import HasApplicationsError, NotFoundError, PermissionDeniedError
from app.core.store import RecordStore
from app.crud import job as job_crud
from app.models.user import Actor, UserRole
from app.schemas.job import Job, JobCreateRequest, JobSearchParams, JobUpdateRequest
from app.services import ownership

logger = logging.getLogger(__name__)


def create_job(store: RecordStore, data: Union[JobCreateRequest, dict], actor: Actor) -> Job:
    """
    Post a new job owned by the acting recruiter (or admin).

    Raises:
        PermissionDeniedError: actor is a candidate
    """
    if actor.role not in (UserRole.RECRUITER, UserRole.ADMIN):
        raise PermissionDeniedError("Only recruiters can post jobs")

    if not isinstance(data, JobCreateRequest):
        data = JobCreateRequest.model_validate(data)

    record = data.model_dump(by_alias=True, exclude_none=True, mode="json")
    record["recruiterId"] = actor.id
    record["archived"] = False

    job = job_crud.create(store, record)
    logger.info(f"Recruiter {actor.id} posted job {job['id']}: {job.get('title')}")
    return Job.model_validate(job)


def get_job(store: RecordStore, job_id: str) -> Job:
    job = job_crud.get_by_id(store, job_id)
    if job is None:
        raise NotFoundError(f"Job {job_id} not found")
    return Job.model_validate(job)


def update_job(store: RecordStore, job_id: str, updates: Union[JobUpdateRequest, dict], actor: Actor) -> Job:
    """
    Edit a job's descriptive fields.

    recruiterId, id, createdAt and archived are not part of JobUpdateRequest,
    so ownership can never change through this path.
    """
    ownership.require_job_owner(store, job_id, actor)

    if not isinstance(updates, JobUpdateRequest):
        updates = JobUpdateRequest.model_validate(updates)

    fields = updates.model_dump(by_alias=True, exclude_none=True, mode="json")
    job = job_crud.update(store, job_id, fields)
    logger.info(f"Actor {actor.id} updated job {job_id} ({', '.join(sorted(fields)) or 'no fields'})")
    return Job.model_validate(job)


def set_job_archived(store: RecordStore, job_id: str, archived: bool, actor: Actor) -> Job:
    """Archive or unarchive a job; same ownership rule as any other edit."""
    ownership.require_job_owner(store, job_id, actor)

    job = job_crud.update(store, job_id, {"archived": archived})
    logger.info(f"Actor {actor.id} {'archived' if archived else 'unarchived'} job {job_id}")
    return Job.model_validate(job)


def delete_job(store: RecordStore, job_id: str, actor: Actor) -> bool:
    """
    Delete a job that no application references.

    Raises:
        NotFoundError: job does not exist
        PermissionDeniedError: actor is neither the owner nor an admin
        HasApplicationsError: at least one application references the job
    """
    ownership.require_job_owner(store, job_id, actor)

    if not ownership.can_delete_job(store, job_id):
        logger.warning(f"Refused deletion of job {job_id}: applications still reference it")
        raise HasApplicationsError("This job has applications; archive it instead of deleting it")

    deleted = job_crud.delete(store, job_id)
    if deleted:
        logger.info(f"Actor {actor.id} deleted job {job_id}")
    return deleted


def list_open_jobs(store: RecordStore, params: Optional[JobSearchParams] = None) -> List[Job]:
    """Jobs visible to candidates, optionally narrowed by search parameters."""
    jobs = job_crud.list_open(store)
    if params is not None:
        jobs = job_crud.search_jobs(jobs, params)
    return [Job.model_validate(job) for job in jobs]


def list_recruiter_jobs(store: RecordStore, actor: Actor) -> List[Job]:
    return [Job.model_validate(job) for job in job_crud.list_by_recruiter(store, actor.id)]


def list_all_jobs(store: RecordStore) -> List[Job]:
    return [Job.model_validate(job) for job in job_crud.list_all(store)]
