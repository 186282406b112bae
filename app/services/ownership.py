"""
Job ownership guard.

Answers two questions for recruiter-scoped mutations:
- does this actor own the job (directly, or as the owner of the job an
  application points at when the application lacks a usable recruiterId)?
- can this job be deleted (no application references it)?
"""

import logging
from typing import Any, Dict, Optional
from app.core.errors import NotFoundError, PermissionDeniedError
from app.crud import job as job_crud
from app.models.user import Actor

logger = logging.getLogger(__name__)


def resolve_recruiter_via_job(store, job_id: Optional[str], actor_id: str) -> bool:
    """
    Legacy repair path for applications missing (or carrying a stale) recruiterId.

    Grants recruiter access only when the referenced job exists and is owned by
    the actor. An application without a jobId can never be resolved here.

    Returns:
        True if the caller should treat the actor as the owning recruiter and
        patch the application's recruiterId to actor_id
    """
    if not job_id:
        logger.warning(f"Cannot resolve recruiter for actor {actor_id}: application has no jobId")
        return False

    job = job_crud.get_by_id(store, job_id)
    if job is None:
        logger.warning(f"Cannot resolve recruiter for actor {actor_id}: job {job_id} not found")
        return False

    if job.get("recruiterId") != actor_id:
        logger.warning(
            f"Job recruiter mismatch for job {job_id}: owner {job.get('recruiterId')} vs requestor {actor_id}"
        )
        return False

    return True


def can_mutate_job(job: Dict[str, Any], actor: Actor) -> bool:
    """True iff the actor is the job's recruiter or an admin."""
    return actor.is_admin or job.get("recruiterId") == actor.id


def can_delete_job(store, job_id: str) -> bool:
    """True iff no application references the job."""
    return not job_crud.has_applications(store, job_id)


def require_job_owner(store, job_id: str, actor: Actor) -> Dict[str, Any]:
    """
    Load a job for mutation.

    Raises:
        NotFoundError: job does not exist
        PermissionDeniedError: actor is neither the owning recruiter nor an admin
    """
    job = job_crud.get_by_id(store, job_id)
    if job is None:
        raise NotFoundError(f"Job {job_id} not found")

    if not can_mutate_job(job, actor):
        logger.warning(f"Actor {actor.id} denied mutation of job {job_id} owned by {job.get('recruiterId')}")
        raise PermissionDeniedError("Only the recruiter who posted this job can modify it")

    return job
