"""
Read side of job applications: role-scoped listing, single-record visibility
and status history.
"""

import logging
from typing import Any, Dict, List, Optional
from app.core.errors import NotFoundError, PermissionDeniedError
from app.core.store import RecordStore
from app.crud import application as application_crud
from app.crud import history as history_crud
from app.crud import job as job_crud
from app.models.user import Actor, UserRole
from app.schemas.application import (
    ApplicationFilters,
    ApplicationHistoryEntry,
    JobApplication,
)
from app.services.lifecycle import Relationship, resolve_actor_relationship

logger = logging.getLogger(__name__)


def scoped_applications(store: RecordStore, actor: Actor) -> List[Dict[str, Any]]:
    """
    Raw application records visible to the actor.

    Recruiters also see applications that reach them only through one of
    their jobs (legacy records without recruiterId).
    """
    if actor.role == UserRole.CANDIDATE:
        return application_crud.list_for_candidate(store, actor.id)

    if actor.role == UserRole.RECRUITER:
        received = {app["id"]: app for app in application_crud.list_for_recruiter(store, actor.id)}
        for job in job_crud.list_by_recruiter(store, actor.id):
            for app in application_crud.list_for_job(store, job["id"]):
                received.setdefault(app["id"], app)
        return sorted(received.values(), key=lambda a: a.get("applicationDate") or "", reverse=True)

    return application_crud.list_all(store)


def list_applications(
    store: RecordStore,
    actor: Actor,
    filters: Optional[ApplicationFilters] = None
) -> List[JobApplication]:
    """Role-scoped application list with optional filters applied."""
    applications = scoped_applications(store, actor)
    if filters is not None:
        applications = application_crud.filter_applications(applications, filters)
    return [JobApplication.model_validate(app) for app in applications]


def get_application(store: RecordStore, application_id: str, actor: Actor) -> JobApplication:
    """
    Load one application if the actor may see it.

    Raises:
        NotFoundError: application does not exist
        PermissionDeniedError: actor is neither owner, owning recruiter nor admin
    """
    application = application_crud.get_by_id(store, application_id)
    if application is None:
        raise NotFoundError(f"Application {application_id} not found")

    relationship = resolve_actor_relationship(store, application, actor)
    if relationship.kind == Relationship.NONE:
        logger.warning(f"Actor {actor.id} denied read of application {application_id}")
        raise PermissionDeniedError("You do not have access to this application")

    return JobApplication.model_validate(application)


def get_application_history(store: RecordStore, application_id: str, actor: Actor) -> List[ApplicationHistoryEntry]:
    """Status history, newest first, for an application the actor can see."""
    get_application(store, application_id, actor)
    return [
        ApplicationHistoryEntry.model_validate(entry)
        for entry in history_crud.list_for_application(store, application_id)
    ]


def has_applied(store: RecordStore, actor: Actor, job_id: str) -> bool:
    return application_crud.has_user_applied_to_job(store, actor.id, job_id)
