"""
Application lifecycle engine.

Validates and commits every mutation of a job application:

    TO_APPLY -> SENT -> INTERVIEW -> ACCEPTED | REFUSED

Who may do what:
- the owning candidate edits freely while the application is TO_APPLY
  (including submitting it: TO_APPLY -> SENT) and is locked out afterwards
- the owning recruiter (or an admin) edits fields and moves the status along
  RECRUITER_TRANSITIONS until a terminal status is reached
- nobody changes anything once ACCEPTED or REFUSED

Every committed status change appends one history entry and then fires a
best-effort notification. The actor is always passed in explicitly.
"""

import enum
import logging
from datetime import date
from typing import Any, Dict, NamedTuple, Optional, Union
from app.core.errors import (
    AlreadyAppliedError,
    InvalidTransitionError,
    LockedError,
    NotFoundError,
    PermissionDeniedError,
)
from app.crud import application as application_crud
from app.crud import history as history_crud
from app.crud import job as job_crud
from app.core.store import RecordStore, now_iso
from app.models.application import DECIDED_STATUSES, ApplicationStatus
from app.models.user import Actor, UserRole
from app.schemas.application import (
    ApplicationCreateRequest,
    ApplicationUpdateRequest,
    JobApplication,
)
from app.services import ownership
from app.services.notifications import NotificationTrigger, notify_status_change

logger = logging.getLogger(__name__)

S = ApplicationStatus

# Status changes the owning recruiter or an admin may commit
RECRUITER_TRANSITIONS = {
    S.TO_APPLY: frozenset({S.INTERVIEW}),
    S.SENT: frozenset({S.INTERVIEW}),
    S.INTERVIEW: frozenset({S.ACCEPTED, S.REFUSED}),
    S.ACCEPTED: frozenset(),
    S.REFUSED: frozenset(),
}

# Status changes the owning candidate may commit (only while TO_APPLY)
CANDIDATE_TRANSITIONS = {
    S.TO_APPLY: frozenset({S.SENT}),
}

# Statuses an application may be created with
INITIAL_STATUSES = frozenset({S.TO_APPLY, S.SENT})

# Statuses in which the candidate may log a follow-up with the recruiter
FOLLOW_UP_STATUSES = frozenset({S.SENT, S.INTERVIEW})


class Relationship(str, enum.Enum):
    OWNER = "OWNER"
    RECRUITER_DIRECT = "RECRUITER_DIRECT"
    RECRUITER_VIA_JOB = "RECRUITER_VIA_JOB"
    ADMIN = "ADMIN"
    NONE = "NONE"


class ActorRelationship(NamedTuple):
    """How an actor relates to one application."""
    kind: Relationship
    needs_patch: bool = False

    @property
    def is_owner(self) -> bool:
        return self.kind == Relationship.OWNER

    @property
    def is_manager(self) -> bool:
        """Recruiter side: owning recruiter (direct or via job) or admin."""
        return self.kind in (Relationship.RECRUITER_DIRECT, Relationship.RECRUITER_VIA_JOB, Relationship.ADMIN)


def resolve_actor_relationship(store: RecordStore, application: Dict[str, Any], actor: Actor) -> ActorRelationship:
    """
    Classify the actor against an application.

    The job lookup only happens when the actor matches neither the candidate
    nor the stored recruiterId and is not an admin.
    """
    if application.get("userId") == actor.id:
        return ActorRelationship(Relationship.OWNER)

    recruiter_id = application.get("recruiterId")
    if recruiter_id and recruiter_id == actor.id:
        return ActorRelationship(Relationship.RECRUITER_DIRECT)

    if actor.is_admin:
        return ActorRelationship(Relationship.ADMIN)

    if ownership.resolve_recruiter_via_job(store, application.get("jobId"), actor.id):
        return ActorRelationship(Relationship.RECRUITER_VIA_JOB, needs_patch=True)

    return ActorRelationship(Relationship.NONE)


def can_transition(current: ApplicationStatus, target: ApplicationStatus, relationship: ActorRelationship) -> bool:
    """Pure check of the transition table; unchanged status is always allowed."""
    if current == target:
        return True
    if relationship.is_owner:
        return target in CANDIDATE_TRANSITIONS.get(current, frozenset())
    if relationship.is_manager:
        return target in RECRUITER_TRANSITIONS[current]
    return False


def _load(store: RecordStore, application_id: str) -> Dict[str, Any]:
    application = application_crud.get_by_id(store, application_id)
    if application is None:
        raise NotFoundError(f"Application {application_id} not found")
    return application


def _coerce_updates(updates: Union[ApplicationUpdateRequest, Dict[str, Any]]) -> Dict[str, Any]:
    if not isinstance(updates, ApplicationUpdateRequest):
        updates = ApplicationUpdateRequest.model_validate(updates)
    return updates.model_dump(by_alias=True, exclude_none=True, mode="json")


def _check_manager_transition(current: ApplicationStatus, target: ApplicationStatus) -> None:
    if current.is_terminal:
        raise InvalidTransitionError(
            f"Application is {current.value}; its status can no longer be changed"
        )
    if current == target:
        return
    if target in (S.ACCEPTED, S.REFUSED) and current != S.INTERVIEW:
        raise InvalidTransitionError(
            f"Can only move to {target.value} from INTERVIEW (current status is {current.value})"
        )
    if target not in RECRUITER_TRANSITIONS[current]:
        raise InvalidTransitionError(f"Transition {current.value} -> {target.value} is not allowed")


def commit_application_update(
    store: RecordStore,
    application_id: str,
    actor: Actor,
    updates: Union[ApplicationUpdateRequest, Dict[str, Any]],
    notifier: Optional[NotificationTrigger] = None,
    history_notes: Optional[str] = None
) -> JobApplication:
    """
    Validate and commit field updates (optionally including a new status).

    Args:
        store: Record store
        application_id: Application to modify
        actor: Authenticated actor (id and role)
        updates: Proposed field updates; relational fields are rejected by the schema
        notifier: Trigger fired after a committed status change
        history_notes: Optional note stored on the history entry

    Returns:
        The refreshed application

    Raises:
        NotFoundError: application does not exist
        PermissionDeniedError: actor has no relationship to the application
        LockedError: owning candidate editing an application that is no longer TO_APPLY
        InvalidTransitionError: disallowed status change, or any change once terminal
        VersionConflictError: the application changed between read and write
    """
    current = _load(store, application_id)
    current_status = ApplicationStatus.parse(current["status"])

    relationship = resolve_actor_relationship(store, current, actor)
    if relationship.kind == Relationship.NONE:
        logger.warning(f"Actor {actor.id} ({actor.role.value}) denied update of application {application_id}")
        raise PermissionDeniedError("You do not have access to this application")

    fields = _coerce_updates(updates)
    requested = fields.pop("status", None)
    new_status = ApplicationStatus.parse(requested) if requested else current_status
    status_changed = new_status != current_status

    if relationship.is_owner:
        if current_status != S.TO_APPLY:
            logger.warning(f"Candidate {actor.id} tried to modify locked application {application_id} ({current_status.value})")
            raise LockedError("Cannot modify an application that has already been sent")
        if not can_transition(current_status, new_status, relationship):
            raise InvalidTransitionError(
                f"Candidates can only submit an application (TO_APPLY -> SENT), not move it to {new_status.value}"
            )
    else:
        _check_manager_transition(current_status, new_status)

    if status_changed:
        fields["status"] = new_status.value

    if relationship.needs_patch:
        fields["recruiterId"] = actor.id
        logger.info(f"Repaired recruiterId on application {application_id} -> {actor.id} (resolved via job {current.get('jobId')})")

    updated = application_crud.update(store, application_id, fields, expected_version=current.get("version"))

    if status_changed:
        history_crud.record(store, application_id, current_status, new_status, actor.id, notes=history_notes)
        logger.info(
            f"Application {application_id}: {current_status.value} -> {new_status.value} by {actor.id} ({relationship.kind.value})"
        )
        notify_status_change(notifier, updated, current_status, new_status, actor.id)

    return JobApplication.model_validate(updated)


def create_application(
    store: RecordStore,
    data: Union[ApplicationCreateRequest, Dict[str, Any]],
    actor: Actor
) -> JobApplication:
    """
    Create an application owned by the acting candidate.

    When jobId is given, recruiterId is copied from the job so the recruiter
    sees the application without a job lookup. The first history entry
    (no oldStatus) is written immediately.

    Raises:
        PermissionDeniedError: actor is not a candidate
        InvalidTransitionError: initial status other than TO_APPLY or SENT
        NotFoundError: referenced job does not exist
        AlreadyAppliedError: the candidate already applied to the referenced job
    """
    if actor.role != UserRole.CANDIDATE:
        raise PermissionDeniedError("Only candidates can create applications")

    if not isinstance(data, ApplicationCreateRequest):
        data = ApplicationCreateRequest.model_validate(data)

    if data.status not in INITIAL_STATUSES:
        raise InvalidTransitionError(f"Applications start as TO_APPLY or SENT, not {data.status.value}")

    record = data.model_dump(by_alias=True, exclude_none=True, mode="json")
    record["userId"] = actor.id
    record["applicationDate"] = data.application_date or date.today().isoformat()
    record["followUpCount"] = 0

    if data.job_id:
        job = job_crud.get_by_id(store, data.job_id)
        if job is None:
            raise NotFoundError(f"Job {data.job_id} not found")
        if application_crud.has_user_applied_to_job(store, actor.id, data.job_id):
            logger.info(f"Candidate {actor.id} already applied to job {data.job_id}")
            raise AlreadyAppliedError("You have already applied to this job")
        record["recruiterId"] = job.get("recruiterId")

    created = application_crud.create(store, record)
    history_crud.record(store, created["id"], None, data.status, actor.id)
    logger.info(f"Candidate {actor.id} created application {created['id']} ({data.status.value})")

    return JobApplication.model_validate(created)


def delete_application(store: RecordStore, application_id: str, actor: Actor) -> bool:
    """
    Delete an application on behalf of its owning candidate.

    History entries are kept. Deletion is refused once the recruiter has
    taken a decision (INTERVIEW, ACCEPTED, REFUSED).

    Raises:
        NotFoundError: application does not exist
        PermissionDeniedError: actor is not the owning candidate
        LockedError: application is INTERVIEW, ACCEPTED or REFUSED
    """
    current = _load(store, application_id)

    if current.get("userId") != actor.id:
        logger.warning(f"Actor {actor.id} denied deletion of application {application_id}")
        raise PermissionDeniedError("Only the candidate who created this application can delete it")

    current_status = ApplicationStatus.parse(current["status"])
    if current_status in DECIDED_STATUSES:
        raise LockedError(f"Cannot delete an application that is {current_status.value}")

    deleted = application_crud.delete(store, application_id)
    if deleted:
        logger.info(f"Candidate {actor.id} deleted application {application_id}")
    return deleted


def record_follow_up(store: RecordStore, application_id: str, actor: Actor) -> JobApplication:
    """
    Log that the candidate followed up with the recruiter.

    Allowed to the owning candidate while the application is SENT or
    INTERVIEW. Only followUpCount and lastFollowUp change; this is not a
    status change, so no history entry or notification is produced.
    """
    current = _load(store, application_id)

    if current.get("userId") != actor.id:
        raise PermissionDeniedError("Only the candidate who created this application can follow up")

    current_status = ApplicationStatus.parse(current["status"])
    if current_status not in FOLLOW_UP_STATUSES:
        raise LockedError(f"Follow-ups are only possible while SENT or INTERVIEW (current status is {current_status.value})")

    fields = {
        "followUpCount": (current.get("followUpCount") or 0) + 1,
        "lastFollowUp": now_iso(),
    }
    updated = application_crud.update(store, application_id, fields, expected_version=current.get("version"))
    logger.info(f"Candidate {actor.id} followed up on application {application_id} (#{fields['followUpCount']})")

    return JobApplication.model_validate(updated)


def duplicate_application(store: RecordStore, application_id: str, actor: Actor) -> JobApplication:
    """
    Copy one of the candidate's applications into a fresh TO_APPLY application.

    Raises:
        NotFoundError: source application does not exist
        PermissionDeniedError: actor is not the owning candidate
        LockedError: source is INTERVIEW, ACCEPTED or REFUSED
    """
    source = _load(store, application_id)

    if source.get("userId") != actor.id:
        raise PermissionDeniedError("Only the candidate who created this application can duplicate it")

    source_status = ApplicationStatus.parse(source["status"])
    if source_status in DECIDED_STATUSES:
        raise LockedError(f"Cannot duplicate an application that is {source_status.value}")

    copied_fields = ("title", "company", "location", "jobUrl", "contractType", "cvUrl", "cvFileName", "jobId", "recruiterId")
    record = {field: source.get(field) for field in copied_fields}
    record.update({
        "userId": actor.id,
        "status": S.TO_APPLY.value,
        "applicationDate": date.today().isoformat(),
        "notes": "",
        "followUpCount": 0,
    })

    created = application_crud.create(store, record)
    history_crud.record(store, created["id"], None, S.TO_APPLY, actor.id)
    logger.info(f"Candidate {actor.id} duplicated application {application_id} into {created['id']}")

    return JobApplication.model_validate(created)
