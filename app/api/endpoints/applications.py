import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, status

from app.core.deps import get_current_actor, get_store
from app.core.store import RecordStore
from app.models.application import ApplicationStatus, ContractType
from app.models.user import Actor
from app.schemas.application import (
    ApplicationCreateRequest,
    ApplicationFilters,
    ApplicationHistoryEntry,
    ApplicationUpdateRequest,
    JobApplication,
)
from app.schemas.message import Message, MessageCreateRequest
from app.services import applications as application_service
from app.services import lifecycle
from app.services import messages as message_service
from app.services.notifications import NotificationTrigger, get_notification_trigger

router = APIRouter(prefix="/applications", tags=["Applications"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=JobApplication)
def create_application(
    request: ApplicationCreateRequest,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    """
    Log a new application (candidates only).

    Starts as TO_APPLY unless the candidate applied straight away (SENT).
    When jobId is given the job's recruiter is attached to the application.
    """
    return lifecycle.create_application(store, request, actor)


@router.get("/", response_model=List[JobApplication])
def list_applications(
    status: Optional[ApplicationStatus] = None,
    contract_type: Optional[ContractType] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    q: Optional[str] = None,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    """
    List applications visible to the caller.

    - CANDIDATE: own applications
    - RECRUITER: applications received on their jobs
    - ADMIN: every application

    Args:
        status: Only this status
        contract_type: Only this contract type
        start_date: applicationDate >= start_date (inclusive)
        end_date: applicationDate <= end_date (inclusive)
        q: Case-insensitive match on title or company
    """
    filters = ApplicationFilters(
        status=status,
        contract_type=contract_type,
        start_date=start_date,
        end_date=end_date,
        search_query=q,
    )
    return application_service.list_applications(store, actor, filters)


@router.get("/{application_id}", response_model=JobApplication)
def get_application(
    application_id: str,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    return application_service.get_application(store, application_id, actor)


@router.patch("/{application_id}", response_model=JobApplication)
def update_application(
    application_id: str,
    request: ApplicationUpdateRequest,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store),
    notifier: NotificationTrigger = Depends(get_notification_trigger)
):
    """
    Edit an application and/or move its status.

    Candidates can edit only while TO_APPLY (423 afterwards) and can only
    submit (TO_APPLY -> SENT). The owning recruiter or an admin moves the
    status to INTERVIEW, then ACCEPTED or REFUSED (409 otherwise).
    """
    return lifecycle.commit_application_update(store, application_id, actor, request, notifier=notifier)


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_application(
    application_id: str,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    lifecycle.delete_application(store, application_id, actor)
    return None


@router.get("/{application_id}/history", response_model=List[ApplicationHistoryEntry])
def get_application_history(
    application_id: str,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    """Status changes for the application, newest first."""
    return application_service.get_application_history(store, application_id, actor)


@router.post("/{application_id}/follow-up", response_model=JobApplication)
def record_follow_up(
    application_id: str,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    """Record that the candidate followed up with the recruiter."""
    return lifecycle.record_follow_up(store, application_id, actor)


@router.post("/{application_id}/duplicate", status_code=status.HTTP_201_CREATED, response_model=JobApplication)
def duplicate_application(
    application_id: str,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    return lifecycle.duplicate_application(store, application_id, actor)


@router.post("/{application_id}/messages", status_code=status.HTTP_201_CREATED, response_model=Message)
def send_message(
    application_id: str,
    request: MessageCreateRequest,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store),
    notifier: NotificationTrigger = Depends(get_notification_trigger)
):
    """
    Message the other side of the application.

    Allowed to the candidate who owns the application and to its recruiter.
    """
    return message_service.send_message(store, application_id, actor, request, notifier=notifier)


@router.get("/{application_id}/messages", response_model=List[Message])
def list_messages(
    application_id: str,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    """Conversation on the application, oldest first."""
    return message_service.list_messages(store, application_id, actor)
