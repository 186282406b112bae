"""
Messages between the owning candidate and the owning recruiter of an application.

Both sides of the conversation can write and read. Admins can read any
conversation but do not take part in it. Sending is not a status change, so
it writes no history; it fires a best-effort notification to the other side.
"""

import logging
from typing import Any, Dict, List, Optional, Union
from app.core.errors import NotFoundError, PermissionDeniedError
from app.core.store import RecordStore
from app.crud import application as application_crud
from app.crud import job as job_crud
from app.crud import message as message_crud
from app.models.user import Actor, UserRole
from app.schemas.message import Message, MessageCreateRequest
from app.services.lifecycle import ActorRelationship, Relationship, resolve_actor_relationship
from app.services.notifications import NotificationTrigger, notify_new_message

logger = logging.getLogger(__name__)

# Relationships that make an actor a party to the conversation
PARTICIPANTS = frozenset({
    Relationship.OWNER,
    Relationship.RECRUITER_DIRECT,
    Relationship.RECRUITER_VIA_JOB,
})


def _load_application(store: RecordStore, application_id: str) -> Dict[str, Any]:
    application = application_crud.get_by_id(store, application_id)
    if application is None:
        raise NotFoundError(f"Application {application_id} not found")
    return application


def _recruiter_of(store: RecordStore, application: Dict[str, Any]) -> Optional[str]:
    """recruiterId, falling back to the owner of the referenced job for legacy records."""
    if application.get("recruiterId"):
        return application["recruiterId"]
    job = job_crud.get_by_id(store, application["jobId"]) if application.get("jobId") else None
    return job.get("recruiterId") if job else None


def _require_participant(store: RecordStore, application: Dict[str, Any], actor: Actor) -> ActorRelationship:
    relationship = resolve_actor_relationship(store, application, actor)
    if relationship.kind not in PARTICIPANTS:
        logger.warning(f"Actor {actor.id} is not part of the conversation on application {application['id']}")
        raise PermissionDeniedError("Only the candidate and the recruiter of this application can message")
    return relationship


def send_message(
    store: RecordStore,
    application_id: str,
    actor: Actor,
    data: Union[MessageCreateRequest, dict],
    notifier: Optional[NotificationTrigger] = None
) -> Message:
    """
    Post a message on an application.

    Raises:
        NotFoundError: application does not exist
        PermissionDeniedError: actor is neither the owning candidate nor the owning recruiter
    """
    application = _load_application(store, application_id)
    relationship = _require_participant(store, application, actor)

    if not isinstance(data, MessageCreateRequest):
        data = MessageCreateRequest.model_validate(data)

    if relationship.is_owner:
        sender_role = UserRole.CANDIDATE
        recipient_id = _recruiter_of(store, application)
    else:
        sender_role = UserRole.RECRUITER
        recipient_id = application.get("userId")

    message = message_crud.create(store, application_id, actor.id, sender_role, data.message)
    logger.info(f"{sender_role.value} {actor.id} sent message {message['id']} on application {application_id}")

    if recipient_id is None:
        logger.warning(f"Message {message['id']} has no recipient: application {application_id} has no recruiter")
    notify_new_message(notifier, application, message, recipient_id)

    return Message.model_validate(message)


def list_messages(store: RecordStore, application_id: str, actor: Actor) -> List[Message]:
    """The conversation, oldest first. Visible to both parties and to admins."""
    application = _load_application(store, application_id)

    relationship = resolve_actor_relationship(store, application, actor)
    if relationship.kind == Relationship.NONE:
        logger.warning(f"Actor {actor.id} denied read of messages on application {application_id}")
        raise PermissionDeniedError("You do not have access to this application")

    return [Message.model_validate(m) for m in message_crud.list_for_application(store, application_id)]


def mark_message_read(store: RecordStore, message_id: str, actor: Actor) -> Message:
    """
    Flag a message as read by its recipient.

    Raises:
        NotFoundError: message or its application does not exist
        PermissionDeniedError: actor is not the receiving party
    """
    message = message_crud.get_by_id(store, message_id)
    if message is None:
        raise NotFoundError(f"Message {message_id} not found")

    application = _load_application(store, message["applicationId"])
    _require_participant(store, application, actor)

    if message.get("senderId") == actor.id:
        raise PermissionDeniedError("Only the recipient can mark a message as read")

    if message.get("read"):
        return Message.model_validate(message)

    return Message.model_validate(message_crud.mark_read(store, message_id))
