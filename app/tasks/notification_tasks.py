"""
Celery tasks for application status and message notifications.

The API queues one task per committed status change or new message. The
worker loads the recipient's profile, honours their notification settings
and sends the e-mail.
"""

import logging
from typing import Any, Dict
from app.core.celery_app import celery_app
from app.core.database import SessionLocal
from app.core.store import RecordStore, SqlRecordStore
from app.crud import application as application_crud
from app.crud import user as user_crud
from app.models.application import ApplicationStatus
from app.schemas.user import NotificationSettings

logger = logging.getLogger(__name__)


class NotificationDeliveryError(Exception):
    """E-mail provider refused or failed to send; the task retries."""


def deliver_status_change_notification(
    store: RecordStore,
    sender,
    application_id: str,
    user_id: str,
    title: str,
    company: str,
    new_status: str
) -> Dict[str, Any]:
    """
    Send one status change e-mail if the candidate wants it.

    Args:
        store: Record store holding the candidate profile
        sender: Object with send_status_change_email (EmailService)

    Returns:
        dict with "status" of sent, skipped or error

    Raises:
        NotificationDeliveryError: the sender reported a failure
    """
    user = user_crud.get_by_id(store, user_id)
    if user is None:
        logger.warning(f"No profile for user {user_id}; skipping notification for application {application_id}")
        return {"status": "skipped", "reason": "no_profile"}

    preferences = NotificationSettings.model_validate(user.get("notificationSettings") or {})
    if not preferences.enabled or not preferences.status_changes:
        logger.info(f"User {user_id} opted out of status notifications (application {application_id})")
        return {"status": "skipped", "reason": "opted_out"}

    email = user.get("email")
    if not email:
        logger.warning(f"User {user_id} has no e-mail address; skipping notification")
        return {"status": "skipped", "reason": "no_email"}

    sent = sender.send_status_change_email(
        to_email=email,
        title=title,
        company=company,
        new_status=ApplicationStatus.parse(new_status),
        user_name=user.get("name")
    )
    if not sent:
        raise NotificationDeliveryError(f"Failed to send status notification to {email}")

    return {"status": "sent", "email": email}


@celery_app.task(
    name="app.tasks.notification_tasks.send_status_change_notification_task",
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=(NotificationDeliveryError,),
    retry_backoff=True,
    retry_backoff_max=600,
    retry_jitter=True
)
def send_status_change_notification_task(
    self,
    application_id: str,
    user_id: str,
    title: str,
    company: str,
    new_status: str
):
    """
    Worker entry point; runs outside the API process with its own session.
    """
    from app.services.email_service import email_service

    logger.info(
        f"[Task {self.request.id}] Notifying user {user_id} of application {application_id} -> {new_status} "
        f"(attempt {self.request.retries + 1})"
    )

    db = SessionLocal()
    try:
        return deliver_status_change_notification(
            SqlRecordStore(db),
            email_service,
            application_id=application_id,
            user_id=user_id,
            title=title,
            company=company,
            new_status=new_status,
        )
    finally:
        db.close()


MESSAGE_PREVIEW_LENGTH = 50


def message_preview(text: str) -> str:
    if len(text) <= MESSAGE_PREVIEW_LENGTH:
        return text
    return text[:MESSAGE_PREVIEW_LENGTH] + "..."


def deliver_new_message_notification(
    store: RecordStore,
    sender,
    message_id: str,
    application_id: str,
    recipient_id: str,
    sender_id: str,
    text: str
) -> Dict[str, Any]:
    """
    E-mail the other side of a conversation about a new message.

    Honours the recipient's enabled and newMessages settings.

    Raises:
        NotificationDeliveryError: the sender reported a failure
    """
    recipient = user_crud.get_by_id(store, recipient_id)
    if recipient is None:
        logger.warning(f"No profile for user {recipient_id}; skipping notification for message {message_id}")
        return {"status": "skipped", "reason": "no_profile"}

    preferences = NotificationSettings.model_validate(recipient.get("notificationSettings") or {})
    if not preferences.enabled or not preferences.new_messages:
        logger.info(f"User {recipient_id} opted out of message notifications (message {message_id})")
        return {"status": "skipped", "reason": "opted_out"}

    email = recipient.get("email")
    if not email:
        logger.warning(f"User {recipient_id} has no e-mail address; skipping notification")
        return {"status": "skipped", "reason": "no_email"}

    author = user_crud.get_by_id(store, sender_id) or {}
    application = application_crud.get_by_id(store, application_id) or {}

    sent = sender.send_new_message_email(
        to_email=email,
        sender_name=author.get("name") or "Your contact",
        preview=message_preview(text),
        title=application.get("title", ""),
        company=application.get("company", ""),
        user_name=recipient.get("name")
    )
    if not sent:
        raise NotificationDeliveryError(f"Failed to send message notification to {email}")

    return {"status": "sent", "email": email}


@celery_app.task(
    name="app.tasks.notification_tasks.send_new_message_notification_task",
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=(NotificationDeliveryError,),
    retry_backoff=True,
    retry_backoff_max=600,
    retry_jitter=True
)
def send_new_message_notification_task(
    self,
    message_id: str,
    application_id: str,
    recipient_id: str,
    sender_id: str,
    text: str
):
    from app.services.email_service import email_service

    logger.info(
        f"[Task {self.request.id}] Notifying user {recipient_id} of message {message_id} "
        f"(attempt {self.request.retries + 1})"
    )

    db = SessionLocal()
    try:
        return deliver_new_message_notification(
            SqlRecordStore(db),
            email_service,
            message_id=message_id,
            application_id=application_id,
            recipient_id=recipient_id,
            sender_id=sender_id,
            text=text,
        )
    finally:
        db.close()
