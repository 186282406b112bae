"""
Status-change and new-message notification trigger.

Notification is a side channel: it is fired after a status change or a new
message has been committed. Any failure is logged, never propagated to the
caller.
"""

import logging
from typing import Any, Dict, Optional
from app.core.config import settings
from app.models.application import ApplicationStatus

logger = logging.getLogger(__name__)


class NotificationTrigger:
    """Abstract base class for notification triggers"""

    def status_changed(
        self,
        application: Dict[str, Any],
        old_status: ApplicationStatus,
        new_status: ApplicationStatus,
        changed_by: str
    ) -> None:
        raise NotImplementedError

    def message_received(
        self,
        application: Dict[str, Any],
        message: Dict[str, Any],
        recipient_id: str
    ) -> None:
        raise NotImplementedError


class NullNotificationTrigger(NotificationTrigger):
    """Used when notifications are disabled"""

    def status_changed(self, application, old_status, new_status, changed_by) -> None:
        logger.debug(f"Notifications disabled; skipping status change for application {application.get('id')}")

    def message_received(self, application, message, recipient_id) -> None:
        logger.debug(f"Notifications disabled; skipping new message {message.get('id')}")


class CeleryNotificationTrigger(NotificationTrigger):
    """Queues the notification to a Celery worker via Redis"""

    def status_changed(self, application, old_status, new_status, changed_by) -> None:
        from app.core.celery_utils import queue_task_safely
        from app.tasks.notification_tasks import send_status_change_notification_task

        queued = queue_task_safely(
            send_status_change_notification_task,
            application_id=application["id"],
            user_id=application["userId"],
            title=application.get("title", ""),
            company=application.get("company", ""),
            new_status=new_status.value,
        )
        if not queued:
            logger.warning(f"Status change notification for application {application['id']} was not queued")

    def message_received(self, application, message, recipient_id) -> None:
        from app.core.celery_utils import queue_task_safely
        from app.tasks.notification_tasks import send_new_message_notification_task

        queued = queue_task_safely(
            send_new_message_notification_task,
            message_id=message["id"],
            application_id=application["id"],
            recipient_id=recipient_id,
            sender_id=message["senderId"],
            text=message["message"],
        )
        if not queued:
            logger.warning(f"New message notification for message {message['id']} was not queued")


def notify_status_change(
    trigger: Optional[NotificationTrigger],
    application: Dict[str, Any],
    old_status: ApplicationStatus,
    new_status: ApplicationStatus,
    changed_by: str
) -> None:
    """
    Fire-and-forget wrapper around a trigger.

    Errors are caught and logged here; the committed change stands regardless.
    """
    if trigger is None:
        return

    try:
        trigger.status_changed(application, old_status, new_status, changed_by)
    except Exception as e:
        logger.error(
            f"Status change notification failed for application {application.get('id')} "
            f"({old_status.value} -> {new_status.value}): {e}",
            exc_info=True
        )


def notify_new_message(
    trigger: Optional[NotificationTrigger],
    application: Dict[str, Any],
    message: Dict[str, Any],
    recipient_id: Optional[str]
) -> None:
    """Fire-and-forget new message notification; skipped when nobody can receive it."""
    if trigger is None or not recipient_id:
        return

    try:
        trigger.message_received(application, message, recipient_id)
    except Exception as e:
        logger.error(f"New message notification failed for message {message.get('id')}: {e}", exc_info=True)


def get_notification_trigger() -> NotificationTrigger:
    """Dependency returning the configured trigger"""
    if settings.NOTIFICATIONS_ENABLED:
        return CeleryNotificationTrigger()
    return NullNotificationTrigger()
