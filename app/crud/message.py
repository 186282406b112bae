"""
CRUD operations for application messages.

Messages are only ever created and flagged as read. Who may send or read them
is decided in app.services.messages.
"""

from typing import Any, Dict, List, Optional
from app.core.store import MESSAGES, RecordStore, now_iso
from app.models.user import UserRole


def create(
    store: RecordStore,
    application_id: str,
    sender_id: str,
    sender_role: UserRole,
    text: str
) -> Dict[str, Any]:
    """
    Store a new unread message.

    Args:
        store: Record store
        application_id: Application the conversation belongs to
        sender_id: Actor id of the sender
        sender_role: CANDIDATE or RECRUITER side of the conversation
        text: Message body

    Returns:
        The stored message
    """
    message_id = store.new_id()
    message = {
        "id": message_id,
        "applicationId": application_id,
        "senderId": sender_id,
        "senderRole": sender_role.value,
        "message": text,
        "createdAt": now_iso(),
        "read": False,
        # Orders messages that share a createdAt timestamp
        "sequence": len(store.find(MESSAGES, {"applicationId": application_id})) + 1,
    }
    return store.put(MESSAGES, message_id, message)


def get_by_id(store: RecordStore, message_id: str) -> Optional[Dict[str, Any]]:
    return store.get(MESSAGES, message_id)


def list_for_application(store: RecordStore, application_id: str) -> List[Dict[str, Any]]:
    """The conversation on an application, oldest first."""
    messages = store.find(MESSAGES, {"applicationId": application_id})
    return sorted(messages, key=lambda m: (m.get("createdAt") or "", m.get("sequence") or 0))


def mark_read(store: RecordStore, message_id: str) -> Dict[str, Any]:
    return store.patch(MESSAGES, message_id, {"read": True})
