from fastapi import APIRouter, Depends

from app.core.deps import get_current_actor, get_store
from app.core.store import RecordStore
from app.models.user import Actor
from app.schemas.message import Message
from app.services import messages as message_service

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.post("/{message_id}/read", response_model=Message)
def mark_message_read(
    message_id: str,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    """Mark a received message as read."""
    return message_service.mark_message_read(store, message_id, actor)
