import logging
from fastapi import APIRouter, Depends, status

from app.core.deps import get_current_actor, get_store
from app.core.store import RecordStore
from app.models.user import Actor
from app.schemas.user import ProfileCreateRequest, UserProfile, UserUpdateRequest
from app.services import users as user_service

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.post("/me", status_code=status.HTTP_201_CREATED, response_model=UserProfile)
def create_my_profile(
    request: ProfileCreateRequest,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    """
    Create the caller's profile after signing up with the identity provider.

    The role is taken from the token, never from the request body.
    """
    return user_service.create_profile(store, request, actor)


@router.get("/me", response_model=UserProfile)
def get_my_profile(
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    return user_service.get_user(store, actor.id)


@router.patch("/{user_id}", response_model=UserProfile)
def update_user(
    user_id: str,
    request: UserUpdateRequest,
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    """Update a profile; allowed to the user themself or an admin."""
    return user_service.update_user(store, user_id, actor, request)
