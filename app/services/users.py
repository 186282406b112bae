"""
User profiles.

A profile is created by the user right after signup with the identity
provider. Users edit their own profile; admins manage roles and deletions.
"""

import logging
from typing import List, Union
from app.core.errors import NotFoundError, PermissionDeniedError
from app.core.store import RecordStore
from app.crud import user as user_crud
from app.models.user import Actor, UserRole
from app.schemas.user import (
    NotificationSettings,
    ProfileCreateRequest,
    UserProfile,
    UserUpdateRequest,
)

logger = logging.getLogger(__name__)


def _require_admin(actor: Actor) -> None:
    if not actor.is_admin:
        logger.warning(f"Non-admin actor {actor.id} attempted an admin-only user operation")
        raise PermissionDeniedError("Admin access required")


def create_profile(store: RecordStore, data: Union[ProfileCreateRequest, dict], actor: Actor) -> UserProfile:
    """Create the acting user's profile; the role comes from the identity token."""
    if not isinstance(data, ProfileCreateRequest):
        data = ProfileCreateRequest.model_validate(data)

    record = data.model_dump(by_alias=True, exclude_none=True, mode="json")
    record["role"] = actor.role.value
    record["notificationSettings"] = NotificationSettings().model_dump(by_alias=True)

    user = user_crud.create(store, actor.id, record)
    logger.info(f"Created {actor.role.value} profile for user {actor.id}")
    return UserProfile.model_validate(user)


def get_user(store: RecordStore, user_id: str) -> UserProfile:
    user = user_crud.get_by_id(store, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return UserProfile.model_validate(user)


def update_user(
    store: RecordStore,
    user_id: str,
    actor: Actor,
    updates: Union[UserUpdateRequest, dict]
) -> UserProfile:
    """
    Update a profile.

    Raises:
        NotFoundError: user does not exist
        PermissionDeniedError: actor is neither the user nor an admin
    """
    if actor.id != user_id and not actor.is_admin:
        logger.warning(f"Actor {actor.id} denied update of user {user_id}")
        raise PermissionDeniedError("You can only update your own profile")

    if user_crud.get_by_id(store, user_id) is None:
        raise NotFoundError(f"User {user_id} not found")

    if not isinstance(updates, UserUpdateRequest):
        updates = UserUpdateRequest.model_validate(updates)

    fields = updates.model_dump(by_alias=True, exclude_none=True, mode="json")
    return UserProfile.model_validate(user_crud.update(store, user_id, fields))


def update_user_role(store: RecordStore, user_id: str, role: UserRole, actor: Actor) -> UserProfile:
    """Admin-only role change."""
    _require_admin(actor)

    if user_crud.get_by_id(store, user_id) is None:
        raise NotFoundError(f"User {user_id} not found")

    user = user_crud.update(store, user_id, {"role": role.value})
    logger.info(f"Admin {actor.id} changed role of user {user_id} to {role.value}")
    return UserProfile.model_validate(user)


def delete_user(store: RecordStore, user_id: str, actor: Actor) -> bool:
    """Admin-only deletion of a profile record. Applications and jobs are kept."""
    _require_admin(actor)

    deleted = user_crud.delete(store, user_id)
    if not deleted:
        raise NotFoundError(f"User {user_id} not found")

    logger.info(f"Admin {actor.id} deleted user {user_id}")
    return True


def list_users(store: RecordStore, actor: Actor) -> List[UserProfile]:
    _require_admin(actor)
    return [UserProfile.model_validate(user) for user in user_crud.list_all(store)]
