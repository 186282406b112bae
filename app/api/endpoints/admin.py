"""
Admin API endpoints for platform oversight.

Every route requires an ADMIN token (get_admin_actor).
"""

import logging
from typing import List
from fastapi import APIRouter, Depends

from app.core.deps import get_admin_actor, get_store
from app.core.store import RecordStore
from app.crud import application as application_crud
from app.crud import job as job_crud
from app.crud import user as user_crud
from app.models.user import Actor
from app.schemas.application import JobApplication
from app.schemas.common import MessageResponse
from app.schemas.job import Job
from app.schemas.stats import AdminStats
from app.schemas.user import RoleUpdateRequest, UserProfile
from app.services import jobs as job_service
from app.services import stats as stats_service
from app.services import users as user_service

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = logging.getLogger(__name__)


@router.get("/users", response_model=List[UserProfile])
def list_all_users(
    store: RecordStore = Depends(get_store),
    admin: Actor = Depends(get_admin_actor)
):
    """List all users, newest first."""
    return user_service.list_users(store, admin)


@router.patch("/users/{user_id}/role", response_model=UserProfile)
def update_user_role(
    user_id: str,
    request: RoleUpdateRequest,
    store: RecordStore = Depends(get_store),
    admin: Actor = Depends(get_admin_actor)
):
    return user_service.update_user_role(store, user_id, request.role, admin)


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    store: RecordStore = Depends(get_store),
    admin: Actor = Depends(get_admin_actor)
):
    """
    Delete a user profile.

    Their applications, jobs and history are kept for the audit trail.
    """
    user_service.delete_user(store, user_id, admin)
    return MessageResponse(message=f"User {user_id} deleted successfully")


@router.get("/jobs", response_model=List[Job])
def list_all_jobs(
    store: RecordStore = Depends(get_store),
    admin: Actor = Depends(get_admin_actor)
):
    """List every job, archived included."""
    return job_service.list_all_jobs(store)


@router.get("/applications", response_model=List[JobApplication])
def list_all_applications(
    store: RecordStore = Depends(get_store),
    admin: Actor = Depends(get_admin_actor)
):
    return [JobApplication.model_validate(app) for app in application_crud.list_all(store)]


@router.get("/stats", response_model=AdminStats)
def get_platform_stats(
    store: RecordStore = Depends(get_store),
    admin: Actor = Depends(get_admin_actor)
):
    """Platform totals: users by role, jobs, applications."""
    return stats_service.admin_stats(
        user_crud.list_all(store),
        job_crud.list_all(store),
        application_crud.list_all(store),
    )
