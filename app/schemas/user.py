"""
Pydantic schemas for user profiles.
"""

from pydantic import EmailStr, Field
from typing import Optional
from app.models.user import UserRole
from app.schemas.common import CamelModel


class NotificationSettings(CamelModel):
    """Per-user notification preferences (checked before a notification is sent)."""
    enabled: bool = True
    status_changes: bool = True
    reminders: bool = True
    new_messages: bool = True
    reminder_days: int = Field(7, ge=1, le=90)


class UserProfile(CamelModel):
    """User profile response."""
    id: str
    name: str
    email: str
    role: UserRole
    phone: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    notification_settings: Optional[NotificationSettings] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    version: int = 1


class ProfileCreateRequest(CamelModel):
    """Profile created right after signup; id and role come from the identity token."""
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None

    class Config:
        extra = "forbid"


class UserUpdateRequest(CamelModel):
    """Self-service profile edits; role changes go through the admin endpoint."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    notification_settings: Optional[NotificationSettings] = None

    class Config:
        extra = "forbid"


class RoleUpdateRequest(CamelModel):
    role: UserRole
