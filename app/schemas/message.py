"""
Pydantic schemas for messages exchanged on an application.
"""

from typing import Optional
from pydantic import Field
from app.models.user import UserRole
from app.schemas.common import CamelModel


class Message(CamelModel):
    """One message between the owning candidate and the owning recruiter."""
    id: str
    application_id: str
    sender_id: str
    sender_role: UserRole
    message: str
    created_at: str
    read: bool = False
    sequence: Optional[int] = None
    version: int = 1


class MessageCreateRequest(CamelModel):
    message: str = Field(..., min_length=1, max_length=2000)

    class Config:
        extra = "forbid"
