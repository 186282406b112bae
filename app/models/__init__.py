"""
Database models and domain codes package.
"""

from app.models.record import StoredRecord
from app.models.application import ApplicationStatus, ContractType, STATUS_LABELS
from app.models.job import JobType
from app.models.user import Actor, UserRole

__all__ = [
    "StoredRecord",
    "ApplicationStatus",
    "ContractType",
    "STATUS_LABELS",
    "JobType",
    "Actor",
    "UserRole",
]
