"""
Pydantic schemas for job applications and their status history.
"""

from typing import List, Optional
from pydantic import Field, computed_field, field_validator
from app.models.application import ApplicationStatus, ContractType
from app.schemas.common import CamelModel


class JobApplication(CamelModel):
    """One candidate's pursuit of one role, as stored in the applications collection."""
    id: str
    title: str
    company: str
    location: str = ""
    contract_type: ContractType = ContractType.OTHER
    job_url: Optional[str] = None
    notes: Optional[str] = None
    documents: Optional[List[str]] = None
    cv_url: Optional[str] = None
    cv_file_name: Optional[str] = None

    user_id: str
    recruiter_id: Optional[str] = None
    job_id: Optional[str] = None

    status: ApplicationStatus
    application_date: str
    last_follow_up: Optional[str] = None
    follow_up_count: int = 0
    created_at: str
    updated_at: str
    version: int = 1

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v):
        """Older records stored the display label instead of the code."""
        return ApplicationStatus.parse(v)

    @field_validator("contract_type", mode="before")
    @classmethod
    def parse_contract_type(cls, v):
        return ContractType.parse(v)

    @computed_field(alias="statusLabel")
    @property
    def status_label(self) -> str:
        return self.status.label


class ApplicationCreateRequest(CamelModel):
    """Schema for creating a new application (candidate side)"""
    title: str = Field(..., min_length=1, max_length=200)
    company: str = Field(..., min_length=1, max_length=200)
    location: str = ""
    contract_type: ContractType = ContractType.OTHER
    job_url: Optional[str] = None
    notes: Optional[str] = None
    documents: Optional[List[str]] = None
    cv_url: Optional[str] = None
    cv_file_name: Optional[str] = None
    job_id: Optional[str] = None
    status: ApplicationStatus = ApplicationStatus.TO_APPLY
    application_date: Optional[str] = Field(None, description="ISO date; defaults to today")

    class Config:
        extra = "forbid"


class ApplicationUpdateRequest(CamelModel):
    """
    Proposed field updates for an application.

    Relational and bookkeeping fields (userId, recruiterId, jobId, timestamps,
    version) are deliberately absent: they cannot be edited.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    company: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = None
    contract_type: Optional[ContractType] = None
    job_url: Optional[str] = None
    notes: Optional[str] = None
    documents: Optional[List[str]] = None
    cv_url: Optional[str] = None
    cv_file_name: Optional[str] = None
    status: Optional[ApplicationStatus] = None
    application_date: Optional[str] = None

    class Config:
        extra = "forbid"

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v):
        return ApplicationStatus.parse(v) if v is not None else v


class ApplicationHistoryEntry(CamelModel):
    """Append-only audit entry for one committed status transition."""
    id: str
    application_id: str
    old_status: Optional[ApplicationStatus] = None
    new_status: ApplicationStatus
    changed_by: str
    changed_at: str
    notes: Optional[str] = None
    sequence: Optional[int] = None

    @field_validator("old_status", "new_status", mode="before")
    @classmethod
    def parse_status(cls, v):
        return ApplicationStatus.parse(v) if v is not None else v


class ApplicationFilters(CamelModel):
    """Optional list filters; date bounds are inclusive on applicationDate."""
    status: Optional[ApplicationStatus] = None
    contract_type: Optional[ContractType] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    search_query: Optional[str] = None


class HasAppliedResponse(CamelModel):
    job_id: str
    applied: bool
