from pydantic import Field, field_validator
from typing import List, Optional
from app.models.job import JobType
from app.schemas.common import CamelModel


class Job(CamelModel):
    """Schema for a recruiter's job posting"""
    id: str
    title: str
    company: str
    location: str = ""
    type: JobType = JobType.FULL_TIME
    description: Optional[str] = None
    salary: Optional[str] = None
    job_url: Optional[str] = None
    source: Optional[str] = None
    requirements: Optional[List[str]] = None
    benefits: Optional[List[str]] = None
    remote: Optional[bool] = None
    application_deadline: Optional[str] = None

    recruiter_id: str
    posted_date: str
    archived: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    version: int = 1

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, v):
        return JobType.parse(v)


class JobCreateRequest(CamelModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1, max_length=200)
    company: str = Field(..., min_length=1, max_length=200)
    location: str = ""
    type: JobType = JobType.FULL_TIME
    description: Optional[str] = None
    salary: Optional[str] = None
    job_url: Optional[str] = None
    source: Optional[str] = None
    requirements: Optional[List[str]] = None
    benefits: Optional[List[str]] = None
    remote: Optional[bool] = None
    application_deadline: Optional[str] = None
    posted_date: Optional[str] = Field(None, description="ISO date; defaults to now")

    class Config:
        extra = "forbid"


class JobUpdateRequest(CamelModel):
    """Editable job fields; ownership and archive state are changed elsewhere"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    company: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = None
    type: Optional[JobType] = None
    description: Optional[str] = None
    salary: Optional[str] = None
    job_url: Optional[str] = None
    source: Optional[str] = None
    requirements: Optional[List[str]] = None
    benefits: Optional[List[str]] = None
    remote: Optional[bool] = None
    application_deadline: Optional[str] = None
    posted_date: Optional[str] = None

    class Config:
        extra = "forbid"


class JobSearchParams(CamelModel):
    query: Optional[str] = None
    location: Optional[str] = None
    type: Optional[JobType] = None
    remote: Optional[bool] = None
