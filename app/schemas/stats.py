from typing import Dict, List, Optional
from app.models.application import ApplicationStatus
from app.models.user import UserRole
from app.schemas.common import CamelModel


class EvolutionPoint(CamelModel):
    """Applications counted in one YYYY-MM bucket"""
    date: str
    count: int


class ApplicationStats(CamelModel):
    total: int
    by_status: Dict[ApplicationStatus, int]
    interviews: int
    success_rate: float
    evolution: List[EvolutionPoint]


class RecruiterStats(CamelModel):
    total_jobs: int
    total_applications: int
    pending_applications: int
    interview_applications: int
    accepted_applications: int
    refused_applications: int


class TopJob(CamelModel):
    """Title and company are None when the job has since been deleted"""
    job_id: str
    title: Optional[str] = None
    company: Optional[str] = None
    count: int


class RecruiterAdvancedStats(CamelModel):
    response_rate: float
    average_processing_days: int
    top_jobs: List[TopJob]
    evolution: List[EvolutionPoint]


class AdminStats(CamelModel):
    total_users: int
    total_recruiters: int
    total_candidates: int
    total_jobs: int
    total_applications: int
    users_by_role: Dict[UserRole, int]


class AggregatedStats(CamelModel):
    """Dashboard payload, scoped to the requesting actor's role."""
    role: UserRole
    applications: ApplicationStats
    recruiter: Optional[RecruiterStats] = None
    advanced: Optional[RecruiterAdvancedStats] = None
    admin: Optional[AdminStats] = None
