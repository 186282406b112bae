import enum
from typing import Dict


class JobType(str, enum.Enum):
    """Employment type of a job posting."""
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"
    INTERNSHIP = "INTERNSHIP"
    FREELANCE = "FREELANCE"
    TEMPORARY = "TEMPORARY"

    @property
    def label(self) -> str:
        return JOB_TYPE_LABELS[self]

    @classmethod
    def parse(cls, value) -> "JobType":
        if isinstance(value, cls):
            return value
        job_type = _LEGACY_JOB_TYPE_LABELS.get(value)
        if job_type is not None:
            return job_type
        return cls(value)


JOB_TYPE_LABELS: Dict[JobType, str] = {
    JobType.FULL_TIME: "Temps plein",
    JobType.PART_TIME: "Temps partiel",
    JobType.CONTRACT: "Contrat",
    JobType.INTERNSHIP: "Stage",
    JobType.FREELANCE: "Freelance",
    JobType.TEMPORARY: "Temporaire",
}

_LEGACY_JOB_TYPE_LABELS = {label: jt for jt, label in JOB_TYPE_LABELS.items()}
