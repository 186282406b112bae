"""
Application status and contract type codes.

Codes are what the lifecycle rules and the store operate on. Display labels
are kept separately; older records written by the mobile client stored the
label itself, so parsing accepts either form.
"""

import enum
from typing import Dict, Optional


class ApplicationStatus(str, enum.Enum):
    """
    Application status lifecycle:

    TO_APPLY -> SENT -> INTERVIEW -> ACCEPTED
        |                   |
        +-----> INTERVIEW   +-----> REFUSED

    ACCEPTED and REFUSED are terminal.
    """
    TO_APPLY = "TO_APPLY"
    SENT = "SENT"
    INTERVIEW = "INTERVIEW"
    ACCEPTED = "ACCEPTED"
    REFUSED = "REFUSED"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @classmethod
    def parse(cls, value) -> "ApplicationStatus":
        """Accept a status code, a legacy display label, or an enum member."""
        if isinstance(value, cls):
            return value
        status = _LEGACY_LABELS.get(value)
        if status is not None:
            return status
        return cls(value)


STATUS_LABELS: Dict[ApplicationStatus, str] = {
    ApplicationStatus.TO_APPLY: "À postuler",
    ApplicationStatus.SENT: "Envoyée",
    ApplicationStatus.INTERVIEW: "Entretien",
    ApplicationStatus.ACCEPTED: "Acceptée",
    ApplicationStatus.REFUSED: "Refus",
}

_LEGACY_LABELS = {label: status for status, label in STATUS_LABELS.items()}

TERMINAL_STATUSES = frozenset({ApplicationStatus.ACCEPTED, ApplicationStatus.REFUSED})

# Statuses in which the candidate can no longer delete or duplicate the application
DECIDED_STATUSES = frozenset({
    ApplicationStatus.INTERVIEW,
    ApplicationStatus.ACCEPTED,
    ApplicationStatus.REFUSED,
})

# Statuses still waiting on the recruiter
PENDING_STATUSES = frozenset({ApplicationStatus.TO_APPLY, ApplicationStatus.SENT})


class ContractType(str, enum.Enum):
    CDI = "CDI"
    CDD = "CDD"
    STAGE = "STAGE"
    ALTERNANCE = "ALTERNANCE"
    FREELANCE = "FREELANCE"
    INTERIM = "INTERIM"
    OTHER = "OTHER"

    @property
    def label(self) -> str:
        return CONTRACT_TYPE_LABELS[self]

    @classmethod
    def parse(cls, value) -> "ContractType":
        if isinstance(value, cls):
            return value
        contract_type = _LEGACY_CONTRACT_LABELS.get(value)
        if contract_type is not None:
            return contract_type
        return cls(value)


CONTRACT_TYPE_LABELS: Dict[ContractType, str] = {
    ContractType.CDI: "CDI",
    ContractType.CDD: "CDD",
    ContractType.STAGE: "Stage",
    ContractType.ALTERNANCE: "Alternance",
    ContractType.FREELANCE: "Freelance",
    ContractType.INTERIM: "Intérim",
    ContractType.OTHER: "Autre",
}

_LEGACY_CONTRACT_LABELS = {label: ct for ct, label in CONTRACT_TYPE_LABELS.items()}


def parse_status(value) -> Optional[ApplicationStatus]:
    """Parse a stored status, returning None for missing values."""
    if value is None:
        return None
    return ApplicationStatus.parse(value)
