"""
User roles and the authenticated actor.

Identity is owned by an external provider; the service only ever sees an
actor id and a role, passed explicitly into every mutation.
"""

import enum
from typing import NamedTuple


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    RECRUITER = "RECRUITER"
    CANDIDATE = "CANDIDATE"


class Actor(NamedTuple):
    """The identity (with role) attempting an operation."""
    id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
