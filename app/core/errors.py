"""
Domain error taxonomy.

Every failure the tracker surfaces to callers is one of these named errors.
The API layer maps them to HTTP responses in a single exception handler.
"""

from typing import Optional


class TrackerError(Exception):
    """Base exception carrying a stable error code and an HTTP status."""

    code = "TRACKER_ERROR"
    status_code = 500
    retryable = False

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "detail": self.message,
            "code": self.code,
            "retryable": self.retryable,
        }


class NotFoundError(TrackerError):
    """Referenced application, job or user does not exist."""
    code = "NOT_FOUND"
    status_code = 404


class PermissionDeniedError(TrackerError):
    """Actor has no relationship to the record."""
    code = "PERMISSION_DENIED"
    status_code = 403


class LockedError(TrackerError):
    """Candidate attempted to edit or delete an application that is no longer editable."""
    code = "LOCKED"
    status_code = 423


class InvalidTransitionError(TrackerError):
    """Requested status change is not allowed from the current status."""
    code = "INVALID_TRANSITION"
    status_code = 409


class AlreadyAppliedError(TrackerError):
    """Candidate already has an application for this job."""
    code = "ALREADY_APPLIED"
    status_code = 409


class HasApplicationsError(TrackerError):
    """Job deletion blocked because applications still reference it."""
    code = "HAS_APPLICATIONS"
    status_code = 409


class StoreError(TrackerError):
    """Underlying record store failure (transport, serialization)."""
    code = "STORE_ERROR"
    status_code = 503
    retryable = True


class VersionConflictError(StoreError):
    """Conditional write rejected: the record changed since it was read."""
    code = "VERSION_CONFLICT"
    status_code = 409
