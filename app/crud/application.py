"""
CRUD operations for job applications.

Thin repository over the applications collection. Permission and lifecycle
rules live in app.services.lifecycle; nothing here checks who is asking.
"""

from typing import Any, Dict, List, Optional
from app.core.store import APPLICATIONS, RecordStore, now_iso
from app.models.application import parse_status
from app.schemas.application import ApplicationFilters


def _newest_first(records: List[Dict[str, Any]], field: str = "applicationDate") -> List[Dict[str, Any]]:
    return sorted(records, key=lambda r: r.get(field) or "", reverse=True)


def create(store: RecordStore, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Insert a new application record.

    Args:
        store: Record store
        data: Application fields (camelCase keys), without id or timestamps

    Returns:
        Stored record including generated id, timestamps and version
    """
    now = now_iso()
    record_id = store.new_id()
    record = {
        **data,
        "id": record_id,
        "createdAt": now,
        "updatedAt": now,
    }
    return store.put(APPLICATIONS, record_id, record)


def get_by_id(store: RecordStore, application_id: str) -> Optional[Dict[str, Any]]:
    """Retrieve an application by its ID, or None if absent."""
    return store.get(APPLICATIONS, application_id)


def list_for_candidate(store: RecordStore, user_id: str) -> List[Dict[str, Any]]:
    """All applications owned by a candidate, newest applicationDate first."""
    return _newest_first(store.find(APPLICATIONS, {"userId": user_id}))


def list_for_recruiter(store: RecordStore, recruiter_id: str) -> List[Dict[str, Any]]:
    """All applications received by a recruiter, newest applicationDate first."""
    return _newest_first(store.find(APPLICATIONS, {"recruiterId": recruiter_id}))


def list_for_job(store: RecordStore, job_id: str) -> List[Dict[str, Any]]:
    return store.find(APPLICATIONS, {"jobId": job_id})


def list_all(store: RecordStore) -> List[Dict[str, Any]]:
    """Every application on the platform (admin), newest createdAt first."""
    return _newest_first(store.find(APPLICATIONS), field="createdAt")


def has_user_applied_to_job(store: RecordStore, user_id: str, job_id: str) -> bool:
    return bool(store.find(APPLICATIONS, {"userId": user_id, "jobId": job_id}))


def update(
    store: RecordStore,
    application_id: str,
    fields: Dict[str, Any],
    expected_version: Optional[int] = None
) -> Dict[str, Any]:
    """
    Patch an application and stamp updatedAt.

    Args:
        store: Record store
        application_id: Application to patch
        fields: camelCase fields to merge (None values are dropped)
        expected_version: Version read by the caller, for a conditional write

    Returns:
        The updated record
    """
    return store.patch(
        APPLICATIONS,
        application_id,
        {**fields, "updatedAt": now_iso()},
        expected_version=expected_version
    )


def delete(store: RecordStore, application_id: str) -> bool:
    """Delete an application by ID. Returns False if not found."""
    return store.delete(APPLICATIONS, application_id)


def filter_applications(
    applications: List[Dict[str, Any]],
    filters: ApplicationFilters
) -> List[Dict[str, Any]]:
    """
    Apply list filters in memory.

    searchQuery is a case-insensitive substring match on title or company;
    startDate/endDate bound applicationDate inclusively.
    """
    query = filters.search_query.lower() if filters.search_query else None

    def matches(app: Dict[str, Any]) -> bool:
        if query and query not in (app.get("title") or "").lower() \
                and query not in (app.get("company") or "").lower():
            return False
        if filters.status and parse_status(app.get("status")) != filters.status:
            return False
        if filters.contract_type and app.get("contractType") != filters.contract_type.value \
                and app.get("contractType") != filters.contract_type.label:
            return False
        application_date = app.get("applicationDate") or ""
        if filters.start_date and application_date < filters.start_date:
            return False
        if filters.end_date and application_date[:len(filters.end_date)] > filters.end_date:
            return False
        return True

    return [app for app in applications if matches(app)]
