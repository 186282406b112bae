"""
History ledger: append-only log of application status transitions.

Only two operations exist on purpose: record a new entry and read an
application's entries. Entries are never updated or deleted.
"""

from typing import Any, Dict, List, Optional
from app.core.store import APPLICATION_HISTORY, RecordStore, now_iso
from app.models.application import ApplicationStatus


def record(
    store: RecordStore,
    application_id: str,
    old_status: Optional[ApplicationStatus],
    new_status: ApplicationStatus,
    changed_by: str,
    notes: Optional[str] = None
) -> Dict[str, Any]:
    """
    Append one history entry.

    Args:
        store: Record store
        application_id: Application whose status changed
        old_status: Status before the change (None for the creation entry)
        new_status: Status after the change
        changed_by: Actor id that committed the change
        notes: Optional free-text note

    Returns:
        The stored entry
    """
    entry_id = store.new_id()
    entry = {
        "id": entry_id,
        "applicationId": application_id,
        # Orders entries that share a changedAt timestamp
        "sequence": len(store.find(APPLICATION_HISTORY, {"applicationId": application_id})) + 1,
        "oldStatus": old_status.value if old_status else None,
        "newStatus": new_status.value,
        "changedBy": changed_by,
        "changedAt": now_iso(),
        "notes": notes,
    }
    return store.put(APPLICATION_HISTORY, entry_id, entry)


def list_for_application(store: RecordStore, application_id: str) -> List[Dict[str, Any]]:
    """All entries for an application, newest first."""
    entries = store.find(APPLICATION_HISTORY, {"applicationId": application_id})
    return sorted(entries, key=lambda e: (e.get("changedAt") or "", e.get("sequence") or 0), reverse=True)
