"""
CRUD operations for user profile records.
"""

from typing import Any, Dict, List, Optional
from app.core.store import USERS, RecordStore, now_iso


def create(store: RecordStore, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create (or overwrite) the profile for an identity-provider user id.

    Args:
        store: Record store
        user_id: Id issued by the identity provider
        data: Profile fields including role

    Returns:
        Stored profile
    """
    now = now_iso()
    return store.put(USERS, user_id, {**data, "id": user_id, "createdAt": now, "updatedAt": now})


def get_by_id(store: RecordStore, user_id: str) -> Optional[Dict[str, Any]]:
    return store.get(USERS, user_id)


def list_all(store: RecordStore) -> List[Dict[str, Any]]:
    """All users, newest createdAt first."""
    return sorted(store.find(USERS), key=lambda u: u.get("createdAt") or "", reverse=True)


def update(store: RecordStore, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    return store.patch(USERS, user_id, {**fields, "updatedAt": now_iso()})


def delete(store: RecordStore, user_id: str) -> bool:
    return store.delete(USERS, user_id)
