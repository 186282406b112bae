"""
FastAPI dependencies for authentication, authorization and storage.

These dependencies are used to protect endpoints and hand the actor and the
record store to the service layer explicitly.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.security import actor_from_token
from app.core.store import InMemoryRecordStore, RecordStore, SqlRecordStore
from app.models.user import Actor

# HTTP Bearer token scheme (Authorization: Bearer <token>)
security = HTTPBearer()

# Process-wide store used when RECORD_STORE_BACKEND=memory
_memory_store = InMemoryRecordStore()


async def get_current_actor(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Actor:
    """
    Extract and validate the current actor from the bearer JWT.

    Raises:
        HTTPException 401: If the token is invalid or lacks sub/role claims
    """
    try:
        return actor_from_token(credentials.credentials)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_admin_actor(
    actor: Actor = Depends(get_current_actor),
) -> Actor:
    """
    Require an ADMIN actor.

    Raises:
        HTTPException 403: If the actor is not an admin
    """
    if not actor.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return actor


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    """Record store for the current request, chosen by RECORD_STORE_BACKEND."""
    if settings.RECORD_STORE_BACKEND == "memory":
        return _memory_store
    return SqlRecordStore(db)
