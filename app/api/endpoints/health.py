"""
Health check endpoints.

Provides liveness and a detailed status for the record store and the
notification broker.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict
from fastapi import APIRouter, Depends, status
from redis import Redis
from redis.exceptions import RedisError

from app.core.config import settings
from app.core.deps import get_store
from app.core.errors import StoreError
from app.core.store import USERS, RecordStore

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """
    Basic health check endpoint.

    Returns 200 OK if the service is running.
    """
    return {
        "status": "healthy",
        "timestamp": _timestamp()
    }


@router.get("/health/detailed", status_code=status.HTTP_200_OK)
def detailed_health_check(store: RecordStore = Depends(get_store)) -> Dict[str, Any]:
    """
    Detailed health check with dependency status.

    Checks:
    - Record store reachability
    - Redis broker (only when notifications are enabled)
    """
    health_status = {
        "status": "healthy",
        "timestamp": _timestamp(),
        "checks": {}
    }

    try:
        store.get(USERS, "__health__")
        health_status["checks"]["store"] = {
            "status": "healthy",
            "backend": settings.RECORD_STORE_BACKEND
        }
    except StoreError as e:
        logger.error(f"Record store health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["checks"]["store"] = {
            "status": "unhealthy",
            "message": f"Store error: {e.message}"
        }

    if settings.NOTIFICATIONS_ENABLED:
        try:
            Redis.from_url(settings.REDIS_URL, socket_connect_timeout=2).ping()
            health_status["checks"]["broker"] = {"status": "healthy"}
        except RedisError as e:
            logger.error(f"Broker health check failed: {e}")
            health_status["status"] = "degraded"
            health_status["checks"]["broker"] = {
                "status": "unhealthy",
                "message": f"Redis error: {str(e)}"
            }

    return health_status
