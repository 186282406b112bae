from fastapi import APIRouter, Depends

from app.core.deps import get_current_actor, get_store
from app.core.store import RecordStore
from app.models.user import Actor
from app.schemas.stats import AggregatedStats
from app.services import stats as stats_service

router = APIRouter(prefix="/stats", tags=["Stats"])


@router.get("/", response_model=AggregatedStats)
def get_stats(
    actor: Actor = Depends(get_current_actor),
    store: RecordStore = Depends(get_store)
):
    """
    Dashboard statistics for the caller.

    Candidates get their own application stats. Recruiters additionally get
    the received-applications breakdown and advanced stats (response rate,
    processing time, top jobs). Admins get platform totals.
    """
    return stats_service.get_stats(store, actor)
