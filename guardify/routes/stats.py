from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import BlockedStats, BlockedAttemptOut
from ..security import require_internal_auth
from ..services.blocked_log import (
    VPN_BLOCKED_COUNTER, get_blocked_stats, get_counter, get_recent_blocked,
)

router = APIRouter(prefix="/v1/stats", tags=["stats"], dependencies=[Depends(require_internal_auth)])

@router.get("/blocked", response_model=BlockedStats)
def blocked_stats(period: Literal["week", "month"] = Query("week"), db: Session = Depends(get_db)):
    return get_blocked_stats(db, period)

@router.get("/blocked/recent", response_model=list[BlockedAttemptOut])
def recent_blocked(limit: int = Query(20, ge=1, le=500), db: Session = Depends(get_db)):
    return get_recent_blocked(db, limit)

@router.get("/vpn-blocked-count")
def vpn_blocked_count(db: Session = Depends(get_db)):
    return {"count": get_counter(db, VPN_BLOCKED_COUNTER)}
