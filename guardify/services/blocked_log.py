# guardify/services/blocked_log.py
from __future__ import annotations
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List

from sqlalchemy import select, update, desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import BlockedAttempt, GuardCounter
from ..utils.logging import logger

VPN_BLOCKED_COUNTER = "vpn_blocked_count"
PERIOD_DAYS = {"week": 7, "month": 30}

def _utcnow() -> datetime:
    # stored naive, always UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)

def record_blocked_attempt(
    db: Session,
    kind: str,
    phone: str | None = None,
    name: str | None = None,
    ip: str | None = None,
    user_agent: str | None = None,
    extra: Any = None,
    when: datetime | None = None,
) -> BlockedAttempt:
    row = BlockedAttempt(
        kind=kind,
        phone=phone or None,
        name=(name or "").strip() or None,
        ip=ip,
        user_agent=(user_agent or "")[:512] or None,
        extra=extra,
        created_at=when or _utcnow(),
    )
    db.add(row)
    db.commit()
    logger.info("Blocked %s attempt recorded (ip=%s)", kind, ip)
    return row

def get_counter(db: Session, name: str) -> int:
    value = db.execute(select(GuardCounter.value).where(GuardCounter.name == name)).scalar_one_or_none()
    return int(value or 0)

def _bump(db: Session, name: str, by: int) -> int:
    stmt = update(GuardCounter).where(GuardCounter.name == name).values(value=GuardCounter.value + by)
    return db.execute(stmt).rowcount

def increment_counter(db: Session, name: str, by: int = 1) -> int:
    # single UPDATE so concurrent blocks never lose an increment
    if _bump(db, name, by):
        db.commit()
        return get_counter(db, name)
    db.add(GuardCounter(name=name, value=by))
    try:
        db.commit()
    except IntegrityError:
        # another worker created the row first
        db.rollback()
        _bump(db, name, by)
        db.commit()
    return get_counter(db, name)

def get_blocked_stats(db: Session, period: str = "week", today: date | None = None) -> Dict[str, Any]:
    """
    Blocked attempts over the last 7 ("week") or 30 ("month") days,
    today included:
      {"total": int, "by_type": {kind: n}, "by_day": {"YYYY-MM-DD": n}}
    Every day of the window is present in by_day.
    """
    days = PERIOD_DAYS.get(period, PERIOD_DAYS["week"])
    today = today or _utcnow().date()
    first = today - timedelta(days=days - 1)
    start = datetime.combine(first, datetime.min.time())
    end = datetime.combine(today + timedelta(days=1), datetime.min.time())

    rows = db.execute(
        select(BlockedAttempt.kind, BlockedAttempt.created_at)
        .where(BlockedAttempt.created_at >= start, BlockedAttempt.created_at < end)
    ).all()

    by_day = {(first + timedelta(days=i)).isoformat(): 0 for i in range(days)}
    by_type: Dict[str, int] = {}
    for kind, created_at in rows:
        key = created_at.date().isoformat()
        if key in by_day:
            by_day[key] += 1
        by_type[kind] = by_type.get(kind, 0) + 1

    return {"total": len(rows), "by_type": by_type, "by_day": by_day}

def get_recent_blocked(db: Session, limit: int = 20) -> List[BlockedAttempt]:
    stmt = select(BlockedAttempt).order_by(desc(BlockedAttempt.created_at), desc(BlockedAttempt.id)).limit(limit)
    return list(db.execute(stmt).scalars().all())

class BlockedAttemptRecorder:
    """on_order_blocked listener persisting the attempt (and the VPN counter)."""

    def __init__(self, db: Session, user_agent: str | None = None):
        self.db = db
        self.user_agent = user_agent

    def on_order_blocked(self, kind: str, submission, client_ip: str) -> None:
        try:
            record_blocked_attempt(
                self.db,
                kind,
                phone=submission.billing_phone,
                name=submission.full_name,
                ip=client_ip,
                user_agent=self.user_agent,
            )
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to record blocked %s attempt (ip=%s)", kind, client_ip)
        if kind == "vpn":
            count = increment_counter(self.db, VPN_BLOCKED_COUNTER)
            logger.info("VPN blocked count now %s", count)
