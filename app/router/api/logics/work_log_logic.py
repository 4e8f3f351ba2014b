from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from app.exceptions import NotFound, ValidationError
from app.log import get_logger
from app.model.work_logs import WorkLog
from app.router.dependencies import AuthContext
from app.schema.gamification_schema import WorkLogCreate, WorkLogUpdate

log = get_logger(__name__)


@dataclass
class WorkLogFilters:
    user_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


def create_work_log(db: Session, ctx: AuthContext, request: WorkLogCreate) -> WorkLog:
    work_log = WorkLog(school_id=ctx.school_id, user_id=ctx.user_id, **request.model_dump())
    db.add(work_log)
    db.commit()
    db.refresh(work_log)
    log.info("User %s logged work for %s", ctx.user_id, work_log.log_date)
    return work_log


def get_work_logs(db: Session, school_id: str, filters: Optional[WorkLogFilters] = None) -> List[WorkLog]:
    """Work logs of one school, newest log date first; date bounds are inclusive."""
    filters = filters or WorkLogFilters()
    query = db.query(WorkLog).filter(WorkLog.school_id == school_id)
    if filters.user_id:
        query = query.filter(WorkLog.user_id == filters.user_id)
    if filters.start_date:
        query = query.filter(WorkLog.log_date >= filters.start_date)
    if filters.end_date:
        query = query.filter(WorkLog.log_date <= filters.end_date)
    return query.order_by(WorkLog.log_date.desc(), WorkLog.id).all()


def get_work_logs_by_user(db: Session, user_id: str, school_id: str) -> List[WorkLog]:
    return get_work_logs(db, school_id, WorkLogFilters(user_id=user_id))


def _get_own_work_log(db: Session, ctx: AuthContext, work_log_id: str) -> WorkLog:
    work_log = db.query(WorkLog).filter(
        WorkLog.id == work_log_id,
        WorkLog.school_id == ctx.school_id,
        WorkLog.user_id == ctx.user_id,
    ).first()
    if not work_log:
        raise NotFound("Work log not found")
    return work_log


def update_work_log(db: Session, ctx: AuthContext, work_log_id: str, request: WorkLogUpdate) -> WorkLog:
    work_log = _get_own_work_log(db, ctx, work_log_id)
    updates = request.model_dump(exclude_unset=True)
    for key in ("log_date", "description"):
        if key in updates and updates[key] is None:
            raise ValidationError(f"{key} cannot be null")
    for key, value in updates.items():
        setattr(work_log, key, value)
    db.commit()
    db.refresh(work_log)
    return work_log


def delete_work_log(db: Session, ctx: AuthContext, work_log_id: str) -> None:
    work_log = _get_own_work_log(db, ctx, work_log_id)
    db.delete(work_log)
    db.commit()
