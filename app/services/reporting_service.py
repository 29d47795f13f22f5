# app/services/reporting_service.py
"""
Read-only views over entry records: daily totals, pending/approved lists,
today's exits and the currently-inside count.

"Today" is [00:00, 24:00) of the given date in stored (UTC) time.
"Currently inside" is deliberately not date-scoped: someone who entered
yesterday and never exited is still inside today.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.models.user import ROLES, User
from app.models.visitor import Visitor
from app.services.exit_state import EntryState, state_filter
from app.services.record_repository import EntryRecordKind


def today_window(day: Optional[date] = None) -> tuple[datetime, datetime]:
    start = datetime.combine(day or datetime.utcnow().date(), time.min)
    return start, start + timedelta(days=1)


def _entered_on(model, day: Optional[date]):
    start, end = today_window(day)
    return (model.entry_time >= start) & (model.entry_time < end)


def daily_records(db: Session, kind: EntryRecordKind, day: Optional[date] = None):
    model = kind.model
    return db.query(model).filter(_entered_on(model, day)).order_by(model.entry_time.desc()).all()


def pending_exits(db: Session, kind: EntryRecordKind, faculty_id: Optional[int] = None,
                  department: Optional[str] = None):
    """Records waiting for approval. faculty/department scoping applies to visitors only."""
    model = kind.model
    q = db.query(model).filter(state_filter(model, EntryState.REQUESTED))
    if model is Visitor:
        if faculty_id is not None:
            q = q.filter(Visitor.faculty_id == faculty_id)
        if department:
            q = q.filter(Visitor.department == department)
    return q.order_by(model.entry_time.desc()).all()


def approved_exits(db: Session, kind: EntryRecordKind):
    model = kind.model
    return (
        db.query(model)
        .filter(state_filter(model, EntryState.APPROVED))
        .order_by(model.entry_time.desc())
        .all()
    )


def exited_today(db: Session, kind: EntryRecordKind, day: Optional[date] = None):
    model = kind.model
    start, end = today_window(day)
    return (
        db.query(model)
        .filter(model.has_exited == True, model.exit_time >= start, model.exit_time < end)  # noqa: E712
        .order_by(model.exit_time.desc())
        .all()
    )


def currently_inside_count(db: Session, kind: EntryRecordKind) -> int:
    model = kind.model
    return db.query(func.count(model.id)).filter(model.has_exited == False).scalar()  # noqa: E712


def kind_stats(db: Session, kind: EntryRecordKind, day: Optional[date] = None) -> dict:
    model = kind.model

    def count(*criteria) -> int:
        return db.query(func.count(model.id)).filter(*criteria).scalar()

    start, end = today_window(day)
    return {
        "total_today": count(_entered_on(model, day)),
        "exited_today": count(model.has_exited == True, model.exit_time >= start, model.exit_time < end),  # noqa: E712
        "pending_approval": count(state_filter(model, EntryState.REQUESTED)),
        "approved_not_exited": count(state_filter(model, EntryState.APPROVED)),
        "currently_inside": currently_inside_count(db, kind),
    }


def daily_stats(db: Session, day: Optional[date] = None) -> dict:
    day = day or datetime.utcnow().date()
    return {
        "date": day.isoformat(),
        "visitors": kind_stats(db, EntryRecordKind.VISITOR, day),
        "students": kind_stats(db, EntryRecordKind.STUDENT, day),
    }


def system_stats(db: Session) -> dict:
    """All-time totals for the admin dashboard: records per kind and users per role."""
    by_role = dict(db.query(User.role, func.count(User.id)).group_by(User.role).all())

    def totals(kind: EntryRecordKind) -> dict:
        model = kind.model
        return {
            "total": db.query(func.count(model.id)).scalar(),
            "active": currently_inside_count(db, kind),
        }

    return {
        "users": {"total": sum(by_role.values()), "by_role": {role: by_role.get(role, 0) for role in ROLES}},
        "visitors": totals(EntryRecordKind.VISITOR),
        "students": totals(EntryRecordKind.STUDENT),
    }
