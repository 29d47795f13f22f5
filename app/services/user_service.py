# app/services/user_service.py
"""
Staff directory helpers.
Used by the exit workflow (visitor registration needs a real faculty member,
approvals need a faculty member or director) and by the users/faculty routers.
"""

from typing import Optional
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from app.models.student import Student
from app.models.user import User
from app.models.visitor import Visitor
from app.services.errors import EntryValidationError, UserInUseError
from app.utils.logger import get_logger

logger = get_logger(__name__)


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_faculty(db: Session, user_id: int) -> Optional[User]:
    """Return the user only if it exists and has the faculty role."""
    user = get_user(db, user_id)
    if user is None or user.role != "faculty":
        return None
    return user


def list_faculty(db: Session, department: Optional[str] = None) -> list[User]:
    q = db.query(User).filter(User.role == "faculty")
    if department:
        q = q.filter(User.department == department)
    return q.order_by(User.name).all()


def email_taken(db: Session, email: str, exclude_id: Optional[int] = None) -> bool:
    q = db.query(User).filter(User.email == email)
    if exclude_id is not None:
        q = q.filter(User.id != exclude_id)
    return q.first() is not None


def update_user(db: Session, user: User, changes: dict) -> User:
    """
    Apply the non-empty fields of `changes`. A user who ends up as faculty
    must have a department; any other role has its department cleared.
    """
    role = changes.get("role") or user.role
    if role == "faculty":
        department = changes.get("department") or user.department
        if not department:
            raise EntryValidationError("Department is required for faculty members")
    else:
        department = None

    for field in ("name", "email"):
        if changes.get(field):
            setattr(user, field, changes[field])
    user.role = role
    user.department = department
    db.commit()
    db.refresh(user)
    logger.info(f"[USERS] Updated user {user.id}: role={user.role} department={user.department}")
    return user


def count_references(db: Session, user_id: int) -> int:
    """Entry records pointing at this user as visited faculty or approver."""
    visitors = (
        db.query(func.count(Visitor.id))
        .filter(or_(Visitor.faculty_id == user_id, Visitor.approved_by == user_id))
        .scalar()
    )
    students = db.query(func.count(Student.id)).filter(Student.approved_by == user_id).scalar()
    return visitors + students


def delete_user(db: Session, user: User):
    """Delete a user that no entry record refers to; raises UserInUseError otherwise."""
    refs = count_references(db, user.id)
    if refs:
        raise UserInUseError(f"User {user.id} is referenced by {refs} entry record(s)")
    db.delete(user)
    db.commit()
    logger.info(f"[USERS] Deleted user {user.id} ({user.email})")
