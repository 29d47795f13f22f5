# app/models/user.py
"""
Staff directory. Faculty members receive visitors and approve exits;
directors and guards only receive broadcast notifications.
"""

from sqlalchemy import Column, Integer, String, DateTime
from app.database import Base

ROLES = ("admin", "director", "faculty", "guard")
APPROVER_ROLES = ("faculty", "director")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    email = Column(String(200), unique=True, nullable=False, index=True)
    role = Column(String(20), nullable=False, index=True)   # admin | director | faculty | guard
    department = Column(String(100), index=True)            # required for faculty
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<User {self.id} email={self.email} role={self.role}>"
