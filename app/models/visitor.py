# app/models/visitor.py
"""
Visitors table. A visitor is identified by phone number and must name the
faculty member they came to see; that faculty member approves their exit.
"""

from sqlalchemy import Column, ForeignKey, Integer, String
from app.database import Base
from app.models.entry_record import EntryRecordMixin


class Visitor(EntryRecordMixin, Base):
    __tablename__ = "visitors"
    IDENTITY_ATTR = "phone"

    phone = Column(String(30), nullable=False, index=True)
    department = Column(String(100), nullable=False)
    faculty_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    def __repr__(self):
        return f"<Visitor {self.id} phone={self.phone} exited={self.has_exited}>"
