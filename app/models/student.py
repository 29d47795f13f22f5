# app/models/student.py
"""Students table. Identified by institutional student id."""

from sqlalchemy import Column, String
from app.database import Base
from app.models.entry_record import EntryRecordMixin


class Student(EntryRecordMixin, Base):
    __tablename__ = "students"
    IDENTITY_ATTR = "student_id"

    student_id = Column(String(50), nullable=False, index=True)

    def __repr__(self):
        return f"<Student {self.id} student_id={self.student_id} exited={self.has_exited}>"
