# app/models/entry_record.py
"""
Columns shared by every campus entry record (visitors and students).
Each concrete model names its natural identity column via IDENTITY_ATTR.
The exit status lives in three monotonic flags; the workflow state is derived from them.
"""

from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import declared_attr


class EntryRecordMixin:
    IDENTITY_ATTR = "id"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    purpose = Column(String(500), nullable=False)
    entry_time = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    exit_time = Column(DateTime)               # set only on confirmed exit
    exit_requested = Column(Boolean, default=False, nullable=False)
    exit_approved = Column(Boolean, default=False, nullable=False)
    has_exited = Column(Boolean, default=False, nullable=False)

    @declared_attr
    def approved_by(cls):
        return Column(Integer, ForeignKey("users.id"), nullable=True)

    @declared_attr
    def __table_args__(cls):
        return (
            Index(f"ix_{cls.__tablename__}_exit_status", "has_exited", "exit_requested", "exit_approved"),
            # at most one record per identity may be inside campus
            Index(f"uq_{cls.__tablename__}_active_{cls.IDENTITY_ATTR}", cls.IDENTITY_ATTR, unique=True,
                  postgresql_where=text("NOT has_exited"), sqlite_where=text("has_exited = 0")),
        )

    @classmethod
    def identity_column(cls):
        return getattr(cls, cls.IDENTITY_ATTR)

    @property
    def identity(self) -> str:
        return getattr(self, self.IDENTITY_ATTR)
