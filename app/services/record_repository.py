# app/services/record_repository.py
"""
Persistence gateway for entry records.
One repository instance serves one record kind (visitors or students) and
hides which column is the natural identity for that kind.

conditional_update() is the only write path used by the exit workflow:
the state precondition is part of the UPDATE's WHERE clause, so of two
racing writers only one can match the row.
"""

from enum import Enum
from sqlalchemy import update
from sqlalchemy.orm import Session
from app.models.student import Student
from app.models.visitor import Visitor
from app.services.errors import ConflictError
from app.services.exit_state import EntryState, state_filter
from app.utils.logger import get_logger

logger = get_logger(__name__)


class EntryRecordKind(str, Enum):
    VISITOR = "visitor"
    STUDENT = "student"

    @property
    def model(self):
        return Visitor if self is EntryRecordKind.VISITOR else Student

    @property
    def label(self) -> str:
        return self.value.capitalize()


class EntryRecordRepository:
    def __init__(self, db: Session, kind: EntryRecordKind):
        self.db = db
        self.kind = kind
        self.model = kind.model

    def find_by_id(self, record_id: int):
        return self.db.get(self.model, record_id)

    def find_active_by_identity(self, identity: str):
        """The record for `identity` that has not exited yet, or None."""
        return (
            self.db.query(self.model)
            .filter(self.model.identity_column() == identity, self.model.has_exited == False)  # noqa: E712
            .order_by(self.model.entry_time.desc())
            .first()
        )

    def find_latest_by_identity(self, identity: str):
        return (
            self.db.query(self.model)
            .filter(self.model.identity_column() == identity)
            .order_by(self.model.id.desc())
            .first()
        )

    def save(self, record):
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def conditional_update(self, identity: str, expected_state: EntryState, patch: dict):
        """
        Apply `patch` to the record for `identity` only if it is still in
        `expected_state`. Raises ConflictError when no row matched.
        """
        stmt = (
            update(self.model)
            .where(self.model.identity_column() == identity, state_filter(self.model, expected_state))
            .values(**patch)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        if result.rowcount != 1:
            self.db.rollback()
            logger.warning(
                f"[REPO] {self.kind.label} {identity}: expected state {expected_state.value}, "
                f"matched {result.rowcount} rows"
            )
            raise ConflictError(
                f"{self.kind.label} {identity} changed state concurrently; expected {expected_state.value}"
            )
        self.db.commit()
        # commit() expired the session, so this re-reads the updated row
        return self.find_latest_by_identity(identity)

    def delete_by_id(self, record_id: int) -> bool:
        record = self.find_by_id(record_id)
        if not record:
            return False
        self.db.delete(record)
        self.db.commit()
        return True
