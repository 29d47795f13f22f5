# app/services/exit_workflow.py
"""
Entry → exit workflow shared by visitors and students.

  register_entry  creates a record inside campus (two-step policy: visitors
                  do NOT get an automatic exit request at entry)
  request_exit    INSIDE    → REQUESTED   notifies directors
  approve_exit    REQUESTED → APPROVED    notifies guards
  confirm_exit    APPROVED  → EXITED      notifies the approving faculty + directors

Every operation addresses records by natural identity (visitor phone,
student id). Each transition is checked against the loaded record first so
callers get a precise error, then written with a conditional update so a
concurrent writer that got there first turns into a ConflictError instead
of a lost update. Notifications go out after the commit and can never fail
or undo the transition.
"""

from datetime import datetime
from typing import Callable, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.models.user import APPROVER_ROLES
from app.schemas.student import StudentOut
from app.schemas.visitor import VisitorOut
from app.services.errors import DuplicateEntryError, EntryValidationError, NotFoundError
from app.services.exit_state import EntryState, check_approve, check_confirm, check_request
from app.services.notification_service import (
    DIRECTOR,
    GUARD,
    NotificationDispatcher,
    dispatch_safely,
    faculty_channel,
)
from app.services.record_repository import EntryRecordKind, EntryRecordRepository
from app.services.user_service import get_faculty, get_user
from app.utils.logger import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = {
    EntryRecordKind.VISITOR: ("name", "phone", "purpose", "department", "faculty_id"),
    EntryRecordKind.STUDENT: ("name", "student_id", "purpose"),
}


def serialize_record(record) -> dict:
    schema = VisitorOut if isinstance(record, EntryRecordKind.VISITOR.model) else StudentOut
    return schema.model_validate(record).model_dump(mode="json")


class ExitWorkflow:
    def __init__(self, db: Session, kind: EntryRecordKind,
                 dispatcher: Optional[NotificationDispatcher] = None,
                 now: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.kind = kind
        self.repo = EntryRecordRepository(db, kind)
        self.dispatcher = dispatcher
        self.now = now or datetime.utcnow

    # ── Entry ────────────────────────────────────────────────────────────
    async def register_entry(self, data: dict):
        fields = REQUIRED_FIELDS[self.kind]
        missing = [f for f in fields if data.get(f) is None or str(data.get(f)).strip() == ""]
        if missing:
            raise EntryValidationError(f"Missing required fields: {', '.join(missing)}")

        values = {f: data[f].strip() if isinstance(data[f], str) else data[f] for f in fields}
        identity = values[self.kind.model.IDENTITY_ATTR]

        existing = self.repo.find_active_by_identity(identity)
        if existing:
            raise DuplicateEntryError(f"{self.kind.label} {identity} already has an active entry")

        faculty = None
        if self.kind is EntryRecordKind.VISITOR:
            faculty = get_faculty(self.db, values["faculty_id"])
            if faculty is None:
                raise EntryValidationError(f"Faculty member {values['faculty_id']} not found")

        record = self.kind.model(**values, entry_time=self.now())
        try:
            record = self.repo.save(record)
        except IntegrityError:
            # partial unique index on active identity caught a concurrent entry
            self.db.rollback()
            raise DuplicateEntryError(f"{self.kind.label} {identity} already has an active entry")

        logger.info(f"[WORKFLOW] {self.kind.label} entry: {record.name} ({identity}) id={record.id}")

        if faculty is not None:
            await self._notify(faculty_channel(faculty.id),
                               f"New visitor {record.name} has arrived to see you.",
                               event="newVisitor", record=record)
        else:
            await self._notify(GUARD, f"New student entry: {record.name} ({identity})")
        return record

    # ── Transitions ──────────────────────────────────────────────────────
    async def request_exit(self, identity: str):
        record = self.repo.find_active_by_identity(identity)
        if record is None:
            raise NotFoundError(f"No active entry found for {self.kind.value} {identity}")
        check_request(record)

        updated = self.repo.conditional_update(identity, EntryState.INSIDE, {"exit_requested": True})
        logger.info(f"[WORKFLOW] {self.kind.label} {identity}: exit requested")
        await self._notify(DIRECTOR, f"Exit Request: {self.kind.label} {updated.name} ({identity}) wants to exit.")
        return updated

    async def approve_exit(self, identity: str, approver_id: Optional[int] = None):
        record = self._load_for_transition(identity)
        check_approve(record)
        if approver_id is not None:
            approver = get_user(self.db, approver_id)
            if approver is None:
                raise NotFoundError(f"Approver {approver_id} not found")
            if approver.role not in APPROVER_ROLES:
                raise EntryValidationError(
                    f"User {approver_id} is a {approver.role}; only faculty or directors approve exits"
                )

        patch = {"exit_approved": True}
        if approver_id is not None:
            patch["approved_by"] = approver_id
        updated = self.repo.conditional_update(identity, EntryState.REQUESTED, patch)
        logger.info(f"[WORKFLOW] {self.kind.label} {identity}: exit approved by {approver_id or 'unknown'}")
        await self._notify(GUARD, f"Exit Approved: {self.kind.label} {updated.name} ({identity}) can exit.",
                           severity="success")
        return updated

    async def confirm_exit(self, identity: str):
        record = self._load_for_transition(identity)
        check_confirm(record)

        exit_time = max(self.now(), record.entry_time)
        updated = self.repo.conditional_update(
            identity, EntryState.APPROVED, {"has_exited": True, "exit_time": exit_time}
        )
        logger.info(f"[WORKFLOW] {self.kind.label} {identity}: exit confirmed at {exit_time.isoformat()}")

        approver = get_faculty(self.db, updated.approved_by) if updated.approved_by else None
        target = approver.id if approver else getattr(updated, "faculty_id", None)
        if target:
            await self._notify(faculty_channel(target),
                               f"{self.kind.label} {updated.name} has successfully exited.",
                               event=f"{self.kind.value}Exited", record=updated)
        await self._notify(DIRECTOR, f"{self.kind.label} {updated.name} ({identity}) has exited.")
        return updated

    # ── Helpers ──────────────────────────────────────────────────────────
    def _load_for_transition(self, identity: str):
        """Active record, else the most recent one so an exited record reports AlreadyExited."""
        record = self.repo.find_active_by_identity(identity) or self.repo.find_latest_by_identity(identity)
        if record is None:
            raise NotFoundError(f"{self.kind.label} {identity} not found")
        return record

    async def _notify(self, channel: str, message: str, severity: str = "info",
                      event: Optional[str] = None, record=None):
        payload = serialize_record(record) if record is not None else None
        await dispatch_safely(self.dispatcher, channel, message, severity=severity, event=event, record=payload)
