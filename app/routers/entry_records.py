# app/routers/entry_records.py
"""
Entry/exit endpoints. The same route set is mounted for visitors and students;
only the record kind, the schemas and the identity lookup path differ.

POST /entry, /request-exit, /approve-exit, /confirm-exit     workflow
GET  /pending-exits, /approved-exits, /exited-today, /daily-records    reporting
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.entry_record import ExitActionIn
from app.schemas.student import StudentCreate, StudentEntryOut, StudentOut
from app.schemas.visitor import VisitorCreate, VisitorOut
from app.services import reporting_service
from app.services.exit_workflow import ExitWorkflow
from app.services.notification_service import notification_manager
from app.services.qr_service import exit_pass_qr
from app.services.record_repository import EntryRecordKind, EntryRecordRepository


def get_dispatcher():
    """FastAPI dependency: the process-wide WebSocket notification manager."""
    return notification_manager


def make_router(kind: EntryRecordKind, create_schema, out_schema, lookup_path: str,
                entry_schema=None) -> APIRouter:
    """entry_schema, when given, is the /entry response and carries an exit pass QR code."""
    router = APIRouter()
    label = kind.label

    def workflow(db: Session = Depends(get_db), dispatcher=Depends(get_dispatcher)) -> ExitWorkflow:
        return ExitWorkflow(db, kind, dispatcher)

    @router.post("/entry", response_model=entry_schema or out_schema, status_code=status.HTTP_201_CREATED,
                 summary=f"Register {kind.value} entry")
    async def register_entry(body: create_schema, wf: ExitWorkflow = Depends(workflow)):
        record = await wf.register_entry(body.model_dump())
        if entry_schema is None:
            return record
        out = entry_schema.model_validate(record)
        out.qr_code = exit_pass_qr(record)
        return out

    @router.post("/request-exit", response_model=out_schema, summary=f"{label} requests to exit")
    async def request_exit(body: ExitActionIn, wf: ExitWorkflow = Depends(workflow)):
        return await wf.request_exit(body.identity)

    @router.post("/approve-exit", response_model=out_schema, summary=f"Faculty approves {kind.value} exit")
    async def approve_exit(body: ExitActionIn, wf: ExitWorkflow = Depends(workflow)):
        return await wf.approve_exit(body.identity, approver_id=body.approver_id)

    @router.post("/confirm-exit", response_model=out_schema, summary=f"Guard confirms {kind.value} exit")
    async def confirm_exit(body: ExitActionIn, wf: ExitWorkflow = Depends(workflow)):
        return await wf.confirm_exit(body.identity)

    @router.get("/pending-exits", response_model=list[out_schema], summary="Exit requests awaiting approval")
    def get_pending_exits(faculty_id: Optional[int] = None, department: Optional[str] = None,
                          db: Session = Depends(get_db)):
        return reporting_service.pending_exits(db, kind, faculty_id=faculty_id, department=department)

    @router.get("/approved-exits", response_model=list[out_schema], summary="Approved, not yet exited")
    def get_approved_exits(db: Session = Depends(get_db)):
        return reporting_service.approved_exits(db, kind)

    @router.get("/exited-today", response_model=list[out_schema], summary="Confirmed exits today")
    def get_exited_today(target_date: Optional[date] = None, db: Session = Depends(get_db)):
        return reporting_service.exited_today(db, kind, target_date)

    @router.get("/daily-records", response_model=list[out_schema], summary="Entries registered today")
    def get_daily_records(target_date: Optional[date] = None, db: Session = Depends(get_db)):
        return reporting_service.daily_records(db, kind, target_date)

    @router.get(f"/{lookup_path}/{{identity}}", response_model=out_schema,
                summary=f"Look up the current record for a {kind.value}")
    def get_by_identity(identity: str, db: Session = Depends(get_db)):
        repo = EntryRecordRepository(db, kind)
        record = repo.find_active_by_identity(identity) or repo.find_latest_by_identity(identity)
        if not record:
            raise HTTPException(status_code=404, detail=f"{label} {identity} not found")
        return record

    @router.get("/{record_id}", response_model=out_schema, summary=f"Get {kind.value} record by id")
    def get_by_id(record_id: int, db: Session = Depends(get_db)):
        record = EntryRecordRepository(db, kind).find_by_id(record_id)
        if not record:
            raise HTTPException(status_code=404, detail=f"{label} not found")
        return record

    @router.delete("/{record_id}", summary=f"Delete a {kind.value} record (admin)")
    def delete_record(record_id: int, db: Session = Depends(get_db)):
        if not EntryRecordRepository(db, kind).delete_by_id(record_id):
            raise HTTPException(status_code=404, detail=f"{label} not found")
        return {"status": "deleted", "id": record_id}

    return router


visitors_router = make_router(EntryRecordKind.VISITOR, VisitorCreate, VisitorOut, "phone")
students_router = make_router(EntryRecordKind.STUDENT, StudentCreate, StudentOut, "student-id",
                              entry_schema=StudentEntryOut)
