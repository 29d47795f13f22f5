# app/schemas/entry_record.py
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field
from datetime import datetime
from typing import Optional
from app.services.exit_state import derive_state


class EntryRecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    purpose: str
    entry_time: datetime
    exit_time: Optional[datetime] = None
    exit_requested: bool
    exit_approved: bool
    has_exited: bool
    approved_by: Optional[int] = None

    @computed_field
    @property
    def state(self) -> str:
        return derive_state(self).value


class ExitActionIn(BaseModel):
    """Body of request/approve/confirm-exit. `phone` and `student_id` are accepted as aliases."""
    model_config = ConfigDict(coerce_numbers_to_str=True)

    identity: str = Field(
        min_length=1,
        validation_alias=AliasChoices("identity", "phone", "student_id", "studentId"),
    )
    approver_id: Optional[int] = None   # faculty/director approving; approve-exit only
