# app/schemas/visitor.py
from pydantic import BaseModel, ConfigDict, Field
from app.schemas.entry_record import EntryRecordOut


class VisitorCreate(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    purpose: str = Field(min_length=1)
    department: str = Field(min_length=1)
    faculty_id: int      # faculty member being visited; approves the exit


class VisitorOut(EntryRecordOut):
    phone: str
    department: str
    faculty_id: int
