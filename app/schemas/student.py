from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Optional
from app.schemas.entry_record import EntryRecordOut


class StudentCreate(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)   # {"studentId": 1001} is accepted

    name: str = Field(min_length=1)
    student_id: str = Field(min_length=1, validation_alias=AliasChoices("student_id", "studentId"))
    purpose: str = Field(min_length=1)


class StudentOut(EntryRecordOut):
    student_id: str


class StudentEntryOut(StudentOut):
    qr_code: Optional[str] = None   # PNG data URL of the exit pass; None if generation failed
