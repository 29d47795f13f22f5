# app/schemas/user.py
from pydantic import BaseModel, ConfigDict, Field, model_validator
from datetime import datetime
from typing import Literal, Optional


class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    role: Literal["admin", "director", "faculty", "guard"]
    department: Optional[str] = None

    @model_validator(mode="after")
    def faculty_needs_department(self):
        if self.role == "faculty" and not self.department:
            raise ValueError("Department is required for faculty members")
        return self


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    department: Optional[str]
    created_at: Optional[datetime]


class UserUpdate(BaseModel):
    """Only the fields that are set are applied."""
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = Field(default=None, min_length=3)
    role: Optional[Literal["admin", "director", "faculty", "guard"]] = None
    department: Optional[str] = None
