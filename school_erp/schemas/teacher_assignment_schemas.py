# school_erp/schemas/teacher_assignment_schemas.py
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

class ClassTeacherAssign(BaseModel):
    teacher_id: UUID

class TeacherSubjectCreate(BaseModel):
    teacher_id: UUID
    subject_id: UUID

class ClassSubjectCreate(BaseModel):
    teacher_id: UUID
    class_id: UUID
    subject_id: UUID

class SubjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    school_id: Optional[UUID] = Field(default=None, description="Defaults to the caller's school")
