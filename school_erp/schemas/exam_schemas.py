# school_erp/schemas/exam_schemas.py
from datetime import date
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field

class ExamCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    exam_date: date
    total_marks: int = Field(..., gt=0)
    class_id: UUID
    subject_id: Optional[UUID] = None

class GradeEntry(BaseModel):
    student_id: UUID
    marks_obtained: Optional[float] = Field(default=None, ge=0)
    remarks: Optional[str] = None

class SaveGradesRequest(BaseModel):
    grades: List[GradeEntry]
