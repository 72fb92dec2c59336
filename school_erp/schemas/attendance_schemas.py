# school_erp/schemas/attendance_schemas.py
from datetime import date
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field

from ..models.enums import AttendanceStatus

class AttendanceEntry(BaseModel):
    student_id: UUID
    status: AttendanceStatus
    remarks: Optional[str] = None

class SaveAttendanceRequest(BaseModel):
    class_id: UUID
    date: date
    entries: List[AttendanceEntry] = Field(..., min_length=1, description="At least one student must be marked")
