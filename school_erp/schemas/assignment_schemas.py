# school_erp/schemas/assignment_schemas.py
from typing import Optional
from pydantic import BaseModel, Field

class GradeSubmissionRequest(BaseModel):
    marks_obtained: float
    feedback: Optional[str] = Field(default=None, max_length=2000)
