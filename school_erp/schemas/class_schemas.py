# school_erp/schemas/class_schemas.py
from uuid import UUID
from pydantic import BaseModel, Field

class ClassCreate(BaseModel):
    school_id: UUID
    grade_level: str = Field(..., min_length=1, max_length=50)
    section: str = Field(..., min_length=1, max_length=10)
    academic_year: str = Field(..., min_length=1, max_length=10)
