# school_erp/schemas/school_schemas.py
"""Pydantic schemas for the School entity."""
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

DEFAULT_LEVELS = ['Form 1', 'Form 2', 'Form 3', 'Form 4']

class SchoolBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="School name")
    address: Optional[str] = Field(default=None, max_length=500)
    contact_email: Optional[EmailStr] = Field(default=None)
    contact_phone: Optional[str] = Field(default=None, max_length=20)
    school_type: Optional[str] = Field(default=None, max_length=50)

    @field_validator('contact_phone')
    @classmethod
    def validate_phone(cls, v):
        if v is None or v == "":
            return None
        cleaned = ''.join(c for c in v if c.isdigit())
        if not cleaned:
            raise ValueError('Phone number must contain digits')
        return v

class SchoolCreate(SchoolBase):
    """school_code is generated, levels default to Form 1-4"""
    levels_offered: List[str] = Field(default_factory=lambda: list(DEFAULT_LEVELS))

class SchoolUpdate(BaseModel):
    """Schema for updating a school - all fields optional"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    address: Optional[str] = Field(default=None, max_length=500)
    contact_email: Optional[EmailStr] = Field(default=None)
    contact_phone: Optional[str] = Field(default=None, max_length=20)
    school_type: Optional[str] = Field(default=None, max_length=50)
    levels_offered: Optional[List[str]] = Field(default=None, min_length=1)
