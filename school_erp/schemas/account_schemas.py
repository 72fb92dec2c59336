# school_erp/schemas/account_schemas.py
"""Request bodies for teacher, student and parent accounts."""
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field

class AccountCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    school_id: UUID

class StudentCreate(AccountCreate):
    class_id: Optional[UUID] = None
    roll_number: Optional[str] = Field(default=None, max_length=20)

class ParentLink(BaseModel):
    parent_id: UUID

class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
