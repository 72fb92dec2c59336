# school_erp/services/student_service.py
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from .base_service import BaseService
from ..core.exceptions import ValidationError
from ..models.class_model import ClassModel
from ..models.enums import UserRole
from ..models.profile import Profile
from ..models.school import School
from ..models.student import Student

class StudentService(BaseService[Student]):
    label = "Student"

    def __init__(self, db: AsyncSession):
        super().__init__(Student, db)

    async def list_students(
        self,
        school_id: Optional[UUID] = None,
        class_id: Optional[UUID] = None,
        parent_id: Optional[UUID] = None,
    ) -> List[Dict[str, Any]]:
        """Students with account, class, school and parent details"""
        account = aliased(Profile)
        parent = aliased(Profile)
        stmt = (
            select(
                Student,
                account.username,
                account.full_name,
                account.email,
                parent.full_name.label("parent_name"),
                ClassModel.grade_level,
                ClassModel.section,
                School.name.label("school_name"),
                School.school_code,
            )
            .join(account, account.id == Student.user_id)
            .outerjoin(parent, parent.id == Student.parent_id)
            .outerjoin(ClassModel, ClassModel.id == Student.class_id)
            .outerjoin(School, School.id == Student.school_id)
            .order_by(Student.roll_number.asc().nulls_last(), account.full_name.asc())
        )
        if school_id is not None:
            stmt = stmt.where(Student.school_id == school_id)
        if class_id is not None:
            stmt = stmt.where(Student.class_id == class_id)
        if parent_id is not None:
            stmt = stmt.where(Student.parent_id == parent_id)

        result = await self.db.execute(stmt)
        return [
            {
                "id": str(row.Student.id),
                "user_id": str(row.Student.user_id),
                "username": row.username or "Unknown",
                "full_name": row.full_name or "Unknown",
                "email": row.email or "N/A",
                "roll_number": row.Student.roll_number,
                "class_id": str(row.Student.class_id) if row.Student.class_id else None,
                "grade_level": row.grade_level or "Not Assigned",
                "section": row.section or "",
                "school_id": str(row.Student.school_id) if row.Student.school_id else None,
                "school_name": row.school_name or "Not Assigned",
                "parent_id": str(row.Student.parent_id) if row.Student.parent_id else None,
                "parent_name": row.parent_name,
                "admission_date": row.Student.admission_date.isoformat() if row.Student.admission_date else None,
            }
            for row in result.all()
        ]

    async def get_by_user(self, user_id: UUID) -> Optional[Student]:
        result = await self.db.execute(select(Student).where(Student.user_id == user_id))
        return result.scalar_one_or_none()

    async def set_parent(self, student_id: UUID, parent_id: Optional[UUID]) -> Student:
        """Link a parent account to a student (None unlinks)"""
        student = await self.get_or_404(student_id)
        if parent_id is not None:
            parent = await self.db.get(Profile, parent_id)
            if not parent or UserRole(parent.role) != UserRole.PARENT:
                raise ValidationError("Selected profile is not a parent", field="parent_id")
        student.parent_id = parent_id
        await self.db.commit()
        await self.db.refresh(student)
        return student
