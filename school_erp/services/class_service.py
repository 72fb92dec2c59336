# school_erp/services/class_service.py
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from .base_service import BaseService
from ..core.exceptions import ErpException, NotFoundError, ValidationError
from ..models.class_model import ClassModel
from ..models.school import School
from ..models.student import Student
from ..models.profile import Profile
from ..models.enums import UserRole

logger = logging.getLogger(__name__)

class ClassService(BaseService[ClassModel]):
    label = "Class"

    def __init__(self, db: AsyncSession):
        super().__init__(ClassModel, db)

    async def list_classes(
        self,
        school_id: Optional[UUID] = None,
        class_teacher_id: Optional[UUID] = None,
    ) -> List[Dict[str, Any]]:
        """Classes ordered by grade then section, with school, teacher and student count"""
        teacher = aliased(Profile)
        student_count = (
            select(func.count(Student.id))
            .where(Student.class_id == ClassModel.id)
            .correlate(ClassModel)
            .scalar_subquery()
            .label("student_count")
        )
        stmt = (
            select(ClassModel, School.name.label("school_name"), teacher.full_name.label("teacher_name"), student_count)
            .join(School, School.id == ClassModel.school_id)
            .outerjoin(teacher, teacher.id == ClassModel.class_teacher_id)
            .order_by(ClassModel.grade_level.asc(), ClassModel.section.asc())
        )
        if school_id is not None:
            stmt = stmt.where(ClassModel.school_id == school_id)
        if class_teacher_id is not None:
            stmt = stmt.where(ClassModel.class_teacher_id == class_teacher_id)

        result = await self.db.execute(stmt)
        return [
            {
                "id": str(row.ClassModel.id),
                "grade_level": row.ClassModel.grade_level,
                "section": row.ClassModel.section,
                "academic_year": row.ClassModel.academic_year,
                "school_id": str(row.ClassModel.school_id),
                "school_name": row.school_name or "Unknown",
                "class_teacher_id": str(row.ClassModel.class_teacher_id) if row.ClassModel.class_teacher_id else None,
                "teacher_name": row.teacher_name,
                "student_count": row.student_count or 0,
            }
            for row in result.all()
        ]

    async def create_class(self, obj_in: dict) -> ClassModel:
        school = await self.db.get(School, obj_in["school_id"])
        if not school:
            raise NotFoundError("School", obj_in["school_id"])
        try:
            return await self.create(obj_in)
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning("Class creation rejected by database: %s", e.orig)
            raise ErpException(status_code=409, detail="This class already exists for the school and academic year")

    async def get_roster(self, class_id: UUID) -> List[Dict[str, Any]]:
        """Students of a class ordered by roll number"""
        stmt = (
            select(Student, Profile.full_name, Profile.username)
            .join(Profile, Profile.id == Student.user_id)
            .where(Student.class_id == class_id)
            .order_by(Student.roll_number.asc().nulls_last(), Profile.full_name.asc())
        )
        result = await self.db.execute(stmt)
        return [
            {
                "id": str(row.Student.id),
                "user_id": str(row.Student.user_id),
                "roll_number": row.Student.roll_number,
                "full_name": row.full_name or "Unknown",
                "username": row.username or "Unknown",
            }
            for row in result.all()
        ]

    async def student_ids(self, class_id: UUID) -> List[UUID]:
        result = await self.db.execute(select(Student.id).where(Student.class_id == class_id))
        return list(result.scalars().all())

    async def set_class_teacher(self, class_id: UUID, teacher_id: Optional[UUID]) -> ClassModel:
        """Assign (or with None, remove) the class teacher"""
        class_obj = await self.get_or_404(class_id)
        if teacher_id is not None:
            teacher = await self.db.get(Profile, teacher_id)
            if not teacher or UserRole(teacher.role) != UserRole.TEACHER:
                raise ValidationError("Selected profile is not a teacher", field="teacher_id")
            if teacher.school_id != class_obj.school_id:
                raise ValidationError("Teacher belongs to another school", field="teacher_id")
        class_obj.class_teacher_id = teacher_id
        await self.db.commit()
        await self.db.refresh(class_obj)
        return class_obj
