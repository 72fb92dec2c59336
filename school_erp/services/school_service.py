# school_erp/services/school_service.py
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .base_service import BaseService
from ..core.exceptions import ErpException
from ..models.school import School
from ..models.class_model import ClassModel
from ..models.student import Student
from ..models.profile import Profile
from ..models.enums import UserRole
from ..utils.identifiers import generate_school_code

logger = logging.getLogger(__name__)

class SchoolService(BaseService[School]):
    label = "School"

    def __init__(self, db: AsyncSession):
        super().__init__(School, db)

    def _count_columns(self):
        class_count = (
            select(func.count(ClassModel.id))
            .where(ClassModel.school_id == School.id)
            .correlate(School)
            .scalar_subquery()
        )
        student_count = (
            select(func.count(Student.id))
            .where(Student.school_id == School.id)
            .correlate(School)
            .scalar_subquery()
        )
        teacher_count = (
            select(func.count(Profile.id))
            .where(Profile.school_id == School.id, Profile.role == UserRole.TEACHER)
            .correlate(School)
            .scalar_subquery()
        )
        return (
            class_count.label("class_count"),
            student_count.label("student_count"),
            teacher_count.label("teacher_count"),
        )

    async def list_with_counts(self, school_id: Optional[UUID] = None, newest_first: bool = True) -> List[Dict[str, Any]]:
        """Schools with their class, student and teacher counts"""
        stmt = select(School, *self._count_columns())
        if school_id is not None:
            stmt = stmt.where(School.id == school_id)
        if newest_first:
            stmt = stmt.order_by(School.created_at.desc())
        else:
            stmt = stmt.order_by(School.school_type.asc(), School.name.asc())

        result = await self.db.execute(stmt)
        return [
            {
                **self.to_dict(row.School),
                "class_count": row.class_count or 0,
                "student_count": row.student_count or 0,
                "teacher_count": row.teacher_count or 0,
            }
            for row in result.all()
        ]

    async def create_school(self, obj_in: dict) -> School:
        """Create school with an auto-generated school code"""
        obj_in = dict(obj_in)
        obj_in["school_code"] = generate_school_code(obj_in["name"])
        try:
            return await self.create(obj_in)
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning("School creation rejected by database: %s", e.orig)
            raise ErpException(status_code=409, detail="A school with this code or name already exists, please retry")

    @staticmethod
    def to_dict(school: School) -> Dict[str, Any]:
        return {
            "id": str(school.id),
            "name": school.name,
            "school_code": school.school_code,
            "school_type": school.school_type,
            "address": school.address,
            "contact_email": school.contact_email,
            "contact_phone": school.contact_phone,
            "levels_offered": school.levels_offered or [],
            "created_at": school.created_at.isoformat() if school.created_at else None,
        }
