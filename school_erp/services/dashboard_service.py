# school_erp/services/dashboard_service.py
"""Role-specific counters for the dashboard landing page."""
from typing import Any, Dict

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from .grades_service import GradesService
from .student_service import StudentService
from .teacher_service import TeacherService
from ..models.class_model import ClassModel
from ..models.enums import UserRole
from ..models.profile import Profile
from ..models.school import School
from ..models.student import Student
from ..utils.grading import summarize_results

class DashboardService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _count(self, stmt) -> int:
        return (await self.db.execute(stmt)).scalar() or 0

    async def stats_for(self, profile: Profile) -> Dict[str, Any]:
        role = UserRole(profile.role)
        stats: Dict[str, Any]

        if role == UserRole.SUPER_ADMIN:
            stats = {
                "schools": await self._count(select(func.count(School.id))),
                "classes": await self._count(select(func.count(ClassModel.id))),
                "users": await self._count(select(func.count(Profile.id))),
            }
        elif role == UserRole.SCHOOL_ADMIN:
            stats = {
                "classes": await self._count(
                    select(func.count(ClassModel.id)).where(ClassModel.school_id == profile.school_id)
                ),
                "teachers": await self._count(
                    select(func.count(Profile.id)).where(
                        Profile.school_id == profile.school_id,
                        Profile.role == UserRole.TEACHER,
                    )
                ),
                "students": await self._count(
                    select(func.count(Student.id)).where(Student.school_id == profile.school_id)
                ),
            }
        elif role == UserRole.TEACHER:
            load = await TeacherService(self.db).teaching_load(profile)
            stats = {
                "classes": load["classes"],
                "subjects": load["subjects"],
                "students": load["students"],
            }
        elif role == UserRole.STUDENT:
            student = await StudentService(self.db).get_by_user(profile.id)
            results = await GradesService(self.db).results_for_student(student.id) if student else []
            summary = summarize_results(results)
            stats = {
                "exams": summary["totalExams"],
                "averagePercentage": summary["averagePercentage"],
            }
        else:
            stats = {
                "children": await self._count(
                    select(func.count(Student.id)).where(Student.parent_id == profile.id)
                ),
            }

        return {"role": role.value, "stats": stats}
