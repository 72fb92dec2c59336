# school_erp/services/grades_service.py
"""Read-only grade views for students and parents."""
from typing import Any, Dict, List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError
from ..models.class_model import ClassModel
from ..models.exam import Exam, ExamResult
from ..models.profile import Profile
from ..models.student import Student
from ..models.subject import Subject
from ..utils.grading import summarize_results

class GradesService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def results_for_student(self, student_id: UUID) -> List[Dict[str, Any]]:
        """Exam results of one student, newest exam first"""
        stmt = (
            select(ExamResult, Exam.title, Exam.exam_date, Exam.total_marks, Subject.name.label("subject_name"))
            .join(Exam, Exam.id == ExamResult.exam_id)
            .outerjoin(Subject, Subject.id == Exam.subject_id)
            .where(ExamResult.student_id == student_id)
            .order_by(Exam.exam_date.desc())
        )
        rows = (await self.db.execute(stmt)).all()
        return [
            {
                "exam_id": str(row.ExamResult.exam_id),
                "exam_title": row.title or "Unknown Exam",
                "subject_name": row.subject_name or "Unknown Subject",
                "exam_date": row.exam_date.isoformat() if row.exam_date else "",
                "total_marks": row.total_marks or 0,
                "marks_obtained": float(row.ExamResult.marks_obtained or 0),
                "percentage": float(row.ExamResult.percentage or 0),
                "grade": row.ExamResult.grade,
                "remarks": row.ExamResult.remarks,
                "graded_at": row.ExamResult.graded_at.isoformat() if row.ExamResult.graded_at else None,
            }
            for row in rows
        ]

    async def my_grades(self, profile: Profile) -> Dict[str, Any]:
        stmt = (
            select(Student, ClassModel.grade_level, ClassModel.section)
            .outerjoin(ClassModel, ClassModel.id == Student.class_id)
            .where(Student.user_id == profile.id)
        )
        row = (await self.db.execute(stmt)).first()
        if row is None:
            raise NotFoundError("Student record")

        results = await self.results_for_student(row.Student.id)
        return {
            "student": {
                "id": str(row.Student.id),
                "roll_number": row.Student.roll_number,
                "grade_level": row.grade_level,
                "section": row.section,
            },
            "results": results,
            "stats": summarize_results(results),
        }

    async def children_grades(self, parent: Profile) -> List[Dict[str, Any]]:
        """Every child linked to the parent, each with results and summary"""
        stmt = (
            select(Student, Profile.full_name, Profile.username, ClassModel.grade_level, ClassModel.section)
            .join(Profile, Profile.id == Student.user_id)
            .outerjoin(ClassModel, ClassModel.id == Student.class_id)
            .where(Student.parent_id == parent.id)
            .order_by(Profile.full_name.asc())
        )
        children = []
        for row in (await self.db.execute(stmt)).all():
            results = await self.results_for_student(row.Student.id)
            children.append({
                "id": str(row.Student.id),
                "user_id": str(row.Student.user_id),
                "full_name": row.full_name or "Unknown",
                "username": row.username or "Unknown",
                "roll_number": row.Student.roll_number,
                "grade_level": row.grade_level or "Unknown",
                "section": row.section or "",
                "class_id": str(row.Student.class_id) if row.Student.class_id else None,
                "results": results,
                "stats": summarize_results(results),
            })
        return children
