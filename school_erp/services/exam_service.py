# school_erp/services/exam_service.py
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .base_service import BaseService
from .class_service import ClassService
from .teacher_service import TeacherService
from ..core.exceptions import NotFoundError, PermissionDenied, ValidationError
from ..core.security import ensure_same_school, scoped_school_id
from ..models.class_model import ClassModel
from ..models.enums import UserRole
from ..models.exam import Exam, ExamResult
from ..models.profile import Profile
from ..models.student import Student
from ..schemas.exam_schemas import GradeEntry
from ..utils.grading import grade_marks

logger = logging.getLogger(__name__)

def _float(value) -> Optional[float]:
    return float(value) if value is not None else None

class ExamService(BaseService[Exam]):
    label = "Exam"

    def __init__(self, db: AsyncSession):
        super().__init__(Exam, db)

    async def list_exams(self, profile: Profile) -> List[Dict[str, Any]]:
        """
        Teachers see the exams they created in the classes they teach;
        admins see every exam of their school. Newest exam date first.
        """
        stmt = (
            select(Exam)
            .options(selectinload(Exam.class_ref), selectinload(Exam.subject))
            .order_by(Exam.exam_date.desc())
        )
        if UserRole(profile.role) == UserRole.TEACHER:
            class_ids = await TeacherService(self.db).teaching_class_ids(profile.id, profile.school_id)
            if not class_ids:
                return []
            stmt = stmt.where(
                Exam.created_by == profile.id,
                Exam.school_id == profile.school_id,
                Exam.class_id.in_(class_ids),
            )
        else:
            school_id = scoped_school_id(profile)
            if school_id is not None:
                stmt = stmt.where(Exam.school_id == school_id)

        exams = (await self.db.execute(stmt)).scalars().all()
        return [await self._with_counts(exam) for exam in exams]

    async def _with_counts(self, exam: Exam) -> Dict[str, Any]:
        total_students = (await self.db.execute(
            select(func.count(Student.id)).where(Student.class_id == exam.class_id)
        )).scalar() or 0
        graded_count = (await self.db.execute(
            select(func.count(ExamResult.id)).where(
                ExamResult.exam_id == exam.id,
                ExamResult.marks_obtained.is_not(None),
            )
        )).scalar() or 0
        return {
            "id": str(exam.id),
            "title": exam.title,
            "description": exam.description,
            "exam_date": exam.exam_date.isoformat(),
            "total_marks": exam.total_marks,
            "class_id": str(exam.class_id) if exam.class_id else None,
            "class_name": exam.class_ref.label if exam.class_ref else "",
            "subject_id": str(exam.subject_id) if exam.subject_id else None,
            "subject_name": exam.subject.name if exam.subject else "Unknown",
            "graded_count": graded_count,
            "total_students": total_students,
        }

    async def get_for(self, exam_id: UUID, profile: Profile) -> Exam:
        exam = await self.get_or_404(exam_id)
        ensure_same_school(profile, exam.school_id)
        if UserRole(profile.role) == UserRole.TEACHER and exam.created_by != profile.id:
            raise PermissionDenied("Only the teacher who created this exam can manage it")
        return exam

    async def create_exam(self, data: dict, profile: Profile) -> Exam:
        class_obj = await self.db.get(ClassModel, data["class_id"])
        if not class_obj:
            raise NotFoundError("Class", data["class_id"])
        ensure_same_school(profile, class_obj.school_id)
        if UserRole(profile.role) == UserRole.TEACHER:
            class_ids = await TeacherService(self.db).teaching_class_ids(profile.id, profile.school_id)
            if class_obj.id not in class_ids:
                raise PermissionDenied("You do not teach this class")
        return await self.create({
            **data,
            "school_id": class_obj.school_id,
            "created_by": profile.id,
        })

    async def grade_sheet(self, exam: Exam) -> List[Dict[str, Any]]:
        """Class roster joined with whatever results already exist"""
        roster = await ClassService(self.db).get_roster(exam.class_id) if exam.class_id else []
        results = await self._results_by_student(exam.id)
        sheet = []
        for student in roster:
            result = results.get(UUID(student["id"]))
            sheet.append({
                "student_id": student["id"],
                "student_name": student["full_name"],
                "username": student["username"],
                "marks_obtained": _float(result.marks_obtained) if result else None,
                "percentage": _float(result.percentage) if result else None,
                "grade": result.grade if result else None,
                "remarks": result.remarks if result else None,
                "result_id": str(result.id) if result else None,
            })
        return sheet

    async def _results_by_student(self, exam_id: UUID) -> Dict[UUID, ExamResult]:
        result = await self.db.execute(select(ExamResult).where(ExamResult.exam_id == exam_id))
        return {row.student_id: row for row in result.scalars().all()}

    async def save_grades(self, exam: Exam, entries: List[GradeEntry], grader: Profile) -> Dict[str, int]:
        """
        Upsert one result per graded student. Entries without marks are
        skipped; marks above the exam total are rejected before any write.
        """
        for entry in entries:
            if entry.marks_obtained is not None and entry.marks_obtained > exam.total_marks:
                raise ValidationError(
                    f"Marks must be between 0 and {exam.total_marks}", field="marks_obtained"
                )

        roster_ids = set(await ClassService(self.db).student_ids(exam.class_id)) if exam.class_id else set()
        existing = await self._results_by_student(exam.id)
        graded_at = datetime.now(timezone.utc)
        saved = skipped = 0

        for entry in entries:
            if entry.marks_obtained is None:
                skipped += 1
                continue
            if entry.student_id not in roster_ids:
                raise ValidationError(f"Student {entry.student_id} is not in this exam's class", field="student_id")

            values = {
                **grade_marks(entry.marks_obtained, exam.total_marks),
                "remarks": entry.remarks,
                "graded_by": grader.id,
                "graded_at": graded_at,
            }
            result = existing.get(entry.student_id)
            if result is None:
                self.db.add(ExamResult(exam_id=exam.id, student_id=entry.student_id, **values))
            else:
                for key, value in values.items():
                    setattr(result, key, value)
            saved += 1

        await self.db.commit()
        logger.info("Saved %d grades for exam %s (%d skipped)", saved, exam.id, skipped)
        return {"saved": saved, "skipped": skipped}
