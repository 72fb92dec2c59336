# school_erp/services/teacher_service.py
from collections import defaultdict
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from .base_service import BaseService
from ..models.class_model import ClassModel
from ..models.enums import UserRole
from ..models.profile import Profile
from ..models.school import School
from ..models.student import Student
from ..models.subject import Subject
from ..models.teacher_assignment import TeacherSubjectAssignment, ClassSubjectAssignment

class TeacherService(BaseService[Profile]):
    def __init__(self, db: AsyncSession):
        super().__init__(Profile, db)

    async def list_teachers(self, school_id: Optional[UUID] = None) -> List[Dict[str, Any]]:
        """Teachers with the subjects and classes they are linked to"""
        stmt = (
            select(Profile, School.name.label("school_name"), School.school_type)
            .outerjoin(School, School.id == Profile.school_id)
            .where(Profile.role == UserRole.TEACHER)
            .order_by(Profile.full_name.asc())
        )
        if school_id is not None:
            stmt = stmt.where(Profile.school_id == school_id)
        teachers = (await self.db.execute(stmt)).all()
        teacher_ids = [row.Profile.id for row in teachers]

        subjects_by_teacher = defaultdict(list)
        classes_by_teacher = defaultdict(list)
        if teacher_ids:
            subject_rows = await self.db.execute(
                select(TeacherSubjectAssignment.teacher_id, Subject.name)
                .join(Subject, Subject.id == TeacherSubjectAssignment.subject_id)
                .where(TeacherSubjectAssignment.teacher_id.in_(teacher_ids))
            )
            for teacher_id, name in subject_rows.all():
                subjects_by_teacher[teacher_id].append(name)

            class_rows = await self.db.execute(
                select(ClassSubjectAssignment.teacher_id, ClassModel.grade_level, ClassModel.section)
                .join(ClassModel, ClassModel.id == ClassSubjectAssignment.class_id)
                .where(ClassSubjectAssignment.teacher_id.in_(teacher_ids))
            )
            for teacher_id, grade_level, section in class_rows.all():
                classes_by_teacher[teacher_id].append(f"{grade_level} {section}".strip())

        return [
            {
                "id": str(row.Profile.id),
                "username": row.Profile.username,
                "full_name": row.Profile.full_name,
                "email": row.Profile.email,
                "school_id": str(row.Profile.school_id) if row.Profile.school_id else None,
                "school_name": row.school_name or "Unknown",
                "school_type": row.school_type or "Unknown",
                "subjects": subjects_by_teacher[row.Profile.id],
                "classes": classes_by_teacher[row.Profile.id],
                "assignment_count": len(subjects_by_teacher[row.Profile.id]) + len(classes_by_teacher[row.Profile.id]),
            }
            for row in teachers
        ]

    async def teaching_class_ids(self, teacher_id: UUID, school_id: Optional[UUID] = None) -> List[UUID]:
        """Distinct classes a teacher teaches a subject in"""
        stmt = (
            select(ClassSubjectAssignment.class_id)
            .join(ClassModel, ClassModel.id == ClassSubjectAssignment.class_id)
            .where(ClassSubjectAssignment.teacher_id == teacher_id)
            .distinct()
        )
        if school_id is not None:
            stmt = stmt.where(ClassModel.school_id == school_id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def teaching_load(self, teacher: Profile) -> Dict[str, Any]:
        """Classes (with subject and student counts), subject count and total students"""
        stmt = (
            select(
                ClassModel.id,
                ClassModel.grade_level,
                ClassModel.section,
                func.count(ClassSubjectAssignment.id).label("subject_count"),
            )
            .join(ClassSubjectAssignment, ClassSubjectAssignment.class_id == ClassModel.id)
            .where(ClassSubjectAssignment.teacher_id == teacher.id)
            .group_by(ClassModel.id, ClassModel.grade_level, ClassModel.section)
            .order_by(ClassModel.grade_level, ClassModel.section)
        )
        if teacher.school_id is not None:
            stmt = stmt.where(ClassModel.school_id == teacher.school_id)
        class_rows = (await self.db.execute(stmt)).all()

        classes = []
        for row in class_rows:
            student_count = (await self.db.execute(
                select(func.count(Student.id)).where(Student.class_id == row.id)
            )).scalar() or 0
            classes.append({
                "class_id": str(row.id),
                "grade_level": row.grade_level,
                "section": row.section,
                "subject_count": row.subject_count,
                "student_count": student_count,
            })

        subject_stmt = select(func.count(TeacherSubjectAssignment.id)).where(
            TeacherSubjectAssignment.teacher_id == teacher.id
        )
        if teacher.school_id is not None:
            subject_stmt = subject_stmt.where(TeacherSubjectAssignment.school_id == teacher.school_id)
        subject_count = (await self.db.execute(subject_stmt)).scalar() or 0

        return {
            "classes": len(classes),
            "subjects": subject_count,
            "students": sum(c["student_count"] for c in classes),
            "class_breakdown": classes,
        }
