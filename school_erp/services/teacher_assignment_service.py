# school_erp/services/teacher_assignment_service.py
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .base_service import BaseService
from ..core.exceptions import ErpException, NotFoundError, ValidationError
from ..models.class_model import ClassModel
from ..models.enums import UserRole
from ..models.profile import Profile
from ..models.subject import Subject
from ..models.teacher_assignment import TeacherSubjectAssignment, ClassSubjectAssignment

logger = logging.getLogger(__name__)

class SubjectService(BaseService[Subject]):
    def __init__(self, db: AsyncSession):
        super().__init__(Subject, db)

    async def list_subjects(self, school_id: Optional[UUID] = None) -> List[Subject]:
        stmt = select(Subject).order_by(Subject.name.asc())
        if school_id is not None:
            stmt = stmt.where(Subject.school_id == school_id)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def create_subject(self, school_id: UUID, name: str) -> Subject:
        try:
            return await self.create({"school_id": school_id, "name": name.strip()})
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning("Subject creation rejected by database: %s", e.orig)
            raise ErpException(status_code=409, detail=f"Subject '{name}' already exists for this school")


class TeacherAssignmentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _teacher(self, teacher_id: UUID) -> Profile:
        teacher = await self.db.get(Profile, teacher_id)
        if not teacher or UserRole(teacher.role) != UserRole.TEACHER:
            raise ValidationError("Selected profile is not a teacher", field="teacher_id")
        return teacher

    async def _subject(self, subject_id: UUID) -> Subject:
        subject = await self.db.get(Subject, subject_id)
        if not subject:
            raise NotFoundError("Subject", subject_id)
        return subject

    async def _save(self, obj, conflict_message: str):
        self.db.add(obj)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning("Assignment rejected by database: %s", e.orig)
            raise ErpException(status_code=409, detail=conflict_message)
        await self.db.refresh(obj)
        return obj

    async def assign_subject(self, teacher_id: UUID, subject_id: UUID) -> TeacherSubjectAssignment:
        teacher = await self._teacher(teacher_id)
        subject = await self._subject(subject_id)
        if teacher.school_id != subject.school_id:
            raise ValidationError("Teacher and subject belong to different schools")
        return await self._save(
            TeacherSubjectAssignment(teacher_id=teacher.id, subject_id=subject.id, school_id=subject.school_id),
            "Teacher already teaches this subject",
        )

    async def assign_class_subject(self, teacher_id: UUID, class_id: UUID, subject_id: UUID) -> ClassSubjectAssignment:
        teacher = await self._teacher(teacher_id)
        subject = await self._subject(subject_id)
        class_obj = await self.db.get(ClassModel, class_id)
        if not class_obj:
            raise NotFoundError("Class", class_id)
        if not (teacher.school_id == subject.school_id == class_obj.school_id):
            raise ValidationError("Teacher, class and subject must belong to the same school")
        return await self._save(
            ClassSubjectAssignment(teacher_id=teacher.id, class_id=class_obj.id, subject_id=subject.id),
            "This subject already has a teacher in this class",
        )

    async def list_class_subjects(self, teacher_id: Optional[UUID] = None, class_id: Optional[UUID] = None) -> List[Dict[str, Any]]:
        stmt = select(ClassSubjectAssignment).options(
            selectinload(ClassSubjectAssignment.class_ref),
            selectinload(ClassSubjectAssignment.subject),
        )
        if teacher_id is not None:
            stmt = stmt.where(ClassSubjectAssignment.teacher_id == teacher_id)
        if class_id is not None:
            stmt = stmt.where(ClassSubjectAssignment.class_id == class_id)
        result = await self.db.execute(stmt)
        return [
            {
                "id": str(link.id),
                "teacher_id": str(link.teacher_id),
                "class_id": str(link.class_id),
                "class_name": link.class_ref.label if link.class_ref else "",
                "subject_id": str(link.subject_id),
                "subject_name": link.subject.name if link.subject else "Unknown",
            }
            for link in result.scalars().all()
        ]

    async def delete_link(self, model, link_id: UUID) -> Optional[Any]:
        """Delete a teacher/subject or class/subject link; returns the deleted row"""
        link = await self.db.get(model, link_id)
        if not link:
            return None
        await self.db.delete(link)
        await self.db.commit()
        return link
