# school_erp/services/assignment_service.py
from datetime import datetime, timezone
import math
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .base_service import BaseService
from .class_service import ClassService
from ..clients.storage import StorageClient
from ..core.config import settings
from ..core.exceptions import NotFoundError, PermissionDenied, PlatformError, ValidationError
from ..core.security import ensure_same_school, scoped_school_id
from ..models.assignment import Assignment, AssignmentSubmission
from ..models.class_model import ClassModel
from ..models.enums import UserRole
from ..models.profile import Profile
from ..models.student import Student
from ..utils.uploads import build_storage_path, validate_pdf_upload

logger = logging.getLogger(__name__)

STATUS_FILTERS = ("all", "active", "past")


def submission_status(submission) -> str:
    if submission.marks_obtained is not None:
        return "graded"
    if submission.submitted_at is not None:
        return "submitted"
    return "pending"


def days_until_due(due_date: datetime, now: Optional[datetime] = None) -> int:
    now = now or datetime.now(timezone.utc)
    return math.ceil((due_date - now).total_seconds() / 86400)


def validate_submission_marks(marks: float, total_marks: int) -> None:
    if marks < 0 or marks > total_marks:
        raise ValidationError(f"Marks must be between 0 and {total_marks}", field="marks_obtained")


class AssignmentService(BaseService[Assignment]):
    label = "Assignment"

    def __init__(self, db: AsyncSession, storage: StorageClient):
        super().__init__(Assignment, db)
        self.storage = storage

    async def list_assignments(
        self,
        profile: Profile,
        subject_id: Optional[UUID] = None,
        class_id: Optional[UUID] = None,
        status: str = "all",
    ) -> List[Dict[str, Any]]:
        if status not in STATUS_FILTERS:
            raise ValidationError(f"status must be one of {', '.join(STATUS_FILTERS)}", field="status")

        stmt = (
            select(Assignment)
            .options(
                selectinload(Assignment.teacher),
                selectinload(Assignment.subject),
                selectinload(Assignment.class_ref),
            )
            .order_by(Assignment.created_at.desc())
        )
        if UserRole(profile.role) == UserRole.TEACHER:
            stmt = stmt.where(Assignment.created_by == profile.id)
        else:
            school_id = scoped_school_id(profile)
            if school_id is not None:
                stmt = stmt.where(Assignment.school_id == school_id)
        if subject_id is not None:
            stmt = stmt.where(Assignment.subject_id == subject_id)
        if class_id is not None:
            stmt = stmt.where(Assignment.class_id == class_id)

        now = datetime.now(timezone.utc)
        if status == "active":
            stmt = stmt.where(Assignment.due_date >= now)
        elif status == "past":
            stmt = stmt.where(Assignment.due_date < now)

        assignments = (await self.db.execute(stmt)).scalars().all()
        return [await self._with_counts(a) for a in assignments]

    async def _with_counts(self, assignment: Assignment) -> Dict[str, Any]:
        submission_count = (await self.db.execute(
            select(func.count(AssignmentSubmission.id)).where(
                AssignmentSubmission.assignment_id == assignment.id,
                AssignmentSubmission.submitted_at.is_not(None),
            )
        )).scalar() or 0
        graded_count = (await self.db.execute(
            select(func.count(AssignmentSubmission.id)).where(
                AssignmentSubmission.assignment_id == assignment.id,
                AssignmentSubmission.marks_obtained.is_not(None),
            )
        )).scalar() or 0
        return {
            "id": str(assignment.id),
            "title": assignment.title,
            "description": assignment.description,
            "subject_id": str(assignment.subject_id) if assignment.subject_id else None,
            "class_id": str(assignment.class_id),
            "school_id": str(assignment.school_id) if assignment.school_id else None,
            "file_url": assignment.file_url,
            "file_name": assignment.file_name,
            "due_date": assignment.due_date.isoformat(),
            "days_until_due": days_until_due(assignment.due_date),
            "total_marks": assignment.total_marks,
            "created_by": str(assignment.created_by) if assignment.created_by else None,
            "created_at": assignment.created_at.isoformat() if assignment.created_at else None,
            "teacher_name": assignment.teacher.full_name if assignment.teacher else "Unknown",
            "subject_name": assignment.subject.name if assignment.subject else "Unknown",
            "class_name": assignment.class_ref.label if assignment.class_ref else "",
            "submission_count": submission_count,
            "graded_count": graded_count,
        }

    async def get_for(self, assignment_id: UUID, profile: Profile) -> Assignment:
        assignment = await self.get_or_404(assignment_id)
        ensure_same_school(profile, assignment.school_id)
        if UserRole(profile.role) == UserRole.TEACHER and assignment.created_by != profile.id:
            raise PermissionDenied("Only the teacher who set this assignment can manage it")
        return assignment

    async def create_assignment(
        self,
        profile: Profile,
        data: Dict[str, Any],
        file_name: str,
        content: bytes,
        content_type: Optional[str],
    ) -> Assignment:
        """Upload the brief, store the assignment and open a submission row per student"""
        validate_pdf_upload(content_type, len(content), settings.max_upload_bytes)
        if data["total_marks"] <= 0:
            raise ValidationError("total_marks must be greater than 0", field="total_marks")

        class_obj = await self.db.get(ClassModel, data["class_id"])
        if not class_obj:
            raise NotFoundError("Class", data["class_id"])
        ensure_same_school(profile, class_obj.school_id)

        path = build_storage_path("assignments", class_obj.school_id, data["title"])
        file_url = await self.storage.upload(path, content, content_type)

        assignment = Assignment(
            **data,
            file_url=file_url,
            file_name=file_name,
            created_by=profile.id,
            school_id=class_obj.school_id,
        )
        self.db.add(assignment)
        await self.db.flush()

        student_ids = await ClassService(self.db).student_ids(class_obj.id)
        self.db.add_all([
            AssignmentSubmission(assignment_id=assignment.id, student_id=student_id)
            for student_id in student_ids
        ])
        await self.db.commit()
        await self.db.refresh(assignment)
        logger.info("Created assignment %s with %d submission slots", assignment.id, len(student_ids))
        return assignment

    async def delete_assignment(self, assignment: Assignment) -> None:
        path = self.storage.path_from_public_url(assignment.file_url)
        if path:
            try:
                await self.storage.remove([path])
            except PlatformError as e:
                logger.warning("Stored file %s of assignment %s not removed: %s", path, assignment.id, e.message)
        await self.db.delete(assignment)
        await self.db.commit()

    async def submissions(self, assignment_id: UUID) -> List[Dict[str, Any]]:
        stmt = (
            select(AssignmentSubmission, Student.roll_number, Profile.full_name)
            .join(Student, Student.id == AssignmentSubmission.student_id)
            .join(Profile, Profile.id == Student.user_id)
            .where(AssignmentSubmission.assignment_id == assignment_id)
            .order_by(AssignmentSubmission.submitted_at.desc().nulls_last())
        )
        rows = (await self.db.execute(stmt)).all()
        return [
            {
                "id": str(row.AssignmentSubmission.id),
                "assignment_id": str(row.AssignmentSubmission.assignment_id),
                "student_id": str(row.AssignmentSubmission.student_id),
                "student_name": row.full_name or "Unknown",
                "roll_number": row.roll_number or "N/A",
                "submission_file_url": row.AssignmentSubmission.submission_file_url,
                "submission_file_name": row.AssignmentSubmission.submission_file_name,
                "submitted_at": row.AssignmentSubmission.submitted_at.isoformat() if row.AssignmentSubmission.submitted_at else None,
                "marks_obtained": float(row.AssignmentSubmission.marks_obtained) if row.AssignmentSubmission.marks_obtained is not None else None,
                "feedback": row.AssignmentSubmission.feedback,
                "graded_by": str(row.AssignmentSubmission.graded_by) if row.AssignmentSubmission.graded_by else None,
                "graded_at": row.AssignmentSubmission.graded_at.isoformat() if row.AssignmentSubmission.graded_at else None,
                "status": submission_status(row.AssignmentSubmission),
            }
            for row in rows
        ]

    async def grade_submission(
        self,
        assignment: Assignment,
        submission_id: UUID,
        marks: float,
        feedback: Optional[str],
        grader: Profile,
    ) -> AssignmentSubmission:
        validate_submission_marks(marks, assignment.total_marks)
        submission = await self.db.get(AssignmentSubmission, submission_id)
        if not submission or submission.assignment_id != assignment.id:
            raise NotFoundError("Submission", submission_id)

        submission.marks_obtained = marks
        submission.feedback = feedback or None
        submission.graded_by = grader.id
        submission.graded_at = datetime.now(timezone.utc)
        await self.db.commit()
        await self.db.refresh(submission)
        return submission

    async def submit(
        self,
        assignment_id: UUID,
        student_profile: Profile,
        file_name: str,
        content: bytes,
        content_type: Optional[str],
    ) -> AssignmentSubmission:
        """A student hands in a PDF against their own submission row"""
        validate_pdf_upload(content_type, len(content), settings.max_upload_bytes)

        stmt = (
            select(AssignmentSubmission)
            .join(Student, Student.id == AssignmentSubmission.student_id)
            .where(
                AssignmentSubmission.assignment_id == assignment_id,
                Student.user_id == student_profile.id,
            )
        )
        submission = (await self.db.execute(stmt)).scalar_one_or_none()
        if submission is None:
            raise NotFoundError("Submission for this assignment")
        if submission.marks_obtained is not None:
            raise ValidationError("This submission has already been graded")

        path = build_storage_path(
            "submissions", student_profile.school_id, f"{assignment_id}_{student_profile.username}"
        )
        submission.submission_file_url = await self.storage.upload(path, content, content_type)
        submission.submission_file_name = file_name
        submission.submitted_at = datetime.now(timezone.utc)
        await self.db.commit()
        await self.db.refresh(submission)
        return submission
