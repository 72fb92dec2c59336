from datetime import datetime
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from ..clients.storage import StorageClient, get_storage
from ..core.database import get_db
from ..core.security import STAFF_ROLES, require_roles
from ..models.enums import UserRole
from ..models.profile import Profile
from ..schemas.assignment_schemas import GradeSubmissionRequest
from ..services.assignment_service import AssignmentService, days_until_due, submission_status

router = APIRouter(prefix="/api/v1/assignments", tags=["Assignments"])

staff_only = require_roles(*STAFF_ROLES)

@router.get("/", response_model=dict)
async def get_assignments(
    subject_id: Optional[UUID] = Query(None),
    class_id: Optional[UUID] = Query(None),
    status: str = Query("all", description="all, active or past"),
    db: AsyncSession = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    profile: Profile = Depends(staff_only),
):
    assignments = await AssignmentService(db, storage).list_assignments(
        profile, subject_id=subject_id, class_id=class_id, status=status
    )
    return {"items": assignments, "total": len(assignments)}

@router.post("/", response_model=dict)
async def create_assignment(
    title: str = Form(..., min_length=1, max_length=200),
    class_id: UUID = Form(...),
    due_date: datetime = Form(...),
    total_marks: int = Form(...),
    subject_id: Optional[UUID] = Form(None),
    description: Optional[str] = Form(None),
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    profile: Profile = Depends(staff_only),
):
    """Upload the assignment PDF and open a submission slot per student"""
    content = await file.read()
    assignment = await AssignmentService(db, storage).create_assignment(
        profile,
        {
            "title": title,
            "description": description or None,
            "class_id": class_id,
            "subject_id": subject_id,
            "due_date": due_date,
            "total_marks": total_marks,
        },
        file.filename,
        content,
        file.content_type,
    )
    return {
        "id": str(assignment.id),
        "message": "Assignment created successfully",
        "file_url": assignment.file_url,
        "days_until_due": days_until_due(assignment.due_date),
    }

@router.delete("/{assignment_id}", response_model=dict)
async def delete_assignment(
    assignment_id: UUID,
    db: AsyncSession = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    profile: Profile = Depends(staff_only),
):
    """Remove the stored file, then the assignment and its submissions"""
    service = AssignmentService(db, storage)
    assignment = await service.get_for(assignment_id, profile)
    await service.delete_assignment(assignment)
    return {"message": "Assignment deleted successfully", "assignment_id": str(assignment_id)}

@router.get("/{assignment_id}/submissions", response_model=dict)
async def get_submissions(
    assignment_id: UUID,
    db: AsyncSession = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    profile: Profile = Depends(staff_only),
):
    service = AssignmentService(db, storage)
    assignment = await service.get_for(assignment_id, profile)
    submissions = await service.submissions(assignment.id)
    return {
        "assignment_id": str(assignment.id),
        "total_marks": assignment.total_marks,
        "items": submissions,
        "total": len(submissions),
    }

@router.put("/{assignment_id}/submissions/{submission_id}/grade", response_model=dict)
async def grade_submission(
    assignment_id: UUID,
    submission_id: UUID,
    grade: GradeSubmissionRequest,
    db: AsyncSession = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    profile: Profile = Depends(staff_only),
):
    service = AssignmentService(db, storage)
    assignment = await service.get_for(assignment_id, profile)
    submission = await service.grade_submission(
        assignment, submission_id, grade.marks_obtained, grade.feedback, profile
    )
    return {
        "id": str(submission.id),
        "marks_obtained": float(submission.marks_obtained),
        "status": submission_status(submission),
        "message": "Submission graded successfully",
    }

@router.post("/{assignment_id}/submit", response_model=dict)
async def submit_assignment(
    assignment_id: UUID,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    profile: Profile = Depends(require_roles(UserRole.STUDENT)),
):
    """A student hands in their work as a PDF"""
    content = await file.read()
    submission = await AssignmentService(db, storage).submit(
        assignment_id, profile, file.filename, content, file.content_type
    )
    return {
        "id": str(submission.id),
        "submitted_at": submission.submitted_at.isoformat(),
        "status": submission_status(submission),
        "message": "Assignment submitted successfully",
    }
