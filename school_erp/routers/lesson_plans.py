from datetime import date
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from ..clients.storage import StorageClient, get_storage
from ..core.database import get_db
from ..core.security import STAFF_ROLES, require_roles
from ..models.enums import DocumentType
from ..models.profile import Profile
from ..services.lesson_plan_service import LessonPlanService

router = APIRouter(prefix="/api/v1/lesson-plans", tags=["Lesson Plans"])

staff_only = require_roles(*STAFF_ROLES)

@router.get("/", response_model=dict)
async def get_lesson_plans(
    class_id: Optional[UUID] = Query(None),
    subject_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    profile: Profile = Depends(staff_only),
):
    """Documents in scope, newest upload first"""
    documents = await LessonPlanService(db, storage).list_documents(
        profile, class_id=class_id, subject_id=subject_id
    )
    return {"items": documents, "total": len(documents)}

@router.post("/", response_model=dict)
async def upload_lesson_plan(
    title: str = Form(..., min_length=1, max_length=200),
    class_id: UUID = Form(...),
    document_type: DocumentType = Form(DocumentType.LESSON_PLAN),
    subject_id: Optional[UUID] = Form(None),
    description: Optional[str] = Form(None),
    period_start: Optional[date] = Form(None),
    period_end: Optional[date] = Form(None),
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    profile: Profile = Depends(staff_only),
):
    content = await file.read()
    plan = await LessonPlanService(db, storage).upload(
        profile,
        {
            "title": title,
            "description": description or None,
            "document_type": document_type,
            "class_id": class_id,
            "subject_id": subject_id,
            "period_start": period_start,
            "period_end": period_end,
        },
        file.filename,
        content,
        file.content_type,
    )
    return {
        "id": str(plan.id),
        "file_url": plan.file_url,
        "message": "Document uploaded successfully",
    }

@router.delete("/{plan_id}", response_model=dict)
async def delete_lesson_plan(
    plan_id: UUID,
    db: AsyncSession = Depends(get_db),
    storage: StorageClient = Depends(get_storage),
    profile: Profile = Depends(staff_only),
):
    await LessonPlanService(db, storage).delete_document(plan_id, profile)
    return {"message": "Document deleted successfully", "id": str(plan_id)}
