# school_erp/services/lesson_plan_service.py
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .base_service import BaseService
from ..clients.storage import StorageClient
from ..core.config import settings
from ..core.exceptions import NotFoundError, PermissionDenied, PlatformError
from ..core.security import ensure_same_school, scoped_school_id
from ..models.class_model import ClassModel
from ..models.enums import UserRole
from ..models.lesson_plan import LessonPlan
from ..models.profile import Profile
from ..utils.uploads import build_storage_path, validate_pdf_upload

logger = logging.getLogger(__name__)

class LessonPlanService(BaseService[LessonPlan]):
    label = "Lesson plan"

    def __init__(self, db: AsyncSession, storage: StorageClient):
        super().__init__(LessonPlan, db)
        self.storage = storage

    async def list_documents(
        self,
        profile: Profile,
        class_id: Optional[UUID] = None,
        subject_id: Optional[UUID] = None,
    ) -> List[Dict[str, Any]]:
        stmt = (
            select(LessonPlan)
            .options(
                selectinload(LessonPlan.teacher),
                selectinload(LessonPlan.subject),
                selectinload(LessonPlan.class_ref),
            )
            .order_by(LessonPlan.uploaded_at.desc())
        )
        school_id = scoped_school_id(profile)
        if school_id is not None:
            stmt = stmt.where(LessonPlan.school_id == school_id)
        if class_id is not None:
            stmt = stmt.where(LessonPlan.class_id == class_id)
        if subject_id is not None:
            stmt = stmt.where(LessonPlan.subject_id == subject_id)

        result = await self.db.execute(stmt)
        return [self.to_dict(plan) for plan in result.scalars().all()]

    @staticmethod
    def to_dict(plan: LessonPlan) -> Dict[str, Any]:
        return {
            "id": str(plan.id),
            "title": plan.title,
            "description": plan.description,
            "document_type": plan.document_type.value if hasattr(plan.document_type, "value") else plan.document_type,
            "file_url": plan.file_url,
            "file_name": plan.file_name,
            "class_id": str(plan.class_id),
            "subject_id": str(plan.subject_id) if plan.subject_id else None,
            "period_start": plan.period_start.isoformat() if plan.period_start else None,
            "period_end": plan.period_end.isoformat() if plan.period_end else None,
            "uploaded_at": plan.uploaded_at.isoformat() if plan.uploaded_at else None,
            "teacher_name": plan.teacher.full_name if plan.teacher else "Unknown",
            "subject_name": plan.subject.name if plan.subject else "Unknown",
            "class_name": plan.class_ref.label if plan.class_ref else "",
        }

    async def upload(
        self,
        profile: Profile,
        data: Dict[str, Any],
        file_name: str,
        content: bytes,
        content_type: Optional[str],
    ) -> LessonPlan:
        validate_pdf_upload(content_type, len(content), settings.max_upload_bytes)

        class_obj = await self.db.get(ClassModel, data["class_id"])
        if not class_obj:
            raise NotFoundError("Class", data["class_id"])
        ensure_same_school(profile, class_obj.school_id)

        path = build_storage_path("lesson_plans", class_obj.school_id, data["title"])
        file_url = await self.storage.upload(path, content, content_type)

        plan = await self.create({
            **data,
            "file_url": file_url,
            "file_name": file_name,
            "uploaded_by": profile.id,
            "school_id": class_obj.school_id,
        })
        logger.info(f"Uploaded {plan.document_type} {plan.id} for class {class_obj.id}")
        return plan

    async def delete_document(self, plan_id: UUID, profile: Profile) -> None:
        plan = await self.get_or_404(plan_id)
        ensure_same_school(profile, plan.school_id)
        if UserRole(profile.role) == UserRole.TEACHER and plan.uploaded_by != profile.id:
            raise PermissionDenied("Only the uploader can delete this document")

        path = self.storage.path_from_public_url(plan.file_url)
        if path:
            try:
                await self.storage.remove([path])
            except PlatformError as e:
                logger.warning("Stored file %s of lesson plan %s not removed: %s", path, plan_id, e.message)
        await self.delete(plan_id)
