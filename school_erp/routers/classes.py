from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.cache_decorators import invalidate_cache_pattern
from ..core.database import get_db
from ..core.security import ADMIN_ROLES, STAFF_ROLES, ensure_same_school, require_roles, scoped_school_id
from ..models.profile import Profile
from ..schemas.class_schemas import ClassCreate
from ..services.class_service import ClassService
from ..services.school_service import SchoolService

router = APIRouter(prefix="/api/v1/classes", tags=["Classes"])

@router.get("/", response_model=dict)
async def get_classes(
    school_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(*STAFF_ROLES)),
):
    """Classes ordered by grade then section, limited to the caller's school"""
    scope = scoped_school_id(profile)
    if scope is not None:
        school_id = scope
    classes = await ClassService(db).list_classes(school_id=school_id)
    return {"items": classes, "total": len(classes)}

@router.get("/schools", response_model=dict)
async def get_schools_with_class_counts(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(*STAFF_ROLES)),
):
    """Schools in scope grouped for the class picker"""
    schools = await SchoolService(db).list_with_counts(
        school_id=scoped_school_id(profile), newest_first=False
    )
    return {"items": schools, "total": len(schools)}

@router.post("/", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def create_class(
    class_data: ClassCreate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(*ADMIN_ROLES)),
):
    ensure_same_school(profile, class_data.school_id)
    class_obj = await ClassService(db).create_class(class_data.model_dump())
    return {
        "id": str(class_obj.id),
        "message": "Class created successfully",
        "grade_level": class_obj.grade_level,
        "section": class_obj.section,
        "academic_year": class_obj.academic_year,
    }

@router.get("/{class_id}/students", response_model=dict)
async def get_class_students(
    class_id: UUID,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(*STAFF_ROLES)),
):
    service = ClassService(db)
    class_obj = await service.get_or_404(class_id)
    ensure_same_school(profile, class_obj.school_id)
    students = await service.get_roster(class_id)
    return {"class_id": str(class_id), "class_name": class_obj.label, "items": students, "total": len(students)}

@router.delete("/{class_id}", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def delete_class(
    class_id: UUID,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(*ADMIN_ROLES)),
):
    """Delete a class; its students stay enrolled without a class"""
    service = ClassService(db)
    class_obj = await service.get_or_404(class_id)
    ensure_same_school(profile, class_obj.school_id)
    await service.delete(class_id)
    return {"message": "Class deleted successfully", "class_id": str(class_id)}
