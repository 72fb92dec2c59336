from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.cache_decorators import invalidate_cache_pattern
from ..core.database import get_db
from ..core.exceptions import NotFoundError
from ..core.security import require_roles
from ..models.enums import UserRole
from ..models.profile import Profile
from ..schemas.school_schemas import SchoolCreate, SchoolUpdate
from ..services.school_service import SchoolService

router = APIRouter(prefix="/api/v1/schools", tags=["Schools"])

super_admin_only = require_roles(UserRole.SUPER_ADMIN)

@router.get("/", response_model=dict)
async def get_schools(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(super_admin_only),
):
    """All schools, newest first, with class/student/teacher counts"""
    service = SchoolService(db)
    schools = await service.list_with_counts()
    return {"items": schools, "total": len(schools)}

@router.post("/", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def create_school(
    school_data: SchoolCreate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(super_admin_only),
):
    service = SchoolService(db)
    school = await service.create_school(school_data.model_dump())
    return {
        **SchoolService.to_dict(school),
        "message": f"School created successfully with code {school.school_code}",
    }

@router.get("/{school_id}", response_model=dict)
async def get_school(
    school_id: UUID,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(super_admin_only),
):
    service = SchoolService(db)
    return SchoolService.to_dict(await service.get_or_404(school_id))

@router.put("/{school_id}", response_model=dict)
async def update_school(
    school_id: UUID,
    school_data: SchoolUpdate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(super_admin_only),
):
    service = SchoolService(db)
    school = await service.update(school_id, school_data.model_dump(exclude_unset=True))
    if not school:
        raise NotFoundError("School", school_id)
    return {**SchoolService.to_dict(school), "message": "School updated successfully"}

@router.delete("/{school_id}", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def delete_school(
    school_id: UUID,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(super_admin_only),
):
    """Delete a school; its classes and records follow the database's delete rules"""
    service = SchoolService(db)
    if not await service.delete(school_id):
        raise NotFoundError("School", school_id)
    return {"message": "School deleted successfully", "school_id": str(school_id)}
