from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..clients.auth_admin import AuthAdminClient, get_auth_admin
from ..core.cache_decorators import invalidate_cache_pattern
from ..core.database import get_db
from ..core.exceptions import NotFoundError
from ..core.security import ADMIN_ROLES, ensure_same_school, require_roles, scoped_school_id
from ..models.enums import UserRole
from ..models.profile import Profile
from ..schemas.account_schemas import AccountCreate
from ..services.account_service import AccountService
from ..services.teacher_service import TeacherService

router = APIRouter(prefix="/api/v1/teachers", tags=["Teachers"])

@router.get("/", response_model=dict)
async def get_teachers(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(*ADMIN_ROLES)),
):
    """Teachers in scope with their subject names and class labels"""
    teachers = await TeacherService(db).list_teachers(school_id=scoped_school_id(profile))
    return {"items": teachers, "total": len(teachers)}

@router.post("/", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def create_teacher(
    teacher_data: AccountCreate,
    db: AsyncSession = Depends(get_db),
    auth: AuthAdminClient = Depends(get_auth_admin),
    profile: Profile = Depends(require_roles(*ADMIN_ROLES)),
):
    ensure_same_school(profile, teacher_data.school_id)
    result = await AccountService(db, auth).create_account(
        role=UserRole.TEACHER,
        email=teacher_data.email,
        password=teacher_data.password,
        full_name=teacher_data.full_name,
        school_id=teacher_data.school_id,
    )
    return {**result, "message": f"Teacher created with username {result['username']}"}

@router.get("/me/stats", response_model=dict)
async def get_my_teaching_stats(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(UserRole.TEACHER)),
):
    """Classes, subjects and students for the signed-in teacher"""
    return await TeacherService(db).teaching_load(profile)

@router.get("/{teacher_id}/stats", response_model=dict)
async def get_teacher_stats(
    teacher_id: UUID,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(*ADMIN_ROLES)),
):
    teacher = await db.get(Profile, teacher_id)
    if not teacher or UserRole(teacher.role) != UserRole.TEACHER:
        raise NotFoundError("Teacher", teacher_id)
    ensure_same_school(profile, teacher.school_id)
    return await TeacherService(db).teaching_load(teacher)

@router.delete("/{teacher_id}", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def delete_teacher(
    teacher_id: UUID,
    db: AsyncSession = Depends(get_db),
    auth: AuthAdminClient = Depends(get_auth_admin),
    profile: Profile = Depends(require_roles(*ADMIN_ROLES)),
):
    teacher = await db.get(Profile, teacher_id)
    if not teacher or UserRole(teacher.role) != UserRole.TEACHER:
        raise NotFoundError("Teacher", teacher_id)
    ensure_same_school(profile, teacher.school_id)
    await AccountService(db, auth).delete_account(teacher_id, UserRole.TEACHER)
    return {"message": "Teacher deleted successfully", "teacher_id": str(teacher_id)}
