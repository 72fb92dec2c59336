from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
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
from ..services.parent_service import ParentService
from ..services.student_service import StudentService

router = APIRouter(prefix="/api/v1/parents", tags=["Parent Management"])

@router.get("/", response_model=dict)
async def get_parents(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(*ADMIN_ROLES)),
):
    parents = await ParentService(db).list_parents(school_id=scoped_school_id(profile))
    return {"items": parents, "total": len(parents)}

@router.post("/", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def create_parent(
    parent_data: AccountCreate,
    db: AsyncSession = Depends(get_db),
    auth: AuthAdminClient = Depends(get_auth_admin),
    profile: Profile = Depends(require_roles(*ADMIN_ROLES)),
):
    """Parents get sequential usernames per school"""
    ensure_same_school(profile, parent_data.school_id)
    result = await AccountService(db, auth).create_account(
        role=UserRole.PARENT,
        email=parent_data.email,
        password=parent_data.password,
        full_name=parent_data.full_name,
        school_id=parent_data.school_id,
    )
    return {**result, "message": f"Parent created with username {result['username']}"}

@router.get("/students", response_model=dict)
async def get_students_for_linking(
    school_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(*ADMIN_ROLES)),
):
    """Students that can be linked to a parent, with their current parent"""
    scope = scoped_school_id(profile)
    students = await StudentService(db).list_students(school_id=scope if scope is not None else school_id)
    return {"items": students, "total": len(students)}

@router.get("/{parent_id}/children", response_model=dict)
async def get_parent_children(
    parent_id: UUID,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(*ADMIN_ROLES)),
):
    parent = await db.get(Profile, parent_id)
    if not parent or UserRole(parent.role) != UserRole.PARENT:
        raise NotFoundError("Parent", parent_id)
    ensure_same_school(profile, parent.school_id)
    children = await StudentService(db).list_students(parent_id=parent_id)
    return {"items": children, "total": len(children)}

@router.delete("/{parent_id}", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def delete_parent(
    parent_id: UUID,
    db: AsyncSession = Depends(get_db),
    auth: AuthAdminClient = Depends(get_auth_admin),
    profile: Profile = Depends(require_roles(*ADMIN_ROLES)),
):
    """Delete a parent; linked students are unlinked by the database"""
    parent = await db.get(Profile, parent_id)
    if not parent or UserRole(parent.role) != UserRole.PARENT:
        raise NotFoundError("Parent", parent_id)
    ensure_same_school(profile, parent.school_id)
    await AccountService(db, auth).delete_account(parent_id, UserRole.PARENT)
    return {"message": "Parent deleted successfully", "parent_id": str(parent_id)}
