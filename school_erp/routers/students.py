from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..clients.auth_admin import AuthAdminClient, get_auth_admin
from ..core.cache_decorators import invalidate_cache_pattern
from ..core.database import get_db
from ..core.exceptions import PermissionDenied, ValidationError
from ..core.security import (
    ADMIN_ROLES, STAFF_ROLES, ensure_same_school, get_current_profile, require_roles, scoped_school_id,
)
from ..models.enums import UserRole
from ..models.profile import Profile
from ..schemas.account_schemas import ParentLink, StudentCreate
from ..services.account_service import AccountService
from ..services.attendance_service import AttendanceService
from ..services.class_service import ClassService
from ..services.student_service import StudentService

router = APIRouter(prefix="/api/v1/students", tags=["Students"])

@router.get("/", response_model=dict)
async def get_students(
    class_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(*STAFF_ROLES)),
):
    """Students in scope with username, class, school and parent name"""
    students = await StudentService(db).list_students(
        school_id=scoped_school_id(profile), class_id=class_id
    )
    return {"items": students, "total": len(students)}

@router.post("/", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def create_student(
    student_data: StudentCreate,
    db: AsyncSession = Depends(get_db),
    auth: AuthAdminClient = Depends(get_auth_admin),
    profile: Profile = Depends(require_roles(*ADMIN_ROLES)),
):
    ensure_same_school(profile, student_data.school_id)
    if student_data.class_id is not None:
        class_obj = await ClassService(db).get_or_404(student_data.class_id)
        if class_obj.school_id != student_data.school_id:
            raise ValidationError("Class belongs to another school", field="class_id")

    result = await AccountService(db, auth).create_account(
        role=UserRole.STUDENT,
        email=student_data.email,
        password=student_data.password,
        full_name=student_data.full_name,
        school_id=student_data.school_id,
        class_id=student_data.class_id,
        roll_number=student_data.roll_number,
    )
    return {**result, "message": f"Student created with username {result['username']}"}

@router.delete("/{student_id}", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def delete_student(
    student_id: UUID,
    db: AsyncSession = Depends(get_db),
    auth: AuthAdminClient = Depends(get_auth_admin),
    profile: Profile = Depends(require_roles(*ADMIN_ROLES)),
):
    """Delete the student's account; the student record goes with the profile"""
    student = await StudentService(db).get_or_404(student_id)
    ensure_same_school(profile, student.school_id)
    await AccountService(db, auth).delete_account(student.user_id, UserRole.STUDENT)
    return {"message": "Student deleted successfully", "student_id": str(student_id)}

@router.put("/{student_id}/parent", response_model=dict)
async def link_parent(
    student_id: UUID,
    link: ParentLink,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(*ADMIN_ROLES)),
):
    service = StudentService(db)
    student = await service.get_or_404(student_id)
    ensure_same_school(profile, student.school_id)
    parent = await db.get(Profile, link.parent_id)
    if parent is not None and parent.school_id != student.school_id:
        raise ValidationError("Parent belongs to another school", field="parent_id")
    student = await service.set_parent(student_id, link.parent_id)
    return {"message": "Parent linked successfully", "student_id": str(student.id), "parent_id": str(student.parent_id)}

@router.delete("/{student_id}/parent", response_model=dict)
async def unlink_parent(
    student_id: UUID,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(*ADMIN_ROLES)),
):
    service = StudentService(db)
    student = await service.get_or_404(student_id)
    ensure_same_school(profile, student.school_id)
    await service.set_parent(student_id, None)
    return {"message": "Parent unlinked successfully", "student_id": str(student_id)}

@router.get("/{student_id}/attendance-stats", response_model=dict)
async def get_student_attendance_stats(
    student_id: UUID,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    """Attendance totals and rate since the first of the month"""
    student = await StudentService(db).get_or_404(student_id)
    role = UserRole(profile.role)
    if role == UserRole.STUDENT and student.user_id != profile.id:
        raise PermissionDenied("Students can only view their own attendance")
    if role == UserRole.PARENT and student.parent_id != profile.id:
        raise PermissionDenied("Parents can only view their own children's attendance")
    ensure_same_school(profile, student.school_id)
    return await AttendanceService(db).student_stats(student.id)
