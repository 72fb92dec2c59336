from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.cache_decorators import invalidate_cache_pattern
from ..core.database import get_db
from ..core.exceptions import NotFoundError, ValidationError
from ..core.security import ADMIN_ROLES, STAFF_ROLES, ensure_same_school, require_roles, scoped_school_id
from ..models.profile import Profile
from ..models.teacher_assignment import ClassSubjectAssignment, TeacherSubjectAssignment
from ..schemas.teacher_assignment_schemas import (
    ClassSubjectCreate, ClassTeacherAssign, SubjectCreate, TeacherSubjectCreate,
)
from ..services.class_service import ClassService
from ..services.teacher_assignment_service import SubjectService, TeacherAssignmentService
from ..services.teacher_service import TeacherService

router = APIRouter(prefix="/api/v1/teacher-assignments", tags=["Teacher Assignments"])

admin_only = require_roles(*ADMIN_ROLES)

@router.get("/classes", response_model=dict)
async def get_classes_with_teachers(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(admin_only),
):
    classes = await ClassService(db).list_classes(school_id=scoped_school_id(profile))
    return {"items": classes, "total": len(classes)}

@router.get("/teachers", response_model=dict)
async def get_assignable_teachers(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(admin_only),
):
    teachers = await TeacherService(db).list_teachers(school_id=scoped_school_id(profile))
    return {"items": teachers, "total": len(teachers)}

@router.put("/classes/{class_id}/teacher", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def assign_class_teacher(
    class_id: UUID,
    assignment: ClassTeacherAssign,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(admin_only),
):
    service = ClassService(db)
    ensure_same_school(profile, (await service.get_or_404(class_id)).school_id)
    class_obj = await service.set_class_teacher(class_id, assignment.teacher_id)
    return {
        "message": "Class teacher assigned successfully",
        "class_id": str(class_obj.id),
        "class_teacher_id": str(class_obj.class_teacher_id),
    }

@router.delete("/classes/{class_id}/teacher", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def remove_class_teacher(
    class_id: UUID,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(admin_only),
):
    service = ClassService(db)
    ensure_same_school(profile, (await service.get_or_404(class_id)).school_id)
    await service.set_class_teacher(class_id, None)
    return {"message": "Class teacher removed successfully", "class_id": str(class_id)}

@router.post("/teacher-subjects", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def create_teacher_subject(
    link_data: TeacherSubjectCreate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(admin_only),
):
    teacher = await db.get(Profile, link_data.teacher_id)
    ensure_same_school(profile, teacher.school_id if teacher else None)
    link = await TeacherAssignmentService(db).assign_subject(link_data.teacher_id, link_data.subject_id)
    return {"id": str(link.id), "message": "Subject assigned to teacher successfully"}

@router.delete("/teacher-subjects/{link_id}", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def delete_teacher_subject(
    link_id: UUID,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(admin_only),
):
    link = await db.get(TeacherSubjectAssignment, link_id)
    if not link:
        raise NotFoundError("Teacher subject assignment", link_id)
    ensure_same_school(profile, link.school_id)
    await TeacherAssignmentService(db).delete_link(TeacherSubjectAssignment, link_id)
    return {"message": "Subject removed from teacher successfully", "id": str(link_id)}

@router.get("/class-subjects", response_model=dict)
async def get_class_subjects(
    teacher_id: Optional[UUID] = Query(None),
    class_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(*STAFF_ROLES)),
):
    if class_id is not None:
        ensure_same_school(profile, (await ClassService(db).get_or_404(class_id)).school_id)
    elif teacher_id is None and scoped_school_id(profile) is not None:
        # Without a filter, non super admins only list their own links
        teacher_id = profile.id
    links = await TeacherAssignmentService(db).list_class_subjects(teacher_id=teacher_id, class_id=class_id)
    return {"items": links, "total": len(links)}

@router.post("/class-subjects", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def create_class_subject(
    link_data: ClassSubjectCreate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(admin_only),
):
    ensure_same_school(profile, (await ClassService(db).get_or_404(link_data.class_id)).school_id)
    link = await TeacherAssignmentService(db).assign_class_subject(
        link_data.teacher_id, link_data.class_id, link_data.subject_id
    )
    return {"id": str(link.id), "message": "Teacher assigned to class subject successfully"}

@router.delete("/class-subjects/{link_id}", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def delete_class_subject(
    link_id: UUID,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(admin_only),
):
    link = await db.get(ClassSubjectAssignment, link_id)
    if not link:
        raise NotFoundError("Class subject assignment", link_id)
    ensure_same_school(profile, (await ClassService(db).get_or_404(link.class_id)).school_id)
    await TeacherAssignmentService(db).delete_link(ClassSubjectAssignment, link_id)
    return {"message": "Class subject assignment removed successfully", "id": str(link_id)}

@router.get("/subjects", response_model=dict)
async def get_subjects(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(*STAFF_ROLES)),
):
    subjects = await SubjectService(db).list_subjects(school_id=scoped_school_id(profile))
    return {
        "items": [
            {"id": str(s.id), "name": s.name, "school_id": str(s.school_id)}
            for s in subjects
        ],
        "total": len(subjects),
    }

@router.post("/subjects", response_model=dict)
async def create_subject(
    subject_data: SubjectCreate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(admin_only),
):
    school_id = subject_data.school_id or profile.school_id
    if school_id is None:
        raise ValidationError("school_id is required", field="school_id")
    ensure_same_school(profile, school_id)
    subject = await SubjectService(db).create_subject(school_id, subject_data.name)
    return {"id": str(subject.id), "name": subject.name, "message": "Subject created successfully"}
