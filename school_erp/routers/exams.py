from uuid import UUID
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.cache_decorators import invalidate_cache_pattern
from ..core.database import get_db
from ..core.security import STAFF_ROLES, require_roles
from ..models.profile import Profile
from ..schemas.exam_schemas import ExamCreate, SaveGradesRequest
from ..services.exam_service import ExamService
from ..utils.csv_export import exam_results_filename, exam_results_to_csv

router = APIRouter(prefix="/api/v1/exams", tags=["Exams"])

staff_only = require_roles(*STAFF_ROLES)

@router.get("/", response_model=dict)
async def get_exams(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(staff_only),
):
    """Newest exams first with graded and class-size counts"""
    exams = await ExamService(db).list_exams(profile)
    return {"items": exams, "total": len(exams)}

@router.post("/", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def create_exam(
    exam_data: ExamCreate,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(staff_only),
):
    exam = await ExamService(db).create_exam(exam_data.model_dump(), profile)
    return {
        "id": str(exam.id),
        "message": "Exam created successfully",
        "title": exam.title,
        "exam_date": exam.exam_date.isoformat(),
        "total_marks": exam.total_marks,
    }

@router.delete("/{exam_id}", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def delete_exam(
    exam_id: UUID,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(staff_only),
):
    """Delete an exam together with its results"""
    service = ExamService(db)
    exam = await service.get_for(exam_id, profile)
    await service.delete(exam.id)
    return {"message": "Exam deleted successfully", "exam_id": str(exam_id)}

@router.get("/{exam_id}/grades", response_model=dict)
async def get_grade_sheet(
    exam_id: UUID,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(staff_only),
):
    service = ExamService(db)
    exam = await service.get_for(exam_id, profile)
    return {
        "exam_id": str(exam.id),
        "title": exam.title,
        "total_marks": exam.total_marks,
        "students": await service.grade_sheet(exam),
    }

@router.post("/{exam_id}/grades", response_model=dict)
@invalidate_cache_pattern("dashboard:*")
async def save_grades(
    exam_id: UUID,
    grades: SaveGradesRequest,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(staff_only),
):
    service = ExamService(db)
    exam = await service.get_for(exam_id, profile)
    counts = await service.save_grades(exam, grades.grades, profile)
    return {**counts, "message": f"Saved {counts['saved']} grades"}

@router.get("/{exam_id}/export")
async def export_exam_results(
    exam_id: UUID,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(staff_only),
):
    """Graded students of the exam as a CSV download"""
    service = ExamService(db)
    exam = await service.get_for(exam_id, profile)
    graded = [row for row in await service.grade_sheet(exam) if row["result_id"] is not None]
    return Response(
        content=exam_results_to_csv(graded),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{exam_results_filename(exam.id)}"'},
    )
