from datetime import date
from uuid import UUID
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import STAFF_ROLES, require_roles
from ..models.profile import Profile
from ..schemas.attendance_schemas import SaveAttendanceRequest
from ..services.attendance_service import AttendanceService
from ..services.class_service import ClassService
from ..utils.csv_export import attendance_filename, attendance_to_csv

router = APIRouter(prefix="/api/v1/attendance", tags=["Attendance"])

staff_only = require_roles(*STAFF_ROLES)

@router.get("/classes", response_model=dict)
async def get_attendance_classes(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(staff_only),
):
    """Classes the caller may take attendance for"""
    classes = await AttendanceService(db).classes_for(profile)
    return {"items": classes, "total": len(classes)}

@router.get("/classes/{class_id}/students", response_model=dict)
async def get_attendance_roster(
    class_id: UUID,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(staff_only),
):
    await AttendanceService(db).check_class_access(class_id, profile)
    students = await ClassService(db).get_roster(class_id)
    return {"items": students, "total": len(students)}

@router.post("/", response_model=dict)
async def save_attendance(
    attendance: SaveAttendanceRequest,
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(staff_only),
):
    """Replace the class's marks for the day"""
    service = AttendanceService(db)
    class_obj = await service.check_class_access(attendance.class_id, profile)
    saved = await service.save_attendance(class_obj, attendance.date, attendance.entries, profile)
    return {"message": f"Attendance saved for {saved} students", "saved": saved}

@router.get("/history", response_model=dict)
async def get_attendance_history(
    class_id: UUID = Query(...),
    day: date = Query(..., alias="date"),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(staff_only),
):
    service = AttendanceService(db)
    await service.check_class_access(class_id, profile)
    records = await service.history(class_id, day)
    return {"items": records, "total": len(records)}

@router.get("/summary", response_model=dict)
async def get_attendance_summary(
    class_id: UUID = Query(...),
    day: date = Query(..., alias="date"),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(staff_only),
):
    service = AttendanceService(db)
    await service.check_class_access(class_id, profile)
    return await service.summary(class_id, day)

@router.get("/export")
async def export_attendance(
    class_id: UUID = Query(...),
    day: date = Query(..., alias="date"),
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(staff_only),
):
    service = AttendanceService(db)
    await service.check_class_access(class_id, profile)
    records = await service.history(class_id, day)
    return Response(
        content=attendance_to_csv(records),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{attendance_filename(class_id, day)}"'},
    )
