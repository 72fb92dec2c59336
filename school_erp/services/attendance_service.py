# school_erp/services/attendance_service.py
from datetime import date
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID
import logging

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from .base_service import BaseService
from .class_service import ClassService
from ..core.exceptions import NotFoundError, PermissionDenied, ValidationError
from ..core.security import ensure_same_school, scoped_school_id
from ..models.attendance import Attendance
from ..models.class_model import ClassModel
from ..models.enums import AttendanceStatus, UserRole
from ..models.profile import Profile
from ..models.student import Student
from ..schemas.attendance_schemas import AttendanceEntry

logger = logging.getLogger(__name__)


def _status_value(status) -> str:
    return status.value if isinstance(status, AttendanceStatus) else str(status)


def attendance_stats(statuses: Iterable) -> Dict[str, Any]:
    """Totals per status and the present rate over all recorded days"""
    values = [_status_value(s) for s in statuses]
    total = len(values)
    present = values.count(AttendanceStatus.PRESENT.value)
    return {
        "totalDays": total,
        "presentDays": present,
        "absentDays": values.count(AttendanceStatus.ABSENT.value),
        "lateDays": values.count(AttendanceStatus.LATE.value),
        "attendanceRate": (present / total) * 100 if total > 0 else 0,
    }


def day_summary(total_students: int, marks: Dict[Any, Any]) -> Dict[str, int]:
    """Counts for a class on one day from a student -> status mapping"""
    values = [_status_value(s) for s in marks.values()]
    return {
        "total": total_students,
        "marked": len(values),
        "present": values.count(AttendanceStatus.PRESENT.value),
        "absent": values.count(AttendanceStatus.ABSENT.value),
        "late": values.count(AttendanceStatus.LATE.value),
    }


class AttendanceService(BaseService[Attendance]):
    def __init__(self, db: AsyncSession):
        super().__init__(Attendance, db)

    async def classes_for(self, profile: Profile) -> List[Dict[str, Any]]:
        """Teachers mark their own classes; admins mark any class in scope"""
        classes = ClassService(self.db)
        if UserRole(profile.role) == UserRole.TEACHER:
            return await classes.list_classes(class_teacher_id=profile.id)
        return await classes.list_classes(school_id=scoped_school_id(profile))

    async def check_class_access(self, class_id: UUID, profile: Profile) -> ClassModel:
        class_obj = await self.db.get(ClassModel, class_id)
        if not class_obj:
            raise NotFoundError("Class", class_id)
        ensure_same_school(profile, class_obj.school_id)
        if UserRole(profile.role) == UserRole.TEACHER and class_obj.class_teacher_id != profile.id:
            raise PermissionDenied("Only the class teacher can take attendance for this class")
        return class_obj

    async def save_attendance(
        self,
        class_obj: ClassModel,
        day: date,
        entries: List[AttendanceEntry],
        marked_by: Profile,
    ) -> int:
        """Replace the class's attendance for the day with the given entries"""
        if not entries:
            raise ValidationError("Please mark attendance for at least one student")

        roster_ids = set(await ClassService(self.db).student_ids(class_obj.id))
        unknown = [str(e.student_id) for e in entries if e.student_id not in roster_ids]
        if unknown:
            raise ValidationError(f"Students not in this class: {', '.join(unknown)}", field="student_id")

        await self.db.execute(
            delete(Attendance).where(Attendance.class_id == class_obj.id, Attendance.date == day)
        )
        self.db.add_all([
            Attendance(
                student_id=entry.student_id,
                class_id=class_obj.id,
                school_id=class_obj.school_id,
                date=day,
                status=entry.status,
                remarks=entry.remarks or None,
                marked_by=marked_by.id,
            )
            for entry in entries
        ])
        await self.db.commit()
        logger.info("Saved attendance for class %s on %s (%d students)", class_obj.id, day, len(entries))
        return len(entries)

    async def history(self, class_id: UUID, day: date) -> List[Dict[str, Any]]:
        stmt = (
            select(Attendance, Student.roll_number, Profile.full_name)
            .join(Student, Student.id == Attendance.student_id)
            .join(Profile, Profile.id == Student.user_id)
            .where(Attendance.class_id == class_id, Attendance.date == day)
            .order_by(Student.roll_number.asc().nulls_last())
        )
        rows = (await self.db.execute(stmt)).all()
        return [
            {
                "id": str(row.Attendance.id),
                "student_id": str(row.Attendance.student_id),
                "class_id": str(row.Attendance.class_id),
                "date": row.Attendance.date.isoformat(),
                "status": _status_value(row.Attendance.status),
                "remarks": row.Attendance.remarks,
                "marked_by": str(row.Attendance.marked_by) if row.Attendance.marked_by else None,
                "marked_at": row.Attendance.marked_at.isoformat() if row.Attendance.marked_at else None,
                "student_name": row.full_name or "Unknown",
                "roll_number": row.roll_number or "N/A",
            }
            for row in rows
        ]

    async def student_stats(self, student_id: UUID, today: Optional[date] = None) -> Dict[str, Any]:
        """Attendance stats from the first of the current month"""
        today = today or date.today()
        start = today.replace(day=1)
        result = await self.db.execute(
            select(Attendance.status).where(Attendance.student_id == student_id, Attendance.date >= start)
        )
        return {"since": start.isoformat(), **attendance_stats(result.scalars().all())}

    async def summary(self, class_id: UUID, day: date) -> Dict[str, int]:
        total = len(await ClassService(self.db).student_ids(class_id))
        result = await self.db.execute(
            select(Attendance.student_id, Attendance.status).where(
                Attendance.class_id == class_id, Attendance.date == day
            )
        )
        return day_summary(total, {student_id: status for student_id, status in result.all()})
