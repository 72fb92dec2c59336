import uuid
from datetime import date

from conftest import make_profile
from school_erp.models.enums import AttendanceStatus, UserRole
from school_erp.services.attendance_service import attendance_stats, day_summary


def test_attendance_stats_counts_and_rate():
    stats = attendance_stats([
        AttendanceStatus.PRESENT,
        AttendanceStatus.PRESENT,
        AttendanceStatus.ABSENT,
        "late",
        AttendanceStatus.EXCUSED,
    ])
    assert stats == {
        "totalDays": 5,
        "presentDays": 2,
        "absentDays": 1,
        "lateDays": 1,
        "attendanceRate": 40.0,
    }


def test_attendance_stats_with_no_records():
    assert attendance_stats([])["attendanceRate"] == 0


def test_day_summary_counts_unmarked_students():
    marks = {
        uuid.uuid4(): AttendanceStatus.PRESENT,
        uuid.uuid4(): AttendanceStatus.LATE,
        uuid.uuid4(): "absent",
    }
    assert day_summary(30, marks) == {
        "total": 30,
        "marked": 3,
        "present": 1,
        "absent": 1,
        "late": 1,
    }


def test_save_attendance_requires_at_least_one_entry(api):
    client = api(profile=make_profile(UserRole.TEACHER, school_id=uuid.uuid4()))
    response = client.post("/api/v1/attendance/", json={
        "class_id": str(uuid.uuid4()),
        "date": date(2026, 3, 2).isoformat(),
        "entries": [],
    })
    assert response.status_code == 422


def test_attendance_is_closed_to_students(api):
    client = api(profile=make_profile(UserRole.STUDENT, school_id=uuid.uuid4()))
    response = client.get("/api/v1/attendance/classes")
    assert response.status_code == 403
