import asyncio
import uuid

from conftest import FakeSession, make_profile
from school_erp.models.enums import UserRole
from school_erp.services.dashboard_service import DashboardService


def test_student_without_student_record_has_empty_stats():
    session = FakeSession(results=[[]])
    student = make_profile(UserRole.STUDENT, school_id=uuid.uuid4())

    stats = asyncio.run(DashboardService(session).stats_for(student))

    assert stats == {"role": "student", "stats": {"exams": 0, "averagePercentage": "0"}}
    assert "students.user_id = " in str(session.statements[0])


def test_parent_dashboard_counts_children():
    session = FakeSession(results=[[2]])
    parent = make_profile(UserRole.PARENT, school_id=uuid.uuid4())

    stats = asyncio.run(DashboardService(session).stats_for(parent))

    assert stats == {"role": "parent", "stats": {"children": 2}}
