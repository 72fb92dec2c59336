import asyncio
import uuid
from datetime import date
from types import SimpleNamespace

import pytest

from conftest import FakeSession, make_profile
from school_erp.core.exceptions import ValidationError
from school_erp.models.enums import UserRole
from school_erp.models.exam import ExamResult
from school_erp.schemas.exam_schemas import GradeEntry
from school_erp.services.exam_service import ExamService


def make_exam(total_marks=50):
    return SimpleNamespace(id=uuid.uuid4(), class_id=uuid.uuid4(), total_marks=total_marks)


def existing_result(student_id, marks):
    return SimpleNamespace(
        id=uuid.uuid4(), student_id=student_id, marks_obtained=marks,
        percentage=None, grade=None, remarks=None, graded_by=None, graded_at=None,
    )


def test_save_grades_inserts_updates_and_skips():
    exam = make_exam()
    grader = make_profile(UserRole.TEACHER, school_id=uuid.uuid4())
    new_student, regraded_student, absent_student = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    previous = existing_result(regraded_student, 10)
    session = FakeSession(results=[
        [new_student, regraded_student, absent_student],
        [previous],
    ])

    outcome = asyncio.run(ExamService(session).save_grades(exam, [
        GradeEntry(student_id=new_student, marks_obtained=40),
        GradeEntry(student_id=regraded_student, marks_obtained=24, remarks="Improved"),
        GradeEntry(student_id=absent_student),
    ], grader))

    assert outcome == {"saved": 2, "skipped": 1}
    assert session.commits == 1

    [inserted] = session.added
    assert isinstance(inserted, ExamResult)
    assert inserted.student_id == new_student
    assert inserted.percentage == 80.0
    assert inserted.grade == "B"
    assert inserted.graded_by == grader.id
    assert inserted.graded_at is not None

    assert previous.marks_obtained == 24.0
    assert previous.percentage == 48.0
    assert previous.grade == "F"
    assert previous.remarks == "Improved"
    assert previous.graded_by == grader.id
    assert previous.graded_at == inserted.graded_at


def test_save_grades_rejects_marks_above_total_before_any_query():
    exam = make_exam(total_marks=20)
    session = FakeSession()

    with pytest.raises(ValidationError):
        asyncio.run(ExamService(session).save_grades(
            exam,
            [GradeEntry(student_id=uuid.uuid4(), marks_obtained=21)],
            make_profile(UserRole.TEACHER, school_id=uuid.uuid4()),
        ))
    assert session.statements == []
    assert session.commits == 0


def test_save_grades_rejects_students_outside_the_class():
    exam = make_exam()
    session = FakeSession(results=[[uuid.uuid4()], []])

    with pytest.raises(ValidationError):
        asyncio.run(ExamService(session).save_grades(
            exam,
            [GradeEntry(student_id=uuid.uuid4(), marks_obtained=30)],
            make_profile(UserRole.TEACHER, school_id=uuid.uuid4()),
        ))
    assert session.added == []
    assert session.commits == 0


def test_grade_sheet_joins_roster_with_results():
    exam = make_exam()
    graded_id, ungraded_id = uuid.uuid4(), uuid.uuid4()
    roster = [
        SimpleNamespace(
            Student=SimpleNamespace(id=graded_id, user_id=uuid.uuid4(), roll_number="01"),
            full_name="Amina Yusuf", username="NHS482-ST-10000001",
        ),
        SimpleNamespace(
            Student=SimpleNamespace(id=ungraded_id, user_id=uuid.uuid4(), roll_number="02"),
            full_name="Brian Otieno", username="NHS482-ST-10000002",
        ),
    ]
    result = SimpleNamespace(
        id=uuid.uuid4(), student_id=graded_id, marks_obtained=45,
        percentage=90, grade="A", remarks="Excellent",
    )
    session = FakeSession(results=[roster, [result]])

    sheet = asyncio.run(ExamService(session).grade_sheet(exam))

    assert [row["student_name"] for row in sheet] == ["Amina Yusuf", "Brian Otieno"]
    assert sheet[0]["marks_obtained"] == 45.0
    assert sheet[0]["grade"] == "A"
    assert sheet[0]["result_id"] == str(result.id)
    assert sheet[1]["marks_obtained"] is None
    assert sheet[1]["result_id"] is None


def test_teacher_without_classes_sees_no_exams():
    session = FakeSession(results=[[]])
    teacher = make_profile(UserRole.TEACHER, school_id=uuid.uuid4())

    assert asyncio.run(ExamService(session).list_exams(teacher)) == []
    assert len(session.statements) == 1


def test_teacher_exam_list_is_limited_to_own_exams_in_taught_classes():
    session = FakeSession(results=[[uuid.uuid4()], []])
    teacher = make_profile(UserRole.TEACHER, school_id=uuid.uuid4())

    asyncio.run(ExamService(session).list_exams(teacher))

    sql = str(session.statements[1])
    assert "exams.created_by = " in sql
    assert "exams.school_id = " in sql
    assert "exams.class_id IN" in sql


def test_admin_exam_list_is_limited_to_school():
    exam = SimpleNamespace(
        id=uuid.uuid4(), title="Mid-term", description=None, exam_date=date(2026, 3, 2),
        total_marks=100, class_id=uuid.uuid4(), class_ref=None, subject_id=None, subject=None,
    )
    session = FakeSession(results=[[exam], [28], [12]])
    admin = make_profile(UserRole.SCHOOL_ADMIN, school_id=uuid.uuid4())

    [row] = asyncio.run(ExamService(session).list_exams(admin))

    sql = str(session.statements[0])
    assert "exams.school_id = " in sql
    assert "exams.created_by" not in sql
    assert row["total_students"] == 28
    assert row["graded_count"] == 12
    assert row["subject_name"] == "Unknown"
