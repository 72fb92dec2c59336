import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import httpx
import pytest

from conftest import FakeSession, make_profile, storage_client
from school_erp.core.exceptions import ValidationError
from school_erp.models.enums import UserRole
from school_erp.services.assignment_service import (
    AssignmentService,
    days_until_due,
    submission_status,
    validate_submission_marks,
)

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


def submission(marks=None, submitted_at=None):
    return SimpleNamespace(marks_obtained=marks, submitted_at=submitted_at)


def test_submission_status():
    assert submission_status(submission()) == "pending"
    assert submission_status(submission(submitted_at=NOW)) == "submitted"
    assert submission_status(submission(marks=14, submitted_at=NOW)) == "graded"
    # Marked without an upload still counts as graded
    assert submission_status(submission(marks=0)) == "graded"


def test_days_until_due_rounds_up():
    assert days_until_due(NOW + timedelta(days=1, hours=12), now=NOW) == 2
    assert days_until_due(NOW + timedelta(days=3), now=NOW) == 3
    assert days_until_due(NOW - timedelta(hours=12), now=NOW) == 0
    assert days_until_due(NOW - timedelta(days=2), now=NOW) == -2


def test_validate_submission_marks_bounds():
    validate_submission_marks(0, 20)
    validate_submission_marks(20, 20)
    with pytest.raises(ValidationError):
        validate_submission_marks(20.5, 20)
    with pytest.raises(ValidationError):
        validate_submission_marks(-1, 20)


def test_list_assignments_rejects_unknown_status():
    service = AssignmentService(FakeSession(), storage_client(lambda request: None))
    teacher = make_profile(UserRole.TEACHER, school_id=uuid.uuid4())
    with pytest.raises(ValidationError):
        asyncio.run(service.list_assignments(teacher, status="upcoming"))


def test_create_assignment_rejects_non_pdf_before_touching_storage(api):
    uploads = []

    def handler(request):
        uploads.append(request)

    client = api(
        profile=make_profile(UserRole.TEACHER, school_id=uuid.uuid4()),
        storage=storage_client(handler),
    )
    response = client.post(
        "/api/v1/assignments/",
        data={
            "title": "Essay",
            "class_id": str(uuid.uuid4()),
            "due_date": NOW.isoformat(),
            "total_marks": "20",
        },
        files={"file": ("essay.docx", b"not a pdf", "application/msword")},
    )
    assert response.status_code == 422
    assert response.json()["detail"]["message"] == "Please select a PDF file"
    assert uploads == []


def test_students_cannot_list_assignments(api):
    client = api(profile=make_profile(UserRole.STUDENT, school_id=uuid.uuid4()))
    assert client.get("/api/v1/assignments/").status_code == 403


def test_delete_assignment_survives_storage_failure():
    assignment = SimpleNamespace(
        id=uuid.uuid4(),
        file_url="https://platform.test/storage/v1/object/public/documents/assignments/s1/1_essay.pdf",
    )
    session = FakeSession()
    storage = storage_client(lambda request: httpx.Response(503, json={"message": "storage down"}))

    asyncio.run(AssignmentService(session, storage).delete_assignment(assignment))

    assert session.deleted == [assignment]
    assert session.commits == 1
