import asyncio
import uuid
from types import SimpleNamespace

import httpx
import pytest

from conftest import FakeSession, make_profile, storage_client
from school_erp.core.exceptions import PermissionDenied
from school_erp.models.enums import UserRole
from school_erp.services.lesson_plan_service import LessonPlanService


def stored_plan(school_id, uploaded_by):
    return SimpleNamespace(
        id=uuid.uuid4(),
        school_id=school_id,
        uploaded_by=uploaded_by,
        file_url="https://platform.test/storage/v1/object/public/documents/lesson_plans/s1/1_plan.pdf",
    )


def test_delete_document_removes_file_then_row():
    removed = []

    def handler(request):
        removed.append(request.url.path)
        return httpx.Response(200, json=[])

    teacher = make_profile(UserRole.TEACHER, school_id=uuid.uuid4())
    plan = stored_plan(teacher.school_id, teacher.id)
    session = FakeSession([plan])

    asyncio.run(LessonPlanService(session, storage_client(handler)).delete_document(plan.id, teacher))

    assert removed == ["/storage/v1/object/documents"]
    assert session.deleted == [plan]
    assert session.commits == 1


def test_delete_document_still_deletes_row_when_storage_is_down():
    teacher = make_profile(UserRole.TEACHER, school_id=uuid.uuid4())
    plan = stored_plan(teacher.school_id, teacher.id)
    session = FakeSession([plan])
    storage = storage_client(lambda request: httpx.Response(503, json={"message": "storage down"}))

    asyncio.run(LessonPlanService(session, storage).delete_document(plan.id, teacher))

    assert session.deleted == [plan]
    assert session.commits == 1


def test_teachers_only_delete_their_own_documents():
    teacher = make_profile(UserRole.TEACHER, school_id=uuid.uuid4())
    plan = stored_plan(teacher.school_id, uuid.uuid4())
    session = FakeSession([plan])

    with pytest.raises(PermissionDenied):
        asyncio.run(
            LessonPlanService(session, storage_client(lambda request: httpx.Response(200))).delete_document(plan.id, teacher)
        )
    assert session.deleted == []
