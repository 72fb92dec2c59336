import asyncio
import json
import re
import uuid
from datetime import date
from types import SimpleNamespace

import httpx
import pytest
from sqlalchemy.exc import IntegrityError

from conftest import FakeSession, auth_client
from school_erp.core.exceptions import ErpException, PlatformError
from school_erp.models.enums import UserRole
from school_erp.models.profile import Profile
from school_erp.models.student import Student
from school_erp.services.account_service import AccountService

SCHOOL = SimpleNamespace(id=uuid.uuid4(), school_code="NHS482")


def platform_user(created):
    def handler(request: httpx.Request):
        created.append(json.loads(request.content))
        return httpx.Response(200, json={"id": str(uuid.uuid4()), "email": "new@school.test"})
    return handler


def test_parent_gets_next_sequential_username():
    created = []
    session = FakeSession(results=[[3]], objects={SCHOOL.id: SCHOOL})
    service = AccountService(session, auth_client(platform_user(created)))

    account = asyncio.run(service.create_account(
        UserRole.PARENT, "parent@school.test", "Secret123!", "Grace Wanjiru", SCHOOL.id,
    ))

    assert account["username"] == "NHS482-PR-00000004"
    assert created[0]["email_confirm"] is True
    assert created[0]["user_metadata"] == {"full_name": "Grace Wanjiru"}
    [profile] = session.added
    assert isinstance(profile, Profile)
    assert profile.role == UserRole.PARENT
    assert profile.school_id == SCHOOL.id
    assert session.commits == 1


def test_student_account_also_creates_student_row():
    class_id = uuid.uuid4()
    session = FakeSession(objects={SCHOOL.id: SCHOOL})
    service = AccountService(session, auth_client(platform_user([])))

    account = asyncio.run(service.create_account(
        UserRole.STUDENT, "student@school.test", "Secret123!", "Amina Yusuf", SCHOOL.id,
        class_id=class_id, roll_number="07",
    ))

    assert re.fullmatch(r"NHS482-ST-\d{8}", account["username"])
    profile, student = session.added
    assert isinstance(student, Student)
    assert student.user_id == profile.id
    assert str(profile.id) == account["user_id"]
    assert student.class_id == class_id
    assert student.roll_number == "07"
    assert student.admission_date == date.today()


def test_duplicate_profile_is_a_conflict():
    session = FakeSession(
        objects={SCHOOL.id: SCHOOL},
        commit_error=IntegrityError("INSERT INTO profiles", {}, Exception("duplicate key value")),
    )
    service = AccountService(session, auth_client(platform_user([])))

    with pytest.raises(ErpException) as exc_info:
        asyncio.run(service.create_account(
            UserRole.TEACHER, "teacher@school.test", "Secret123!", "Peter Kamau", SCHOOL.id,
        ))
    assert exc_info.value.status_code == 409
    assert session.rollbacks == 1


def test_platform_failure_stops_before_any_insert():
    session = FakeSession(objects={SCHOOL.id: SCHOOL})
    auth = auth_client(lambda request: httpx.Response(422, json={"msg": "User already registered"}))

    with pytest.raises(PlatformError) as exc_info:
        asyncio.run(AccountService(session, auth).create_account(
            UserRole.TEACHER, "teacher@school.test", "Secret123!", "Peter Kamau", SCHOOL.id,
        ))
    assert exc_info.value.message == "User already registered"
    assert session.added == []
