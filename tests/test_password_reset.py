import asyncio
import json
import uuid

import httpx
import pytest
from sqlalchemy.exc import OperationalError

from conftest import FakeSession, ProfileRow, auth_client, make_profile
from school_erp.models.enums import UserRole
from school_erp.services.password_reset_service import (
    PasswordResetError,
    PasswordResetService,
    password_for_role,
)

TEACHER_ID = uuid.uuid4()
STUDENT_ID = uuid.uuid4()
PARENT_ID = uuid.uuid4()

PROFILES = [
    ProfileRow(TEACHER_ID, "teacher@school.test", "NHS482-TC-10000001", UserRole.TEACHER),
    ProfileRow(STUDENT_ID, None, "NHS482-ST-10000002", UserRole.STUDENT),
    ProfileRow(PARENT_ID, "parent@school.test", "NHS482-PR-00000001", UserRole.PARENT),
]


def recording_auth(fail_for=()):
    calls = []

    def handler(request: httpx.Request):
        user_id = request.url.path.rsplit("/", 1)[-1]
        calls.append((user_id, json.loads(request.content)))
        if user_id in {str(i) for i in fail_for}:
            return httpx.Response(404, json={"msg": "User not found"})
        return httpx.Response(200, json={"id": user_id})

    return auth_client(handler), calls


@pytest.mark.parametrize(
    "role, password",
    [
        (UserRole.TEACHER, "Teacher123!"),
        (UserRole.STUDENT, "Student123!"),
        (UserRole.SCHOOL_ADMIN, "Admin123!"),
        (UserRole.SUPER_ADMIN, "Admin123!"),
        (UserRole.PARENT, "Parent123!"),
        ("librarian", "Test123456!"),
    ],
)
def test_password_for_role(role, password):
    assert password_for_role(role) == password


def test_reset_all_updates_every_account_with_role_password():
    auth, calls = recording_auth()
    result = asyncio.run(PasswordResetService(FakeSession(PROFILES), auth).reset_all())

    assert result["success"] is True
    assert result["total"] == 3
    assert result["successCount"] == 3
    assert result["failureCount"] == 0
    assert result["message"] == "Reset 3 of 3 account passwords"
    assert calls == [
        (str(TEACHER_ID), {"password": "Teacher123!", "email_confirm": True}),
        (str(STUDENT_ID), {"password": "Student123!", "email_confirm": True}),
        (str(PARENT_ID), {"password": "Parent123!", "email_confirm": True}),
    ]


def test_reset_all_continues_after_a_failed_account():
    auth, calls = recording_auth(fail_for=[STUDENT_ID])
    result = asyncio.run(PasswordResetService(FakeSession(PROFILES), auth).reset_all())

    assert len(calls) == 3
    assert result["successCount"] == 2
    assert result["failureCount"] == 1
    assert result["message"] == "Reset 2 of 3 account passwords"
    assert result["results"][1] == {
        "email": "unknown",
        "username": "NHS482-ST-10000002",
        "role": "student",
        "success": False,
        "error": "User not found",
    }
    assert "error" not in result["results"][0]


def test_reset_all_records_unexpected_errors_and_continues():
    calls = []

    def handler(request: httpx.Request):
        user_id = request.url.path.rsplit("/", 1)[-1]
        calls.append(user_id)
        if user_id == str(TEACHER_ID):
            raise ValueError("malformed user id")
        return httpx.Response(200, json={"id": user_id})

    result = asyncio.run(PasswordResetService(FakeSession(PROFILES), auth_client(handler)).reset_all())

    assert len(calls) == 3
    assert result["successCount"] == 2
    assert result["results"][0]["success"] is False
    assert result["results"][0]["error"] == "malformed user id"


def test_reset_all_without_profiles():
    auth, calls = recording_auth()
    with pytest.raises(PasswordResetError) as exc:
        asyncio.run(PasswordResetService(FakeSession([]), auth).reset_all())
    assert exc.value.status_code == 400
    assert exc.value.message == "No profiles found"
    assert calls == []


def test_reset_all_when_profiles_cannot_be_loaded():
    auth, _ = recording_auth()
    session = FakeSession(error=OperationalError("SELECT", {}, Exception("connection lost")))
    with pytest.raises(PasswordResetError) as exc:
        asyncio.run(PasswordResetService(session, auth).reset_all())
    assert exc.value.status_code == 500
    assert exc.value.message.startswith("Failed to fetch profiles: ")


def test_endpoint_returns_batch_report(api, session):
    session.rows = PROFILES
    auth, _ = recording_auth(fail_for=[PARENT_ID])
    client = api(profile=make_profile(UserRole.SUPER_ADMIN), auth=auth)

    response = client.post("/api/admin/reset-passwords")

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert body["successCount"] == 2
    assert [r["success"] for r in body["results"]] == [True, True, False]


def test_endpoint_no_profiles_is_bad_request(api, session):
    client = api(profile=make_profile(UserRole.SUPER_ADMIN))
    response = client.post("/api/admin/reset-passwords")
    assert response.status_code == 400
    assert response.json() == {"error": "No profiles found"}


def test_endpoint_fetch_failure_is_server_error(api, session):
    session.error = OperationalError("SELECT", {}, Exception("connection lost"))
    client = api(profile=make_profile(UserRole.SUPER_ADMIN))
    response = client.post("/api/admin/reset-passwords")
    assert response.status_code == 500
    assert response.json()["error"].startswith("Failed to fetch profiles: ")


def test_endpoint_is_limited_to_super_admins(api, session):
    session.rows = PROFILES
    auth, calls = recording_auth()
    client = api(profile=make_profile(UserRole.SCHOOL_ADMIN, school_id=uuid.uuid4()), auth=auth)

    response = client.post("/api/admin/reset-passwords")

    assert response.status_code == 403
    assert calls == []
