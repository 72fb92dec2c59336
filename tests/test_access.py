import uuid

import httpx
import pytest

from conftest import auth_client, make_profile
from school_erp.core.cache_decorators import _key_part
from school_erp.core.exceptions import PermissionDenied
from school_erp.core.navigation import can_access_route, navigation_for_role
from school_erp.core.security import ensure_same_school, scoped_school_id
from school_erp.models.enums import UserRole


def titles(role):
    return [item["title"] for item in navigation_for_role(role)]


def test_navigation_for_super_admin():
    assert "Schools" in titles("super_admin")
    assert "My Grades" not in titles("super_admin")


def test_navigation_for_student_and_parent():
    assert titles("student") == ["Dashboard", "My Grades"]
    assert titles("parent") == ["Dashboard", "Children's Grades"]


def test_can_access_route():
    assert can_access_route("/dashboard/schools", "super_admin")
    assert not can_access_route("/dashboard/schools", "school_admin")
    assert can_access_route("/dashboard/attendance", "teacher")
    assert not can_access_route("/dashboard/unknown", "super_admin")


def test_scoping_helpers():
    school_id = uuid.uuid4()
    admin = make_profile(UserRole.SCHOOL_ADMIN, school_id=school_id)
    super_admin = make_profile(UserRole.SUPER_ADMIN, school_id=school_id)

    assert scoped_school_id(admin) == school_id
    assert scoped_school_id(super_admin) is None

    ensure_same_school(admin, school_id)
    ensure_same_school(super_admin, uuid.uuid4())
    with pytest.raises(PermissionDenied):
        ensure_same_school(admin, uuid.uuid4())


@pytest.mark.parametrize("role", [UserRole.SCHOOL_ADMIN, UserRole.TEACHER])
def test_staff_without_school_are_refused(role):
    orphan = make_profile(role, school_id=None)

    with pytest.raises(PermissionDenied):
        scoped_school_id(orphan)
    with pytest.raises(PermissionDenied):
        ensure_same_school(orphan, uuid.uuid4())


def test_orphaned_admin_cannot_list_classes(api, session):
    client = api(profile=make_profile(UserRole.SCHOOL_ADMIN, school_id=None))
    response = client.get("/api/v1/classes/")
    assert response.status_code == 403
    assert response.json()["detail"] == "Your account is not linked to a school"
    assert session.statements == []


def test_dashboard_cache_key_is_shared_for_admins_only():
    school_id = uuid.uuid4()
    admin = make_profile(UserRole.SCHOOL_ADMIN, school_id=school_id)
    student = make_profile(UserRole.STUDENT, school_id=school_id)

    assert _key_part("profile", admin) == f"school_admin:{school_id}"
    assert _key_part("profile", student) == f"student:{school_id}:{student.id}"


def test_missing_token_is_unauthorized(api):
    client = api()
    response = client.get("/api/v1/me/")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_rejected_token_is_unauthorized(api):
    auth = auth_client(lambda request: httpx.Response(401, json={"msg": "invalid JWT"}))
    client = api(auth=auth)
    response = client.get("/api/v1/me/", headers={"Authorization": "Bearer expired"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired session"


@pytest.mark.parametrize(
    "role, path",
    [
        (UserRole.TEACHER, "/api/v1/schools/"),
        (UserRole.SCHOOL_ADMIN, "/api/v1/schools/"),
        (UserRole.STUDENT, "/api/v1/exams/"),
        (UserRole.PARENT, "/api/v1/grades/my-grades"),
        (UserRole.STUDENT, "/api/v1/grades/children-grades"),
        (UserRole.TEACHER, "/api/v1/parents/"),
    ],
)
def test_role_gates(api, role, path):
    client = api(profile=make_profile(role, school_id=uuid.uuid4()))
    response = client.get(path)
    assert response.status_code == 403


def test_navigation_endpoint(api):
    client = api(profile=make_profile(UserRole.PARENT, school_id=uuid.uuid4()))
    response = client.get("/api/v1/me/navigation")
    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "parent"
    assert [item["href"] for item in body["items"]] == ["/dashboard", "/dashboard/children-grades"]


def test_login_with_unknown_username(api, session):
    client = api()
    response = client.post("/api/auth/login", json={"username": "NHS482-TC-00000000", "password": "x"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Username not found"
