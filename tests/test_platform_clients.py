import asyncio
import json

import httpx
import pytest

from conftest import auth_client, storage_client
from school_erp.core.exceptions import PlatformError, ValidationError
from school_erp.utils.uploads import build_storage_path, validate_pdf_upload


def test_validate_pdf_upload_accepts_small_pdf():
    validate_pdf_upload("application/pdf", 1024, 10 * 1024 * 1024)


def test_validate_pdf_upload_rejects_other_types():
    with pytest.raises(ValidationError) as exc:
        validate_pdf_upload("image/png", 1024, 10 * 1024 * 1024)
    assert exc.value.status_code == 422
    assert exc.value.detail["message"] == "Please select a PDF file"


def test_validate_pdf_upload_rejects_large_files():
    with pytest.raises(ValidationError) as exc:
        validate_pdf_upload("application/pdf", 10 * 1024 * 1024 + 1, 10 * 1024 * 1024)
    assert exc.value.detail["message"] == "File size must be less than 10MB"


def test_build_storage_path_sanitizes_title():
    path = build_storage_path("lesson_plans", "school-1", "Week 3: Algebra & Graphs", timestamp_ms=1700000000000)
    assert path == "lesson_plans/school-1/1700000000000_Week_3__Algebra___Graphs.pdf"


def test_storage_upload_posts_to_bucket_and_returns_public_url():
    seen = {}

    def handler(request: httpx.Request):
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["content_type"] = request.headers["content-type"]
        seen["apikey"] = request.headers["apikey"]
        return httpx.Response(200, json={"Key": "documents/assignments/s1/1_t.pdf"})

    storage = storage_client(handler)
    url = asyncio.run(storage.upload("assignments/s1/1_t.pdf", b"%PDF-1.4", "application/pdf"))

    assert seen["method"] == "POST"
    assert seen["url"] == "https://platform.test/storage/v1/object/documents/assignments/s1/1_t.pdf"
    assert seen["content_type"] == "application/pdf"
    assert seen["apikey"] == "service-key"
    assert url == "https://platform.test/storage/v1/object/public/documents/assignments/s1/1_t.pdf"


def test_storage_remove_sends_prefixes():
    seen = {}

    def handler(request: httpx.Request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=[])

    storage = storage_client(handler)
    asyncio.run(storage.remove(["lesson_plans/s1/1_plan.pdf"]))

    assert seen == {
        "method": "DELETE",
        "path": "/storage/v1/object/documents",
        "body": {"prefixes": ["lesson_plans/s1/1_plan.pdf"]},
    }


def test_path_from_public_url():
    storage = storage_client(lambda request: httpx.Response(200))
    url = storage.get_public_url("assignments/s1/1_t.pdf")
    assert storage.path_from_public_url(url) == "assignments/s1/1_t.pdf"
    assert storage.path_from_public_url("https://elsewhere.test/file.pdf") is None
    assert storage.path_from_public_url(None) is None


def test_update_user_by_id_sends_password_and_confirmation():
    seen = {}

    def handler(request: httpx.Request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "u1"})

    auth = auth_client(handler)
    asyncio.run(auth.update_user_by_id("u1", password="Teacher123!", email_confirm=True))

    assert seen["method"] == "PUT"
    assert seen["path"] == "/auth/v1/admin/users/u1"
    assert seen["body"] == {"password": "Teacher123!", "email_confirm": True}


def test_platform_error_carries_message_and_status():
    auth = auth_client(lambda request: httpx.Response(422, json={"msg": "Password should be at least 6 characters"}))
    with pytest.raises(PlatformError) as exc:
        asyncio.run(auth.create_user("a@school.test", "123", "A"))
    assert exc.value.status_code == 422
    assert exc.value.message == "Password should be at least 6 characters"


def test_network_failure_becomes_bad_gateway():
    def handler(request: httpx.Request):
        raise httpx.ConnectError("connection refused", request=request)

    auth = auth_client(handler)
    with pytest.raises(PlatformError) as exc:
        asyncio.run(auth.delete_user("u1"))
    assert exc.value.status_code == 502
