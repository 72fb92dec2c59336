# school_erp/utils/uploads.py
"""Validation and storage paths for uploaded PDF documents."""
import re
import time
from typing import Optional

from ..core.exceptions import ValidationError

PDF_CONTENT_TYPE = "application/pdf"


def validate_pdf_upload(content_type: Optional[str], size: int, max_bytes: int) -> None:
    if content_type != PDF_CONTENT_TYPE:
        raise ValidationError("Please select a PDF file", field="file")
    if size > max_bytes:
        raise ValidationError(f"File size must be less than {max_bytes // (1024 * 1024)}MB", field="file")


def build_storage_path(folder: str, school_id, title: str, timestamp_ms: Optional[int] = None) -> str:
    """{folder}/{school_id}/{epoch ms}_{title with non-alphanumerics as _}.pdf"""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    safe_title = re.sub(r"[^a-z0-9]", "_", title, flags=re.IGNORECASE)
    return f"{folder}/{school_id}/{timestamp_ms}_{safe_title}.pdf"
