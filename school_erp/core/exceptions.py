# school_erp/core/exceptions.py
"""Custom exceptions for the School ERP application."""
from fastapi import HTTPException
from typing import Any, Dict, Optional


class ErpException(HTTPException):
    """Base exception for the School ERP application."""
    def __init__(
        self,
        status_code: int,
        detail: Any,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class NotFoundError(ErpException):
    """Resource not found."""
    def __init__(self, resource: str, id: Any = None):
        message = f"{resource} not found"
        if id is not None:
            message += f" with id: {id}"
        super().__init__(status_code=404, detail=message)


class AuthenticationError(ErpException):
    """Missing or invalid credentials."""
    def __init__(self, message: str = "Not authenticated"):
        super().__init__(
            status_code=401,
            detail=message,
            headers={"WWW-Authenticate": "Bearer"}
        )


class PermissionDenied(ErpException):
    """Caller's role does not allow this operation."""
    def __init__(self, message: str = "Permission denied"):
        super().__init__(status_code=403, detail=message)


class ValidationError(ErpException):
    """Exception raised for validation errors."""
    def __init__(self, message: str, field: Optional[str] = None):
        detail = {"error": "Validation Error", "message": message}
        if field:
            detail["field"] = field
        super().__init__(status_code=422, detail=detail)


class PlatformError(Exception):
    """A call to the hosted backend platform (auth or storage) failed."""
    def __init__(self, message: str, status_code: int = 502):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)
