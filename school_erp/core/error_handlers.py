from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging

from .exceptions import PlatformError

logger = logging.getLogger(__name__)

async def platform_exception_handler(request: Request, exc: PlatformError):
    """Surface platform failures as a plain error message"""
    logger.error(f"Platform error: {exc.message} - Path: {request.url.path}")
    status_code = 400 if 400 <= exc.status_code < 500 else 502
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.message}
    )

async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.exception(f"Unexpected error: {str(exc)} - Path: {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "type": "InternalError"}
    )

def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(PlatformError, platform_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
