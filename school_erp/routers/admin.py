"""Platform-wide maintenance endpoints."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from ..clients.auth_admin import AuthAdminClient, get_auth_admin
from ..core.database import get_db
from ..core.security import require_roles
from ..models.enums import UserRole
from ..models.profile import Profile
from ..services.password_reset_service import PasswordResetError, PasswordResetService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin", tags=["Admin"])

@router.post("/reset-passwords")
async def reset_passwords(
    db: AsyncSession = Depends(get_db),
    auth: AuthAdminClient = Depends(get_auth_admin),
    profile: Profile = Depends(require_roles(UserRole.SUPER_ADMIN)),
):
    """Reset every account's password to its role default"""
    logger.info(f"Password reset batch started by {profile.username}")
    try:
        return await PasswordResetService(db, auth).reset_all()
    except PasswordResetError as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.message})
    except Exception as e:
        logger.exception("Password reset batch failed")
        return JSONResponse(status_code=500, content={"error": f"Unexpected error: {e}"})
