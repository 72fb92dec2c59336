"""Username/password login against the platform."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from ..clients.auth_admin import AuthAdminClient, get_auth_admin
from ..core.database import get_db
from ..core.exceptions import AuthenticationError, PlatformError
from ..schemas.account_schemas import LoginRequest
from ..services.account_service import AccountService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["Authentication"])

@router.post("/login")
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
    auth: AuthAdminClient = Depends(get_auth_admin),
):
    """Look the username up, then sign in with the account's email"""
    service = AccountService(db, auth)
    profile = await service.find_by_username(credentials.username)
    if profile is None:
        raise AuthenticationError("Username not found")

    try:
        session = await auth.sign_in_with_password(profile.email, credentials.password)
    except PlatformError as e:
        logger.info(f"Sign-in rejected for {profile.username}: {e.message}")
        raise AuthenticationError(e.message)

    return {
        "session": session,
        "profile": AccountService.to_dict(profile),
    }
