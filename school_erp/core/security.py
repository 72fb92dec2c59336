# school_erp/core/security.py
"""Caller resolution and role gates."""
from typing import Optional
from uuid import UUID
import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .database import get_db
from .exceptions import AuthenticationError, PermissionDenied, PlatformError
from ..clients.auth_admin import AuthAdminClient, get_auth_admin
from ..models.enums import UserRole
from ..models.profile import Profile

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

# Roles that manage a whole school (or every school)
ADMIN_ROLES = (UserRole.SUPER_ADMIN, UserRole.SCHOOL_ADMIN)
STAFF_ROLES = (UserRole.SUPER_ADMIN, UserRole.SCHOOL_ADMIN, UserRole.TEACHER)


async def get_current_profile(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
    auth: AuthAdminClient = Depends(get_auth_admin),
) -> Profile:
    """Resolve the bearer token through the platform and load the caller's profile."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()

    try:
        user = await auth.get_user(credentials.credentials)
    except PlatformError as e:
        logger.warning(f"Token rejected by platform: {e.message}")
        raise AuthenticationError("Invalid or expired session")

    user_id = (user or {}).get("id")
    if not user_id:
        raise AuthenticationError("Invalid or expired session")

    result = await db.execute(select(Profile).where(Profile.id == UUID(str(user_id))))
    profile = result.scalar_one_or_none()
    if profile is None:
        raise AuthenticationError("Profile not found for this account")
    return profile


def require_roles(*roles: UserRole):
    """Dependency factory: only callers holding one of ``roles`` get through."""
    allowed = {UserRole(role) for role in roles}

    async def dependency(profile: Profile = Depends(get_current_profile)) -> Profile:
        if UserRole(profile.role) not in allowed:
            raise PermissionDenied(
                f"Role '{UserRole(profile.role).value}' cannot access this resource"
            )
        return profile

    return dependency


def scoped_school_id(profile: Profile) -> Optional[UUID]:
    """
    School filter for a caller: None (no filter) for super admins. Any other
    role without a school is refused rather than left unfiltered.
    """
    if UserRole(profile.role) == UserRole.SUPER_ADMIN:
        return None
    if profile.school_id is None:
        raise PermissionDenied("Your account is not linked to a school")
    return profile.school_id


def ensure_same_school(profile: Profile, school_id: Optional[UUID]) -> None:
    scope = scoped_school_id(profile)
    if scope is not None and school_id != scope:
        raise PermissionDenied("This record belongs to another school")
