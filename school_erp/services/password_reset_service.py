# school_erp/services/password_reset_service.py
"""Batch reset of every account password to its role default."""
from typing import Any, Dict, List
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..clients.auth_admin import AuthAdminClient
from ..core.exceptions import PlatformError
from ..models.enums import UserRole
from ..models.profile import Profile

logger = logging.getLogger(__name__)

ROLE_DEFAULT_PASSWORDS = {
    UserRole.TEACHER.value: "Teacher123!",
    UserRole.STUDENT.value: "Student123!",
    UserRole.SCHOOL_ADMIN.value: "Admin123!",
    UserRole.SUPER_ADMIN.value: "Admin123!",
    UserRole.PARENT.value: "Parent123!",
}
FALLBACK_PASSWORD = "Test123456!"


def password_for_role(role) -> str:
    value = role.value if isinstance(role, UserRole) else str(role)
    return ROLE_DEFAULT_PASSWORDS.get(value, FALLBACK_PASSWORD)


class PasswordResetError(Exception):
    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class PasswordResetService:
    def __init__(self, db: AsyncSession, auth: AuthAdminClient):
        self.db = db
        self.auth = auth

    async def _load_profiles(self):
        try:
            result = await self.db.execute(
                select(Profile.id, Profile.email, Profile.username, Profile.role)
            )
            return result.all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch profiles: {e}")
            raise PasswordResetError(f"Failed to fetch profiles: {e}", status_code=500)

    async def reset_all(self) -> Dict[str, Any]:
        """
        Reset each account one after another. A failing account is recorded
        in the results and the loop moves on to the next one.
        """
        profiles = await self._load_profiles()
        if not profiles:
            raise PasswordResetError("No profiles found", status_code=400)

        results: List[Dict[str, Any]] = []
        for profile in profiles:
            role = profile.role.value if isinstance(profile.role, UserRole) else profile.role
            entry = {
                "email": profile.email or "unknown",
                "username": profile.username,
                "role": role,
            }
            try:
                await self.auth.update_user_by_id(
                    profile.id,
                    password=password_for_role(role),
                    email_confirm=True,
                )
                entry["success"] = True
            except PlatformError as e:
                logger.warning(f"Password reset failed for {entry['email']}: {e.message}")
                entry["success"] = False
                entry["error"] = e.message
            except Exception as e:
                logger.exception(f"Password reset failed for {entry['email']}")
                entry["success"] = False
                entry["error"] = str(e) or type(e).__name__
            results.append(entry)

        success_count = sum(1 for r in results if r["success"])
        total = len(results)
        logger.info(f"Reset {success_count} of {total} account passwords")
        return {
            "success": True,
            "total": total,
            "successCount": success_count,
            "failureCount": total - success_count,
            "results": results,
            "message": f"Reset {success_count} of {total} account passwords",
        }
