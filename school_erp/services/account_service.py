# school_erp/services/account_service.py
"""Account provisioning: platform user, profile and (for students) the student row."""
from datetime import date
from typing import Any, Dict, Optional
from uuid import UUID
import logging

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .base_service import BaseService
from ..clients.auth_admin import AuthAdminClient
from ..core.exceptions import ErpException, NotFoundError, PlatformError
from ..models.enums import UserRole
from ..models.profile import Profile
from ..models.school import School
from ..models.student import Student
from ..utils.identifiers import generate_username, sequential_username

logger = logging.getLogger(__name__)

class AccountService(BaseService[Profile]):
    def __init__(self, db: AsyncSession, auth: AuthAdminClient):
        super().__init__(Profile, db)
        self.auth = auth

    async def _school(self, school_id: UUID) -> School:
        school = await self.db.get(School, school_id)
        if not school:
            raise NotFoundError("School", school_id)
        return school

    async def next_parent_username(self, school: School) -> str:
        stmt = select(func.count(Profile.id)).where(
            Profile.role == UserRole.PARENT,
            Profile.school_id == school.id,
            Profile.username.like(f"{school.school_code}-PR-%"),
        )
        existing = (await self.db.execute(stmt)).scalar() or 0
        return sequential_username(school.school_code, UserRole.PARENT, existing)

    async def create_account(
        self,
        role: UserRole,
        email: str,
        password: str,
        full_name: str,
        school_id: UUID,
        class_id: Optional[UUID] = None,
        roll_number: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create the platform user, then its profile, then the student record
        for students. Steps run in order and a failure stops the chain; an
        already-created platform user is not rolled back.
        """
        school = await self._school(school_id)
        if role == UserRole.PARENT:
            username = await self.next_parent_username(school)
        else:
            username = generate_username(school.school_code, role)

        user = await self.auth.create_user(email=email, password=password, full_name=full_name)
        user_id = UUID(str(user["id"]))

        profile = Profile(
            id=user_id,
            email=email,
            username=username,
            full_name=full_name,
            role=role,
            school_id=school.id,
        )
        self.db.add(profile)
        if role == UserRole.STUDENT:
            self.db.add(Student(
                user_id=user_id,
                school_id=school.id,
                class_id=class_id,
                roll_number=roll_number,
                admission_date=date.today(),
            ))

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.error("Profile insert failed for %s (%s): %s", email, role.value, e.orig)
            raise ErpException(status_code=409, detail=f"Could not create {role.value} profile: username or email already exists")

        logger.info("Created %s account %s (%s)", role.value, username, email)
        return {
            "success": True,
            "user_id": str(user_id),
            "username": username,
            "role": role.value,
        }

    async def delete_account(self, profile_id: UUID, role: UserRole) -> bool:
        """Delete the profile row; the platform account is removed too when possible"""
        profile = await self.get(profile_id)
        if not profile or UserRole(profile.role) != role:
            return False
        await self.db.delete(profile)
        await self.db.commit()
        try:
            await self.auth.delete_user(profile_id)
        except PlatformError as e:
            logger.warning("Profile %s deleted but platform user removal failed: %s", profile_id, e.message)
        return True

    async def find_by_username(self, username: str) -> Optional[Profile]:
        result = await self.db.execute(select(Profile).where(Profile.username == username.strip()))
        return result.scalar_one_or_none()

    @staticmethod
    def to_dict(profile: Profile) -> Dict[str, Any]:
        return {
            "id": str(profile.id),
            "email": profile.email,
            "username": profile.username,
            "full_name": profile.full_name,
            "role": UserRole(profile.role).value,
            "school_id": str(profile.school_id) if profile.school_id else None,
        }
