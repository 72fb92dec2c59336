# school_erp/services/parent_service.py
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from .base_service import BaseService
from ..models.enums import UserRole
from ..models.profile import Profile
from ..models.school import School
from ..models.student import Student

class ParentService(BaseService[Profile]):
    def __init__(self, db: AsyncSession):
        super().__init__(Profile, db)

    async def list_parents(self, school_id: Optional[UUID] = None) -> List[Dict[str, Any]]:
        """Parent accounts with the number of linked children"""
        children_count = (
            select(func.count(Student.id))
            .where(Student.parent_id == Profile.id)
            .correlate(Profile)
            .scalar_subquery()
            .label("children_count")
        )
        stmt = (
            select(Profile, School.name.label("school_name"), children_count)
            .join(School, School.id == Profile.school_id)
            .where(Profile.role == UserRole.PARENT)
            .order_by(Profile.full_name.asc())
        )
        if school_id is not None:
            stmt = stmt.where(Profile.school_id == school_id)

        result = await self.db.execute(stmt)
        return [
            {
                "id": str(row.Profile.id),
                "full_name": row.Profile.full_name,
                "username": row.Profile.username,
                "email": row.Profile.email,
                "school_id": str(row.Profile.school_id),
                "school_name": row.school_name or "Unknown",
                "children_count": row.children_count or 0,
            }
            for row in result.all()
        ]
