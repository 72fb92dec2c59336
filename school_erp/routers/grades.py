from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import require_roles
from ..models.enums import UserRole
from ..models.profile import Profile
from ..services.grades_service import GradesService

router = APIRouter(prefix="/api/v1/grades", tags=["Grades"])

@router.get("/my-grades", response_model=dict)
async def get_my_grades(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(UserRole.STUDENT)),
):
    """The signed-in student's results, newest exam first, with a summary"""
    return await GradesService(db).my_grades(profile)

@router.get("/children-grades", response_model=dict)
async def get_children_grades(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(require_roles(UserRole.PARENT)),
):
    children = await GradesService(db).children_grades(profile)
    return {"children": children, "total": len(children)}
