from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.cache_decorators import cache_response
from ..core.database import get_db
from ..core.security import get_current_profile
from ..models.profile import Profile
from ..services.dashboard_service import DashboardService

router = APIRouter(prefix="/api/v1/dashboard", tags=["Dashboard"])

@router.get("/", response_model=dict)
@cache_response("dashboard")
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    profile: Profile = Depends(get_current_profile),
):
    """Counters for the caller's role"""
    return await DashboardService(db).stats_for(profile)
