"""The caller's own profile and navigation."""
from fastapi import APIRouter, Depends

from ..core.navigation import can_access_route, navigation_for_role
from ..core.security import get_current_profile
from ..models.enums import UserRole
from ..models.profile import Profile
from ..services.account_service import AccountService

router = APIRouter(prefix="/api/v1/me", tags=["Me"])

@router.get("/")
async def get_me(profile: Profile = Depends(get_current_profile)):
    return AccountService.to_dict(profile)

@router.get("/navigation")
async def get_navigation(profile: Profile = Depends(get_current_profile)):
    role = UserRole(profile.role).value
    return {"role": role, "items": navigation_for_role(role)}

@router.get("/can-access")
async def check_route(route: str, profile: Profile = Depends(get_current_profile)):
    role = UserRole(profile.role).value
    return {"route": route, "allowed": can_access_route(route, role)}
