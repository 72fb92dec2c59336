# school_erp/clients/auth_admin.py
"""Client for the platform's authentication and account-admin API."""
from typing import Any, Dict, Optional
from uuid import UUID
import httpx

from ..core.config import settings
from .base import PlatformClient


class AuthAdminClient(PlatformClient):
    def __init__(self, base_url: str, service_key: str, anon_key: str = "", timeout: float = 30.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(f"{base_url.rstrip('/')}/auth/v1", service_key, timeout, transport)
        self.anon_key = anon_key or service_key

    async def create_user(self, email: str, password: str, full_name: str) -> Dict[str, Any]:
        """Create an account with its email already confirmed."""
        return await self.request("POST", "/admin/users", json={
            "email": email,
            "password": password,
            "email_confirm": True,
            "user_metadata": {"full_name": full_name},
        })

    async def update_user_by_id(self, user_id: UUID, password: Optional[str] = None,
                                email_confirm: Optional[bool] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if password is not None:
            payload["password"] = password
        if email_confirm is not None:
            payload["email_confirm"] = email_confirm
        return await self.request("PUT", f"/admin/users/{user_id}", json=payload)

    async def delete_user(self, user_id: UUID) -> None:
        await self.request("DELETE", f"/admin/users/{user_id}")

    async def sign_in_with_password(self, email: str, password: str) -> Dict[str, Any]:
        return await self.request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            headers={"apikey": self.anon_key, "Authorization": f"Bearer {self.anon_key}"},
        )

    async def get_user(self, access_token: str) -> Dict[str, Any]:
        """Resolve the account behind a session access token."""
        return await self.request(
            "GET",
            "/user",
            headers={"apikey": self.anon_key, **self.bearer(access_token)},
        )


auth_admin_client = AuthAdminClient(
    settings.platform_url,
    settings.platform_service_key,
    settings.platform_anon_key,
    timeout=settings.platform_timeout,
)

async def get_auth_admin() -> AuthAdminClient:
    """Dependency to get the auth admin client."""
    return auth_admin_client
