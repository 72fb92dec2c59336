# school_erp/clients/base.py
"""Shared plumbing for the hosted platform's REST APIs."""
import logging
from typing import Any, Dict, Optional
import httpx

from ..core.exceptions import PlatformError

logger = logging.getLogger(__name__)

ERROR_MESSAGE_FIELDS = ("msg", "message", "error_description", "error")


def error_message(response: httpx.Response) -> str:
    """Pull the platform's error text out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for field in ERROR_MESSAGE_FIELDS:
            if body.get(field):
                return str(body[field])
    return f"HTTP {response.status_code}"


class PlatformClient:
    def __init__(self, base_url: str, service_key: str, timeout: float = 30.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.service_key = service_key
        self.client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={
                "apikey": service_key,
                "Authorization": f"Bearer {service_key}",
            },
        )

    async def close(self):
        await self.client.aclose()

    async def request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Platform request {method} {path} failed: {e}")
            raise PlatformError(f"Platform unreachable: {e}", status_code=502) from e

        if response.is_error:
            message = error_message(response)
            logger.error(f"Platform request {method} {path} returned {response.status_code}: {message}")
            raise PlatformError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def bearer(token: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"}
