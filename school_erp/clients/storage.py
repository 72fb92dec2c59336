# school_erp/clients/storage.py
"""Client for the platform's object storage."""
from typing import List, Optional
import httpx

from ..core.config import settings
from .base import PlatformClient


class StorageClient(PlatformClient):
    def __init__(self, base_url: str, service_key: str, bucket: str, timeout: float = 30.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.public_base = f"{base_url.rstrip('/')}/storage/v1/object/public"
        self.bucket = bucket
        super().__init__(f"{base_url.rstrip('/')}/storage/v1", service_key, timeout, transport)

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Upload an object and return its public URL."""
        await self.request(
            "POST",
            f"/object/{self.bucket}/{path}",
            content=content,
            headers={"Content-Type": content_type, "x-upsert": "false"},
        )
        return self.get_public_url(path)

    async def remove(self, paths: List[str]) -> None:
        if not paths:
            return
        await self.request("DELETE", f"/object/{self.bucket}", json={"prefixes": paths})

    def get_public_url(self, path: str) -> str:
        return f"{self.public_base}/{self.bucket}/{path}"

    def path_from_public_url(self, url: Optional[str]) -> Optional[str]:
        """Object path inside the bucket, or None when the URL is not one of ours."""
        if not url:
            return None
        parts = url.split(f"/{self.bucket}/", 1)
        return parts[1] if len(parts) > 1 else None


storage_client = StorageClient(
    settings.platform_url,
    settings.platform_service_key,
    settings.storage_bucket,
    timeout=settings.platform_timeout,
)

async def get_storage() -> StorageClient:
    """Dependency to get the storage client."""
    return storage_client
