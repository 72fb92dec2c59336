# school_erp/core/config.py
"""Application configuration using Pydantic."""
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    database_url: str
    redis_url: str = 'redis://localhost:6379/0'

    # Hosted backend platform (auth admin API + object storage)
    platform_url: str
    platform_service_key: str
    platform_anon_key: str = ''
    storage_bucket: str = 'documents'
    platform_timeout: float = 30.0

    app_version: str = '1.0.0'
    environment: str = 'development'
    log_level: str = 'info'
    allowed_origins: List[str] = ['*']

    cache_enabled: bool = True
    cache_ttl: int = 60

    max_upload_bytes: int = 10 * 1024 * 1024

    model_config = {
        'env_file': '.env',
        'extra': 'ignore'
    }

settings = Settings()
