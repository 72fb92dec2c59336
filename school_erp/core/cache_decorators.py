# school_erp/core/cache_decorators.py
"""Cache decorators for FastAPI endpoints."""
import functools
from typing import Callable, Optional

from .cache import cache_manager

# Dependency arguments that never belong in a cache key
_SKIPPED_PARAMS = {"request", "db", "session", "auth", "storage"}


_SHARED_ROLES = {"super_admin", "school_admin"}


def _key_part(name: str, value) -> str:
    # Admin views are shared per role and school; everyone else gets their own entry
    if name == "profile" and hasattr(value, "role"):
        role = getattr(value.role, "value", value.role)
        part = f"{role}:{value.school_id or 'all'}"
        return part if role in _SHARED_ROLES else f"{part}:{value.id}"
    return f"{name}:{value}"


def cache_response(key_prefix: str, ttl: Optional[int] = None, include_params: bool = True):
    """Cache decorator for FastAPI endpoints."""
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            key_parts = [key_prefix]
            if include_params:
                for key, value in kwargs.items():
                    if key not in _SKIPPED_PARAMS:
                        key_parts.append(_key_part(key, value))

            cache_key = cache_manager.make_key(*key_parts)
            cached_result = await cache_manager.get(cache_key)
            if cached_result is not None:
                return cached_result

            result = await func(*args, **kwargs)
            await cache_manager.set(cache_key, result, ttl=ttl)
            return result

        return wrapper
    return decorator


def invalidate_cache_pattern(pattern: str):
    """Decorator to invalidate cache patterns after function execution."""
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            result = await func(*args, **kwargs)
            await cache_manager.delete_pattern(pattern)
            return result
        return wrapper
    return decorator
