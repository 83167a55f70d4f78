"""
Caching utilities for SeatDesk.

Seat maps are never cached: every seat read has to run the expiry reconciler.
"""
import logging
from functools import wraps
from hashlib import md5

from django.conf import settings
from django.core.cache import cache
from rest_framework.response import Response

logger = logging.getLogger(__name__)


def get_cache_key(prefix: str, *args) -> str:
    """Generate a simple cache key"""
    key_parts = [str(prefix)]
    for arg in args:
        if arg is not None:
            key_parts.append(str(arg))

    cache_key = ":".join(key_parts)
    if len(cache_key) > 200:
        cache_key = f"{prefix}:{md5(cache_key.encode()).hexdigest()}"

    return cache_key


def get_cached_data(cache_key: str):
    """Get data from cache"""
    if not getattr(settings, 'ENABLE_CACHING', True):
        return None
    cached_data = cache.get(cache_key)
    logger.debug("[Cache-%s] %s", "Hit" if cached_data else "Miss", cache_key)
    return cached_data


def set_cached_data(cache_key: str, data, timeout: int = 300):
    """Set data in cache"""
    if not getattr(settings, 'ENABLE_CACHING', True):
        return

    cache.set(cache_key, data, timeout)
    logger.debug("[Cache-Set] %s (%ss)", cache_key, timeout)


def cache_api_response(prefix: str, timeout: int = 300, vary_on_user: bool = False):
    """
    Decorator caching successful API responses.

    Keys carry the prefix's version, and with vary_on_user the user id and the
    user's version too, so invalidate_user_cache() and invalidate_prefix_cache()
    retire old entries on any cache backend.
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(self, request, *args, **kwargs):
            if not getattr(settings, 'ENABLE_CACHING', True):
                return view_func(self, request, *args, **kwargs)

            key_parts = [prefix]
            versions = [get_cache_version(prefix)]

            if vary_on_user:
                user = getattr(request, 'validated_user', None)
                if user is None:
                    return view_func(self, request, *args, **kwargs)
                key_parts.append(str(user.user_id))
                versions.append(get_cache_version(prefix, user.user_id))

            key_parts.append("v" + ".".join(str(v) for v in versions))
            key_parts.extend([request.path, request.method])
            if request.GET:
                params_str = str(sorted(request.GET.items()))
                key_parts.append(md5(params_str.encode()).hexdigest()[:8])

            cache_key = get_cache_key(*key_parts)

            cached_data = get_cached_data(cache_key)
            if cached_data:
                return Response(cached_data)

            response = view_func(self, request, *args, **kwargs)

            if hasattr(response, 'data') and response.data.get('success', False):
                set_cached_data(cache_key, response.data, timeout)

            return response

        return wrapper
    return decorator


def _version_key(prefix: str, *args) -> str:
    return get_cache_key(prefix, "ver", *args)


def get_cache_version(prefix: str, *args) -> int:
    """Current version of a key family; 1 until it is first bumped"""
    return cache.get(_version_key(prefix, *args)) or 1


def _bump_version(version_key: str):
    if not getattr(settings, 'ENABLE_CACHING', True):
        return
    try:
        version = cache.incr(version_key)
    except ValueError:
        # Never bumped yet: readers have been using version 1
        cache.set(version_key, 2, None)
        version = 2
    logger.debug("[Cache-Invalidated] %s -> v%s", version_key, version)


def invalidate_user_cache(prefix: str, user_id):
    """Retire every cached response of one user under a prefix"""
    _bump_version(_version_key(prefix, user_id))


def invalidate_prefix_cache(prefix: str):
    """Retire every cached response under a prefix"""
    _bump_version(_version_key(prefix))
