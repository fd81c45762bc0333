"""
Caching utilities for expensive report queries
Uses Redis (django-redis) when configured, local memory otherwise
"""
import hashlib
import logging
from functools import wraps

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)


def reports_cache_ttl():
    return getattr(settings, 'REPORTS_CACHE_TTL', 600)


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def tenant_cache_prefix(prefix, tenant_id):
    """Tenant goes into the readable part of the key so it can be matched by pattern"""
    return f"tenant:{tenant_id or 'ALL'}:{prefix}"


def cached_query(cache_ttl=None, key_prefix="query"):
    """
    Decorator to cache expensive queries

    The first positional argument is taken as the tenant id:
        @cached_query(key_prefix="reports_dashboard")
        def dashboard_data(tenant_id, date_from, date_to):
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(tenant_id, *args, **kwargs):
            cache_key = make_cache_key(tenant_cache_prefix(key_prefix, tenant_id), *args, **kwargs)

            cached_data = cache.get(cache_key)
            if cached_data is not None:
                logger.debug(f"Cache HIT for {key_prefix}: {cache_key}")
                return cached_data

            logger.debug(f"Cache MISS for {key_prefix}: {cache_key}")
            result = func(tenant_id, *args, **kwargs)
            cache.set(cache_key, result, cache_ttl if cache_ttl is not None else reports_cache_ttl())
            return result
        return wrapper
    return decorator


def invalidate_cache_pattern(pattern):
    """
    Invalidate all cache keys matching a pattern
    Note: pattern matching requires Redis with SCAN; other backends are cleared whole
    """
    try:
        from django_redis import get_redis_connection
        redis_conn = get_redis_connection("default")
    except NotImplementedError:
        cache.clear()
        logger.debug(f"Cache backend has no pattern support, cleared all keys for pattern: {pattern}")
        return

    try:
        keys = []
        cursor = 0
        while True:
            cursor, partial_keys = redis_conn.scan(cursor, match=f"*{pattern}*", count=100)
            keys.extend(partial_keys)
            if cursor == 0:
                break

        if keys:
            redis_conn.delete(*keys)
            logger.info(f"Invalidated {len(keys)} cache keys matching pattern: {pattern}")
    except Exception as e:
        logger.warning(f"Could not invalidate cache pattern {pattern}: {str(e)}")


def invalidate_reports_cache(tenant_id=None):
    """Drop cached reports of one tenant plus the cross-tenant views; shared rows drop everything"""
    if not tenant_id:
        invalidate_cache_pattern(":reports")
        return
    invalidate_cache_pattern(tenant_cache_prefix("reports", tenant_id))
    invalidate_cache_pattern(tenant_cache_prefix("reports", None))
