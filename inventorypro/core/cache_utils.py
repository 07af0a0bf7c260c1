"""
Caching utilities for expensive report queries
Uses Redis (django-redis) when configured, the local memory cache otherwise
"""
from django.conf import settings
from django.core.cache import cache
from functools import wraps
import hashlib
import logging

logger = logging.getLogger(__name__)

REPORTS_PREFIX = "reports"


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def cached_query(cache_ttl=None, key_prefix="query"):
    """
    Decorator to cache expensive queries

    Usage:
        @cached_query(cache_ttl=300, key_prefix="reports")
        def build_summary(warehouse_id):
            return data
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            cache_key = make_cache_key(key_prefix, func.__name__, *args, **kwargs)

            cached_data = cache.get(cache_key)
            if cached_data is not None:
                logger.debug(f"Cache HIT for {key_prefix}: {cache_key}")
                return cached_data

            logger.debug(f"Cache MISS for {key_prefix}: {cache_key}")
            result = func(*args, **kwargs)
            ttl = cache_ttl if cache_ttl is not None else settings.REPORTS_CACHE_TTL
            cache.set(cache_key, result, ttl)
            return result
        return wrapper
    return decorator


def invalidate_cache_pattern(pattern):
    """
    Invalidate all cache keys matching a pattern.
    Redis is scanned for matching keys; other backends cannot be scanned and are cleared.
    """
    try:
        from django_redis import get_redis_connection
        redis_conn = get_redis_connection("default")
    except NotImplementedError:
        cache.clear()
        logger.debug(f"Cache cleared for pattern {pattern} (non-redis backend)")
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


def invalidate_reports_cache():
    """Invalidate all report caches"""
    invalidate_cache_pattern(REPORTS_PREFIX)
