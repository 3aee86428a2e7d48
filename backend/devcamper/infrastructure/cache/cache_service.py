import json
from typing import Any

from redis.exceptions import RedisError

from devcamper.infrastructure.cache.redis_client import get_redis_client
from devcamper.infrastructure.logging import get_logger

logger = get_logger(__name__)

CACHE_NAMESPACE = "devcamper"


def cache_key(*parts: str) -> str:
    return ":".join([CACHE_NAMESPACE, *parts])


def read_json(key: str) -> dict[str, Any] | None:
    """Return the cached mapping, or None on a miss, a corrupt entry or an unreachable cache."""
    try:
        raw = get_redis_client().get(key)
    except RedisError as exc:
        logger.warning("cache_read_failed", key=key, error=str(exc))
        return None
    if not isinstance(raw, str):
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("cache_entry_corrupt", key=key)
        return None
    return value if isinstance(value, dict) else None


def write_json(key: str, value: dict[str, Any], ttl_seconds: int) -> bool:
    try:
        get_redis_client().setex(key, ttl_seconds, json.dumps(value, default=str))
    except (RedisError, TypeError, ValueError) as exc:
        logger.warning("cache_write_failed", key=key, error=str(exc))
        return False
    return True
