from functools import lru_cache

from redis import Redis
from redis.exceptions import RedisError

from devcamper.config import settings


@lru_cache(maxsize=1)
def get_redis_client() -> Redis:
    return Redis.from_url(
        settings.redis_url,
        decode_responses=True,
        socket_timeout=settings.redis_socket_timeout_seconds,
        socket_connect_timeout=settings.redis_socket_timeout_seconds,
    )


def ping_redis(client: Redis) -> bool:
    try:
        return bool(client.ping())
    except RedisError:
        return False
