"""
Redis connection management.
Builds the async Redis client an engine instance owns.
"""

import logging
from typing import Any

import redis.asyncio as redis
from redis.asyncio import ConnectionPool

from rsmq.config import Settings, get_settings

logger = logging.getLogger(__name__)


def create_client(
    settings: Settings | None = None,
    host: str | None = None,
    port: int | None = None,
    password: str | None = None,
    options: dict[str, Any] | None = None,
) -> redis.Redis:
    """
    Create an async Redis client with its own connection pool.

    Explicit arguments win over settings. When settings carry a redis_url
    and no host/port is given, the URL is used. Replies are left as bytes so
    binary message bodies come back unchanged.

    Args:
        settings: Application settings. Defaults to get_settings().
        host: Redis host.
        port: Redis port.
        password: Redis password.
        options: Extra keyword arguments for the connection pool.

    Returns:
        redis.Redis: The client instance.
    """
    settings = settings or get_settings()
    pool_kwargs: dict[str, Any] = {
        "max_connections": settings.redis_max_connections,
        "decode_responses": False,
    }
    pool_kwargs.update(options or {})

    if settings.redis_url and host is None and port is None:
        pool = ConnectionPool.from_url(settings.redis_url, **pool_kwargs)
        logger.info("Redis connection pool created", extra={"url": settings.redis_url})
    else:
        pool = ConnectionPool(
            host=host or settings.redis_host,
            port=port or settings.redis_port,
            password=password or settings.redis_password,
            db=settings.redis_db,
            **pool_kwargs,
        )
        logger.info(
            "Redis connection pool created",
            extra={"host": host or settings.redis_host, "port": port or settings.redis_port},
        )
    return redis.Redis(connection_pool=pool)
