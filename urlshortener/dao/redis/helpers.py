import functools
from typing import Any
from collections.abc import Callable

import redis

from urlshortener.dao.exceptions import DataStoreError


__all__ = ['handle_redis_errors', 'redis_location']


def redis_location(client: redis.Redis) -> str:
    """Return '<host>:<port>/<db>' of a Redis client for error messages

    Unix socket connections have no host/port and render as '<path>/<db>'.
    """
    info = client.connection_pool.connection_kwargs
    if info.get('path'):
        return f"{info['path']}/{info.get('db', 0)}"
    return f"{info.get('host')}:{info.get('port')}/{info.get('db', 0)}"


def handle_redis_errors[F: Callable[..., Any]](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle driver errors

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise
            redis.exceptions.ConnectionError, redis.exceptions.TimeoutError
            or redis.exceptions.ResponseError (e.g. WRONGTYPE when a key of
            the namespace is held by another application).

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError instead.

    Example:
        >>> @handle_redis_errors
        ... def exists(self, shortcode):
        ...     return self.redis.exists(shortcode)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise DataStoreError(f"Can't connect to Redis at {redis_location(self.redis)}.") from e
        except redis.exceptions.ResponseError as e:
            raise DataStoreError(f'Redis command failed at {redis_location(self.redis)}: {e}') from e

    return wrapper
