"""Connectivity error handling shared by the Redis record store

Functions:
    describe_connection(client) -> str
        Render the client's target as 'host:port/db'.
    connectivity_error(client, hint=None) -> DataStoreError
        Build the DataStoreError reported when Redis can't be reached.
    handle_redis_connection_error(method)
        Decorator translating connectivity failures of a DAO method.
"""

import functools
from collections.abc import Callable
from typing import Any

import redis

from shortlink.dao.exceptions import DataStoreError


# Failures meaning "Redis is unreachable". Command errors (WRONGTYPE, ...)
# are bugs and propagate unchanged.
CONNECTIVITY_ERRORS = (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)


def describe_connection(client: redis.Redis) -> str:
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def connectivity_error(client: redis.Redis, hint: str | None = None) -> DataStoreError:
    message = f"Can't connect to Redis at {describe_connection(client)}."
    return DataStoreError(f'{message} {hint}' if hint else message)


def handle_redis_connection_error[F: Callable[..., Any]](method: F) -> F:
    """Raise DataStoreError when a record store method loses its Redis connection

    The wrapped method must belong to an object exposing the client as `self.redis`.

    Example:
        >>> @handle_redis_connection_error
        ... def load(self):
        ...     return self.redis.lrange('links:index', 0, -1)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except CONNECTIVITY_ERRORS as e:
            raise connectivity_error(self.redis) from e

    return wrapper
