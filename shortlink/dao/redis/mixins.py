"""Redis client setup for the record store

`RedisClientMixin` sits in front of RecordBaseDAO in the MRO. It consumes the
`redis_*` connection options (or a ready-made `redis_client`) and the key
prefix, forwards every other option down the cooperative `__init__` chain and
PINGs Redis once so a misconfigured store fails at startup rather than on the
first submission.

Example:
    >>> class RecordRedisDAO(RedisClientMixin, RecordBaseDAO):
    ...     pass
    ...
    >>> dao = RecordRedisDAO(redis_host='redis', redis_db=1, prefix='shortlink:prod')
    >>> dao.keys.index_key()
    'shortlink:prod:links:index'
"""

import redis

from shortlink.dao.redis.redis_key_schema import RedisKeySchema
from shortlink.dao.redis.helpers import CONNECTIVITY_ERRORS, connectivity_error


# Connection options accepted as `redis_<name>` keyword arguments. Any other
# `redis_<name>` option is passed to redis.Redis as is (ssl, client_name, ...).
CONNECTION_DEFAULTS = {
    'host': 'localhost',
    'port': 6379,
    'db': 0,
    'decode_responses': True,
    'username': None,
    'password': None,
    'socket_timeout': 5.0,  # seconds, per command
}


class RedisClientMixin:
    """Attach a Redis client and a key schema to a record DAO.

    Attributes:
        redis (redis.Redis): client used by the DAO methods.
        keys (RedisKeySchema): namespaced key names for links, clicks and the index.

    Raises:
        DataStoreError: on construction, if Redis doesn't answer the PING.
    """

    def __init__(self, redis_client: redis.Redis | None = None, prefix: str | None = None, **kwargs):
        options = dict(CONNECTION_DEFAULTS)
        for name in [key for key in kwargs if key.startswith('redis_')]:
            options[name.removeprefix('redis_')] = kwargs.pop(name)

        self.redis = redis_client if redis_client is not None else self._connect(**options)
        self.keys = RedisKeySchema(prefix=prefix)
        super().__init__(**kwargs)

        self._healthcheck()

    @staticmethod
    def _connect(host: str, port: int | str, db: int | str, **options) -> redis.Redis:
        # YAML and environment values may carry port/db as strings
        return redis.Redis(host=host, port=int(port), db=int(db), **options)

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis.

        Returns:
            bool: True if Redis answered. False if it didn't and `raise_error` is False.

        Raises:
            DataStoreError: if Redis didn't answer and `raise_error` is True.
        """
        try:
            self.redis.ping()
        except CONNECTIVITY_ERRORS as e:
            if raise_error:
                raise connectivity_error(self.redis, hint='Check the provided configuration parameters.') from e
            return False
        return True
