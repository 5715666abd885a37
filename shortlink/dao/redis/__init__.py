from shortlink.dao.redis.redis_key_schema import RedisKeySchema
from shortlink.dao.redis.mixins import RedisClientMixin
from shortlink.dao.redis.record_redis_dao import RecordRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'RecordRedisDAO',
]
