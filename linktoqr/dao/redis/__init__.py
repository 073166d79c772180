from linktoqr.dao.redis.redis_key_schema import RedisKeySchema
from linktoqr.dao.redis.short_code_redis_dao import ShortCodeRedisDAO
from linktoqr.dao.redis.account_redis_dao import AccountRedisDAO
from linktoqr.dao.redis.mixins import RedisClientMixin


__all__ = [
    'RedisKeySchema',
    'ShortCodeRedisDAO',
    'AccountRedisDAO',
    'RedisClientMixin',
]
