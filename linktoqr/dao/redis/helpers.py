import functools
import redis
from typing import Any
from collections.abc import Callable

from linktoqr.dao.exceptions import DataStoreError


__all__ = []


def _redis_location(client: redis.Redis) -> str:
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_connection_error[F: Callable[..., Any]](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle data store errors

    Connection failures and socket timeouts become DataStoreError so callers
    can tell a transient storage failure apart from a "not found" result.
    Any other Redis error is reported the same way.

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise redis.exceptions.RedisError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on Redis failures.

    Example:
        >>> @handle_redis_connection_error
        ... def count_active(self, owner_id):
        ...     return self.redis.zcard(self.keys.owner_active_links_key(owner_id))
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except redis.exceptions.TimeoutError as e:
            raise DataStoreError(f'Timed out talking to Redis at {_redis_location(self.redis)}.') from e
        except redis.exceptions.ConnectionError as e:
            raise DataStoreError(f"Can't connect to Redis at {_redis_location(self.redis)}.") from e
        except redis.exceptions.RedisError as e:
            raise DataStoreError(f'Redis at {_redis_location(self.redis)} failed: {e}') from e

    return wrapper
