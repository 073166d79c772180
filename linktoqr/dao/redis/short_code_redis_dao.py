"""Data Access Object (DAO) implementation for managing short codes in Redis

This module provides a Redis-based implementation of ShortCodeBaseDAO.

Responsibilities:
    - Insert records while guaranteeing codes are never reissued;
    - Enforce per-owner active-code caps atomically with the insert;
    - Count scans without losing concurrent updates;
    - Apply ownership-guarded destination updates and soft deletes atomically;
    - Maintain per-owner indexes for listing and quota counting;
    - Raise appropriate DAO exceptions (DataStoreError on Redis failures).

Storage layout (see RedisKeySchema):
    <prefix>:links:<code>                  HASH  code, destination, owner_id, scan_count,
                                                 last_scanned_at, created_at, expires_at,
                                                 password_hash, active ('1' / '0')
    <prefix>:users:<owner>:links           ZSET  code -> created_at timestamp
    <prefix>:users:<owner>:links:active    ZSET  code -> created_at timestamp

    Optional fields are stored as empty strings. Link hashes carry no TTL:
    a deactivated code keeps its hash forever, which is what prevents reuse.

Concurrency:
    Every read-modify-write runs as an optimistic transaction
    (WATCH / MULTI / EXEC via redis.Redis.transaction(), retried on WatchError),
    so a check (existence, ownership, active flag, quota) and the write it
    guards can't be interleaved with a concurrent writer.

Example:
    >>> dao = ShortCodeRedisDAO(prefix='linktoqr:dev')
    >>> record = dao.create('https://example.com/menu')
    >>> dao.hit(record.code)
    True
    >>> dao.get(record.code).scan_count
    1
"""

import logging
from datetime import datetime, UTC

import redis
from beartype import beartype

from linktoqr.models import ShortCodeRecord
from linktoqr.exceptions import QuotaExceededError
from linktoqr.dao.base import ShortCodeBaseDAO
from linktoqr.dao.redis.mixins import RedisClientMixin
from linktoqr.dao.redis.helpers import handle_redis_connection_error
from linktoqr.dao.exceptions import ShortCodeAlreadyExistsError, ShortCodeNotFoundError
from linktoqr.utils.helpers import parse_datetime
from linktoqr.utils.validators import validate_destination


logger = logging.getLogger(__name__)

ACTIVE = '1'
INACTIVE = '0'


def _dump_datetime(value: datetime | None) -> str:
    return value.isoformat() if value is not None else ''


class ShortCodeRedisDAO(RedisClientMixin, ShortCodeBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short code records

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
            Must be created with decode_responses=True.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        See ShortCodeBaseDAO.
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, record: ShortCodeRecord, max_active: int | None = None, **kwargs) -> 'ShortCodeRedisDAO':
        """Insert a short code record into Redis

        The existence check, the quota check and the writes run inside one
        optimistic transaction watching the link key and the owner's active
        index. Two concurrent inserts of the same code can't both succeed, and
        two concurrent inserts for the same owner can't both slip under the cap.

        Args:
            record (ShortCodeRecord):
                Record to insert.
            max_active (int | None):
                Cap on the owner's active records. None disables the check.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortCodeRedisDAO: self (for method chaining)

        Raises:
            ShortCodeAlreadyExistsError:
                If the code was ever issued before, even if deactivated since.
            QuotaExceededError:
                If the owner already holds `max_active` active records.
            DataStoreError:
                If a Redis connection issue occurs during the transaction.
        """
        link_key = self.keys.link_key(record.code)
        watches = [link_key]
        if record.owner_id is not None:
            owner_links_key = self.keys.owner_links_key(record.owner_id)
            active_links_key = self.keys.owner_active_links_key(record.owner_id)
            watches.append(active_links_key)

        def _insert(pipe: redis.client.Pipeline) -> None:
            if pipe.exists(link_key):
                raise ShortCodeAlreadyExistsError(f"Short code '{record.code}' already exists.")
            if record.owner_id is not None and max_active is not None:
                active_count = pipe.zcard(active_links_key)
                if active_count >= max_active:
                    raise QuotaExceededError(f'Plan limit reached ({max_active} active codes).', limit=max_active)

            pipe.multi()
            pipe.hset(link_key, mapping=self._dump(record))
            if record.owner_id is not None:
                score = record.created_at.timestamp()
                pipe.zadd(owner_links_key, {record.code: score})
                pipe.zadd(active_links_key, {record.code: score})

        self.redis.transaction(_insert, *watches)
        logger.debug('Inserted short code record.', extra={'code': record.code, 'owner_id': record.owner_id})
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, code: str, **kwargs) -> ShortCodeRecord:
        """Retrieve an active short code record (expired records included)

        Args:
            code (str):
                The short code.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortCodeRecord: the stored record.

        Raises:
            ShortCodeNotFoundError:
                If the code doesn't exist or was deactivated.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('aB3_x9Qz')
            ShortCodeRecord(code='aB3_x9Qz', destination='https://example.com/menu', ...)
        """
        data = self.redis.hgetall(self.keys.link_key(code))
        if not data or data.get('active') != ACTIVE:
            raise ShortCodeNotFoundError(f"Short code '{code}' not found.")
        return self._load(data)

    @handle_redis_connection_error
    @beartype
    def stats(self, code: str, **kwargs) -> ShortCodeRecord:
        """Retrieve a record for stats reporting, whatever its active flag

        Deactivation stops resolution only: the scan history of a deactivated
        code stays readable here.

        Raises:
            ShortCodeNotFoundError:
                If the code was never issued.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        data = self.redis.hgetall(self.keys.link_key(code))
        if not data:
            raise ShortCodeNotFoundError(f"Short code '{code}' not found.")
        return self._load(data)

    @handle_redis_connection_error
    @beartype
    def hit(self, code: str, **kwargs) -> bool:
        """Count a successful scan

        HINCRBY is atomic on its own, so concurrent scans are never lost. The
        surrounding transaction only makes sure a code deactivated in between
        the check and the increment isn't counted.

        Args:
            code (str):
                The short code.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            bool:
                True if the scan was counted, False if the code is missing or inactive.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.hit('aB3_x9Qz')
            True
        """
        link_key = self.keys.link_key(code)

        def _hit(pipe: redis.client.Pipeline) -> bool:
            if pipe.hget(link_key, 'active') != ACTIVE:
                return False
            pipe.multi()
            pipe.hincrby(link_key, 'scan_count', 1)
            pipe.hset(link_key, 'last_scanned_at', _dump_datetime(datetime.now(UTC)))
            return True

        counted = self.redis.transaction(_hit, link_key, value_from_callable=True)
        if not counted:
            logger.info('Scan not counted: short code missing or inactive.', extra={'code': code})
        return counted

    @handle_redis_connection_error
    @beartype
    def update_destination(self, code: str, destination: str, owner_id: str, **kwargs) -> bool:
        """Change the destination of an active record owned by `owner_id`

        The ownership check and the write happen in the same transaction.

        Returns:
            bool: True if updated. False if missing, inactive, anonymous or owned by someone else.

        Raises:
            InvalidDestinationError:
                If the new destination is not an acceptable URL.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.update_destination('aB3_x9Qz', 'https://example.com/drinks', owner_id='42')
            True
        """
        validate_destination(destination)
        link_key = self.keys.link_key(code)

        def _update(pipe: redis.client.Pipeline) -> bool:
            if not self._owned_and_active(pipe, link_key, owner_id):
                return False
            pipe.multi()
            pipe.hset(link_key, 'destination', destination)
            return True

        changed = self.redis.transaction(_update, link_key, value_from_callable=True)
        logger.debug('Destination update processed.', extra={'code': code, 'owner_id': owner_id, 'changed': changed})
        return changed

    @handle_redis_connection_error
    @beartype
    def deactivate(self, code: str, owner_id: str, **kwargs) -> bool:
        """Soft-delete an active record owned by `owner_id`

        The link hash stays (scan history, no reuse); the code only leaves the
        owner's active index, which frees one unit of plan quota.

        Returns:
            bool: True if deactivated. False if missing, already inactive, anonymous or owned by someone else.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        link_key = self.keys.link_key(code)
        active_links_key = self.keys.owner_active_links_key(owner_id)

        def _deactivate(pipe: redis.client.Pipeline) -> bool:
            if not self._owned_and_active(pipe, link_key, owner_id):
                return False
            pipe.multi()
            pipe.hset(link_key, 'active', INACTIVE)
            pipe.zrem(active_links_key, code)
            return True

        changed = self.redis.transaction(_deactivate, link_key, active_links_key, value_from_callable=True)
        logger.debug('Deactivation processed.', extra={'code': code, 'owner_id': owner_id, 'changed': changed})
        return changed

    @handle_redis_connection_error
    @beartype
    def count_active(self, owner_id: str, **kwargs) -> int:
        return self.redis.zcard(self.keys.owner_active_links_key(owner_id))

    @handle_redis_connection_error
    @beartype
    def list_owned(self, owner_id: str, include_inactive: bool = False, **kwargs) -> list[ShortCodeRecord]:
        """Return records owned by `owner_id`, newest first

        Args:
            owner_id (str):
                Owning account id.
            include_inactive (bool):
                If True, deactivated records are listed too. Defaults to False.

        Returns:
            list[ShortCodeRecord]: records sorted by creation time, newest first.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        if include_inactive:
            index_key = self.keys.owner_links_key(owner_id)
        else:
            index_key = self.keys.owner_active_links_key(owner_id)

        codes = self.redis.zrevrange(index_key, 0, -1)
        if not codes:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for code in codes:
                pipe.hgetall(self.keys.link_key(code))
            rows = pipe.execute()

        records = [self._load(row) for row in rows if row]
        if not include_inactive:
            # The index is updated in the same transaction as the flag, this only
            # guards against hand-edited data.
            records = [record for record in records if record.active]
        return records

    @staticmethod
    def _owned_and_active(pipe: redis.client.Pipeline, link_key: str, owner_id: str) -> bool:
        stored_owner, active = pipe.hmget(link_key, ['owner_id', 'active'])
        return active == ACTIVE and bool(stored_owner) and stored_owner == owner_id

    @staticmethod
    def _dump(record: ShortCodeRecord) -> dict[str, str | int]:
        return {
            'code': record.code,
            'destination': record.destination,
            'owner_id': record.owner_id or '',
            'scan_count': record.scan_count,
            'last_scanned_at': _dump_datetime(record.last_scanned_at),
            'created_at': _dump_datetime(record.created_at),
            'expires_at': _dump_datetime(record.expires_at),
            'password_hash': record.password_hash or '',
            'active': ACTIVE if record.active else INACTIVE,
        }

    @staticmethod
    def _load(data: dict[str, str]) -> ShortCodeRecord:
        return ShortCodeRecord(
            code=data['code'],
            destination=data['destination'],
            created_at=parse_datetime(data['created_at']),
            owner_id=data.get('owner_id') or None,
            scan_count=int(data.get('scan_count') or 0),
            last_scanned_at=parse_datetime(data.get('last_scanned_at')),
            expires_at=parse_datetime(data.get('expires_at')),
            password_hash=data.get('password_hash') or None,
            active=data.get('active') == ACTIVE,
        )
