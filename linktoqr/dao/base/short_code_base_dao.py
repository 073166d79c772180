"""Abstract base class for short code data access objects (DAOs).

This class establishes a consistent contract for all short code DAO
implementations, regardless of the underlying storage mechanism (e.g., Redis,
DynamoDB, PostgreSQL). Implementations own every ShortCodeRecord: nothing else
mutates records directly.

Responsibilities:
    - Allocate new short codes (generate, insert, retry on collision).
    - Look up active records, and stats of any issued record.
    - Count scans atomically.
    - Mutate destinations and deactivate records under an ownership constraint,
      as single atomic conditional updates.
    - Standardize error handling across data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from linktoqr.dao.redis import ShortCodeRedisDAO

        >>> dao = ShortCodeRedisDAO(...)
        >>> record = dao.create('https://example.com/menu', owner_id='42')
        >>> record.code
        'aB3_x9Qz'

        >>> dao.hit(record.code)
        True
        >>> dao.get(record.code).scan_count
        1

        >>> dao.update_destination(record.code, 'https://example.com/drinks', owner_id='7')
        False
        >>> dao.deactivate(record.code, owner_id='42')
        True
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, UTC

from linktoqr.models import ShortCodeRecord
from linktoqr.constants import ShortCode
from linktoqr.exceptions import CreateFailedError
from linktoqr.dao.exceptions import ShortCodeAlreadyExistsError
from linktoqr.utils.shortener import generate_shortcode
from linktoqr.utils.validators import validate_destination


logger = logging.getLogger(__name__)


class ShortCodeBaseDAO(ABC):
    """Interface for short code data access objects (DAOs).

    Methods:
        create(destination, owner_id=None, expires_at=None, password_hash=None, max_active=None) -> ShortCodeRecord:
            Validate the destination, allocate a fresh code and insert the record.
            Raises InvalidDestinationError, QuotaExceededError, CreateFailedError or DataStoreError.

        insert(record: ShortCodeRecord, max_active: int | None = None, **kwargs) -> ShortCodeBaseDAO:
            Insert a record unless its code was ever issued before.
            Raises ShortCodeAlreadyExistsError, QuotaExceededError or DataStoreError.

        get(code: str, **kwargs) -> ShortCodeRecord:
            Retrieve an active record (expired ones included).
            Raises ShortCodeNotFoundError or DataStoreError.

        stats(code: str, **kwargs) -> ShortCodeRecord:
            Retrieve a record for stats reporting, deactivated ones included.
            Raises ShortCodeNotFoundError or DataStoreError.

        hit(code: str, **kwargs) -> bool:
            Count one successful scan. False if the code is missing or inactive.

        update_destination(code: str, destination: str, owner_id: str, **kwargs) -> bool:
            Change the destination of an active record owned by owner_id.

        deactivate(code: str, owner_id: str, **kwargs) -> bool:
            Soft-delete an active record owned by owner_id.

        count_active(owner_id: str, **kwargs) -> int:
            Number of active records owned by owner_id.

        list_owned(owner_id: str, include_inactive: bool = False, **kwargs) -> list[ShortCodeRecord]:
            Records owned by owner_id, newest first.

    Subclassing:
        Datastore-specific implementations (e.g., ShortCodeRedisDAO) must
        extend this class and implement all abstract methods. Every write must
        be atomic at the record level, and ownership checks must happen in the
        same atomic step as the write they guard.

    NOTE:
        - Records are never physically deleted, so codes are never reissued.
        - Every method raises DataStoreError on connectivity issues or timeouts,
          never a "not found" signal.
    """

    max_create_attempts: int = ShortCode.MAX_CREATE_ATTEMPTS

    def create(
        self,
        destination: str,
        owner_id: str | None = None,
        expires_at: datetime | None = None,
        password_hash: str | None = None,
        max_active: int | None = None,
        **kwargs,
    ) -> ShortCodeRecord:
        """Allocate a new short code for `destination` and persist it.

        Codes come from generate_shortcode(), which doesn't check for
        uniqueness. A collision with any previously issued code is retried
        with a fresh code up to `max_create_attempts` times.

        Args:
            destination (str):
                Absolute http(s) URL, at most 2048 characters.
            owner_id (str | None):
                Owning account. None creates an anonymous, immutable record.
            expires_at (datetime | None):
                Optional expiration timestamp.
            password_hash (str | None):
                Optional bcrypt hash of the access password.
            max_active (int | None):
                Owner's active-code cap, checked atomically with the insert.
                None means unlimited. Ignored for anonymous records.

        Returns:
            ShortCodeRecord: The persisted record.

        Raises:
            InvalidDestinationError:
                If the destination is not an acceptable URL.
            QuotaExceededError:
                If the owner already holds `max_active` active records.
            CreateFailedError:
                If no unique code could be allocated.
            DataStoreError:
                If there is an error in the data store.
        """
        validate_destination(destination)
        if owner_id is None:
            max_active = None

        for attempt in range(1, self.max_create_attempts + 1):
            record = ShortCodeRecord(
                code=generate_shortcode(),
                destination=destination,
                created_at=datetime.now(UTC),
                owner_id=owner_id,
                expires_at=expires_at,
                password_hash=password_hash,
            )
            try:
                self.insert(record, max_active=max_active, **kwargs)
            except ShortCodeAlreadyExistsError:
                logger.warning('Short code collision, regenerating.', extra={'code': record.code, 'attempt': attempt})
                continue
            return record

        raise CreateFailedError(f'Could not allocate a unique short code after {self.max_create_attempts} attempts.')

    @abstractmethod
    def insert(self, record: ShortCodeRecord, max_active: int | None = None, **kwargs) -> 'ShortCodeBaseDAO':
        """Insert a new ShortCodeRecord into the data store.

        Args:
            record (ShortCodeRecord):
                The record to be inserted.

            max_active (int | None):
                If given, refuse the insert when the record's owner already
                holds this many active records (checked atomically).

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortCodeBaseDAO: self (for method chaining)

        Raises:
            ShortCodeAlreadyExistsError:
                If the code was ever issued before (active or deactivated).

            QuotaExceededError:
                If the owner's active-record cap is reached.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, code: str, **kwargs) -> ShortCodeRecord:
        """Retrieve an active ShortCodeRecord by its code.

        Expiration is not checked here: expired records are still returned.

        Raises:
            ShortCodeNotFoundError:
                If no active record with the given code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def stats(self, code: str, **kwargs) -> ShortCodeRecord:
        """Retrieve a ShortCodeRecord for stats reporting, deactivated records included.

        Raises:
            ShortCodeNotFoundError:
                If no record with the given code was ever issued.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def hit(self, code: str, **kwargs) -> bool:
        """Count a successful scan: increment scan_count and set last_scanned_at.

        The increment must be a single atomic read-modify-write in the data
        store so that concurrent scans are never lost.

        Returns:
            bool: True if the scan was counted, False if the code is missing or inactive.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def update_destination(self, code: str, destination: str, owner_id: str, **kwargs) -> bool:
        """Change the destination of an active record owned by `owner_id`.

        Returns:
            bool: True if the record changed. False if it doesn't exist, is
                  inactive, or is owned by someone else (indistinguishable).

        Raises:
            InvalidDestinationError:
                If the new destination is not an acceptable URL.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def deactivate(self, code: str, owner_id: str, **kwargs) -> bool:
        """Soft-delete an active record owned by `owner_id`.

        Returns:
            bool: True if the record was deactivated, False otherwise (same
                  convention as update_destination()).

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def count_active(self, owner_id: str, **kwargs) -> int:
        """Return the number of active records owned by `owner_id`.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def list_owned(self, owner_id: str, include_inactive: bool = False, **kwargs) -> list[ShortCodeRecord]:
        """Return records owned by `owner_id`, newest first.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
