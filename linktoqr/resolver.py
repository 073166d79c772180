"""Redirect resolution: decide what a scan of a short code leads to.

Decisions are evaluated strictly in this order, each one short-circuiting:

    NOT_FOUND           no record, or record deactivated (indistinguishable)
    EXPIRED             expires_at is set and has passed; scan not counted
    PASSWORD_REQUIRED   protected record and credential missing or wrong
                        (indistinguishable); scan not counted
    ALLOWED             scan counted exactly once, destination returned

Storage failures during the lookup or the scan increment yield
RESOLUTION_FAILED. They are never reported as NOT_FOUND.

Example:
    >>> resolver = RedirectResolver(ShortCodeRedisDAO(prefix='linktoqr:dev'))
    >>> resolution = resolver.resolve('aB3_x9Qz', credential='secret123')
    >>> resolution.decision
    <Decision.ALLOWED: 'ALLOWED'>
    >>> resolution.destination
    'https://example.com/menu'
"""

import logging
from dataclasses import dataclass
from datetime import datetime, UTC
from enum import StrEnum

from linktoqr.models import ShortCodeRecord
from linktoqr.dao.base import ShortCodeBaseDAO
from linktoqr.dao.exceptions import DataStoreError, ShortCodeNotFoundError
from linktoqr.utils.credentials import verify_password


logger = logging.getLogger(__name__)


class Decision(StrEnum):
    NOT_FOUND = 'NOT_FOUND'
    EXPIRED = 'EXPIRED'
    PASSWORD_REQUIRED = 'PASSWORD_REQUIRED'
    ALLOWED = 'ALLOWED'
    RESOLUTION_FAILED = 'RESOLUTION_FAILED'


@dataclass(frozen=True)
class Resolution:
    decision: Decision
    destination: str | None = None  # Only set when ALLOWED
    record: ShortCodeRecord | None = None  # Record as looked up (before the scan was counted)


class RedirectResolver:
    """Resolve short codes to destinations and count successful scans.

    Holds no state besides the injected DAO, so one instance may serve any
    number of requests.
    """

    def __init__(self, dao: ShortCodeBaseDAO):
        self.dao = dao

    def resolve(self, code: str, credential: str | None = None, now: datetime | None = None) -> Resolution:
        """Decide the outcome of a scan of `code`.

        Args:
            code (str):
                Short code taken from the redirect URL.
            credential (str | None):
                Plaintext access password supplied by the scanner, if any.
            now (datetime | None):
                Reference time for the expiration check. Defaults to the current time.

        Returns:
            Resolution: the decision, plus the destination when ALLOWED.
        """
        try:
            record = self.dao.get(code)
        except ShortCodeNotFoundError:
            return Resolution(Decision.NOT_FOUND)
        except DataStoreError:
            logger.exception('Lookup failed.', extra={'code': code, 'decision': Decision.RESOLUTION_FAILED})
            return Resolution(Decision.RESOLUTION_FAILED)

        if record.is_expired(now or datetime.now(UTC)):
            return Resolution(Decision.EXPIRED, record=record)

        if record.password_protected and not verify_password(credential, record.password_hash):
            return Resolution(Decision.PASSWORD_REQUIRED, record=record)

        try:
            counted = self.dao.hit(code)
        except DataStoreError:
            logger.exception('Scan increment failed.', extra={'code': code, 'decision': Decision.RESOLUTION_FAILED})
            return Resolution(Decision.RESOLUTION_FAILED, record=record)

        if not counted:
            # Deactivated between lookup and increment
            return Resolution(Decision.NOT_FOUND)

        return Resolution(Decision.ALLOWED, destination=record.destination, record=record)
