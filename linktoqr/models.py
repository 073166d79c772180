from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Any

from linktoqr.constants import Plan


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class ShortCodeRecord:
    """Represent a dynamic QR code's short code mapping.

    Attributes:
        code (str):
            Unique short identifier embedded in the redirect URL. Never reused.
        destination (str):
            Absolute http(s) URL the code redirects to. Mutable by the owner.
        created_at (datetime):
            Creation timestamp (UTC).
        owner_id (str | None):
            Owning account id. None for anonymously created codes, which can
            never be edited or deactivated.
        scan_count (int):
            Number of successful resolutions.
        last_scanned_at (datetime | None):
            Time of the most recent successful resolution.
        expires_at (datetime | None):
            After this moment the code no longer redirects (stats stay available).
        password_hash (str | None):
            bcrypt hash of the access password, if the code is protected.
        active (bool):
            Soft-delete flag. Inactive codes never resolve.

    Example:
        >>> record = ShortCodeRecord(
        ...     code='aB3_x9Qz',
        ...     destination='https://example.com/menu',
        ...     created_at=datetime.now(UTC),
        ... )
        >>> record.scan_count
        0
        >>> record.is_expired()
        False
    """

    code: str
    destination: str
    created_at: datetime
    owner_id: str | None = None
    scan_count: int = 0
    last_scanned_at: datetime | None = None
    expires_at: datetime | None = None
    password_hash: str | None = None
    active: bool = True

    @property
    def password_protected(self) -> bool:
        return self.password_hash is not None

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or datetime.now(UTC))

    def to_stats(self) -> dict[str, Any]:
        """Public projection of the record (never includes the password hash)."""
        return {
            'code': self.code,
            'destination': self.destination,
            'scan_count': self.scan_count,
            'created_at': _isoformat(self.created_at),
            'last_scanned_at': _isoformat(self.last_scanned_at),
            'expires_at': _isoformat(self.expires_at),
        }


# fmt: off
@dataclass(frozen=True)
class Account:
    account_id: str                     # Opaque account identifier (owner id of short codes)
    email: str                          # Unique, stored lowercase
    password_hash: str                  # bcrypt hash of the account password
    plan: Plan = Plan.FREE              # Subscription tier bounding active dynamic codes
    created_at: datetime | None = None  # Signup timestamp
# fmt: on

    def to_public(self) -> dict[str, Any]:
        return {
            'id': self.account_id,
            'email': self.email,
            'plan': str(self.plan),
            'created_at': _isoformat(self.created_at),
        }
