"""Password hashing for account passwords and per-code access passwords

Both uses share the same bcrypt primitive but no state: every hash carries
its own salt and cost factor.

Functions:
    hash_password(plaintext, rounds=None) -> str
    verify_password(plaintext, hashed) -> bool
    dummy_hash() -> str

Example:
    >>> hashed = hash_password('secret123')
    >>> verify_password('secret123', hashed)
    True
    >>> verify_password('wrong', hashed)
    False
"""

import os
import logging
import secrets
import functools

import bcrypt

from linktoqr.constants import ENV, Limits


logger = logging.getLogger(__name__)


def bcrypt_rounds() -> int:
    """Return the bcrypt cost factor from BCRYPT_ROUNDS (default 12)."""
    return int(os.environ.get(ENV.App.BCRYPT_ROUNDS, Limits.BCRYPT_ROUNDS))


def hash_password(plaintext: str, rounds: int | None = None) -> str:
    """Hash a plaintext password with a fresh salt.

    Args:
        plaintext (str): password to hash.
        rounds (int | None): bcrypt cost factor. Defaults to bcrypt_rounds().

    Returns:
        str: the bcrypt hash (includes salt and cost factor).
    """
    salt = bcrypt.gensalt(rounds=rounds or bcrypt_rounds())
    return bcrypt.hashpw(plaintext.encode('utf-8'), salt).decode('utf-8')


def verify_password(plaintext: str | None, hashed: str | None) -> bool:
    """Check a plaintext password against a bcrypt hash.

    Comparison is delegated to bcrypt.checkpw (constant time). A missing
    password, a missing hash or a malformed hash never verify.
    """
    if not plaintext or not hashed:
        return False
    try:
        return bcrypt.checkpw(plaintext.encode('utf-8'), hashed.encode('utf-8'))
    except ValueError:
        logger.warning('Stored password hash is malformed.')
        return False


@functools.cache
def _dummy_hash(rounds: int) -> str:
    return hash_password(secrets.token_urlsafe(16), rounds=rounds)


def dummy_hash() -> str:
    """Return a hash of a random throwaway password at the current cost factor.

    Checking a password against it costs the same as checking a real one, so
    callers can verify something when there is no stored hash (unknown
    account) and keep both paths equally slow.
    """
    return _dummy_hash(bcrypt_rounds())
