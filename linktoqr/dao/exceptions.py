"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortCodeNotFoundError:
        Raised when an active ShortCodeRecord is not found in the data store.

    ShortCodeAlreadyExistsError:
        Raised when inserting a short code that was ever issued before.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

    AccountNotFoundError:
        Raised when an account is not found in the data store.

    AccountAlreadyExistsError:
        Raised when an account with the same email already exists.

Example:
    >>> from linktoqr.dao.exceptions import ShortCodeNotFoundError
    >>> raise ShortCodeNotFoundError("Short code 'aB3_x9Qz' not found.")
    Traceback (most recent call last):
        ...
    linktoqr.dao.exceptions.ShortCodeNotFoundError: Short code 'aB3_x9Qz' not found.
"""

from linktoqr.exceptions import LinkToQRError


class DAOError(LinkToQRError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ShortCodeNotFoundError(DAOError):
    """Raised when an active ShortCodeRecord is not found in the data store."""

    error_code = 'dao:short_code_not_found_error'


class ShortCodeAlreadyExistsError(DAOError):
    """Raised when inserting a short code that already exists (active or not) in the data store."""

    error_code = 'dao:short_code_already_exists_error'


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include connection issues, timeouts, and out-of-memory failures.
    Always transient from the caller's point of view: safe to retry.
    """

    error_code = 'dao:data_store_error'


class AccountNotFoundError(DAOError):
    """Raised when an account is not found in the data store."""

    error_code = 'dao:account_not_found_error'


class AccountAlreadyExistsError(DAOError):
    """Raised when an account with the same email already exists in the data store."""

    error_code = 'dao:account_already_exists_error'
