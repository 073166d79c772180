from urllib.parse import urlparse

from linktoqr.constants import Limits
from linktoqr.exceptions import InvalidDestinationError


def validate_destination(url: object) -> str:
    """Validate a destination URL and return it unchanged.

    A destination must be a non-empty absolute http(s) URL with a host and at
    most 2048 characters.

    Raises:
        InvalidDestinationError: If any of the above does not hold.

    Example:
        >>> validate_destination('https://example.com/menu')
        'https://example.com/menu'
        >>> validate_destination('ftp://example.com')
        Traceback (most recent call last):
            ...
        linktoqr.exceptions.InvalidDestinationError: Only HTTP/HTTPS URLs are allowed
    """
    if not url or not isinstance(url, str):
        raise InvalidDestinationError('URL is required')
    if len(url) > Limits.MAX_DESTINATION_LENGTH:
        raise InvalidDestinationError(f'URL too long (max {Limits.MAX_DESTINATION_LENGTH})')

    try:
        components = urlparse(url)
    except ValueError as e:
        raise InvalidDestinationError('Invalid URL format') from e

    if components.scheme not in {'http', 'https'}:
        raise InvalidDestinationError('Only HTTP/HTTPS URLs are allowed')
    if not components.netloc:
        raise InvalidDestinationError('URL must have a valid domain')
    return url
