"""Shortcode generation utility

Short codes are handed out to anonymous users and grant redirect capability
without further authentication, so they must not be guessable or enumerable.
Codes are therefore drawn from a cryptographically strong random source
instead of a (scrambled) counter.

Functions:
    generate_shortcode(length=8, alphabet=ALPHABET) -> str:
        Generate a random, fixed-length, URL-safe short code.

Example:
    >>> from linktoqr.utils import generate_shortcode
    >>> generate_shortcode()
    'q7Xb-2Lk'

NOTE:
    - The generator does not guarantee uniqueness. The data store rejects
      duplicates with ShortCodeAlreadyExistsError and the creation path
      regenerates (see ShortCodeBaseDAO.create()).
    - 64 symbols ** 8 characters = 2**48 possible codes.
"""

import secrets
import string

from linktoqr.constants import ShortCode


# base64url alphabet: 26 uppercase + 26 lowercase + 10 digits + '-' + '_'
ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + '-_'


def generate_shortcode(length: int = ShortCode.LENGTH, alphabet: str = ALPHABET) -> str:
    """Generate a random URL-safe short code.

    Args:
        length (int, optional):
            Number of characters in the code. Defaults to 8.

        alphabet (str, optional):
            Symbols to draw from. Defaults to the base64url alphabet.

    Returns:
        str: A random short code of exactly `length` characters.

    Raises:
        TypeError: If length is not an integer.
        ValueError: If length is not positive or the alphabet has fewer than 2 distinct symbols.

    Example:
        >>> len(generate_shortcode(length=8))
        8
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')
    if len(set(alphabet)) < 2:
        raise ValueError(f'Alphabet must contain at least 2 distinct symbols (given value: {alphabet!r}).')

    return ''.join(secrets.choice(alphabet) for _ in range(length))
