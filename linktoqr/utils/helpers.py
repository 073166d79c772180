"""Helper utilities for AWS lambda functions.

Functions:
    base_url() -> str
        Extract correct public base URL from API Gateway event
    get_short_url() -> str
        Get the public redirect URL for a given short code
    parse_datetime() -> datetime | None
        Parse an ISO-8601 timestamp into an aware UTC datetime
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn unexpected handler exceptions into a JSON 500 response

Example:
    Typical usage inside a Lambda handler:

        >>> from linktoqr.utils.helpers import base_url
        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'

        >>> base_url({})
        'http://localhost:3000'
"""

import os
import json
import logging
import functools
from datetime import datetime, UTC
from typing import Any
from collections.abc import Callable

from linktoqr.constants import ENV, ErrorCode
from linktoqr.exceptions import MissingEnvironmentVariableError
from linktoqr.utils.runtime import running_locally


logger = logging.getLogger(__name__)

LOCAL_HOSTS = ('localhost', '127.0.0.1')


def base_url(event: dict[str, Any]) -> str:
    """Extract public base URL from API Gateway event

    PUBLIC_BASE_URL, when set, always wins. Otherwise a custom domain is used
    without the stage name, the default execute-api domain with it, and a
    local domain over plain http.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL, e.g.:
             - "https://qr.example.com"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    public_base_url = os.environ.get(ENV.App.PUBLIC_BASE_URL)
    if public_base_url:
        return public_base_url.rstrip('/')

    request_context = event.get('requestContext') or {}
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain and domain.split(':')[0] in LOCAL_HOSTS:
        return f'http://{domain}'
    elif domain and 'execute-api' not in domain:
        return f'https://{domain}'
    elif domain:
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def get_short_url(code: str, event: dict[str, Any]) -> str:
    """Get string representation of the redirect URL encoded into the QR image

    Args:
        code (str): short code
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: short url string representation, e.g. "https://qr.example.com/r/aB3_x9Qz"
    """
    return f'{base_url(event).rstrip("/")}/r/{code}'


def parse_datetime(value: str | None) -> datetime | None:
    """Parse an ISO-8601 string into an aware datetime (naive values are taken as UTC)."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with a JSON 500 instead of crashing the Lambda runtime

    When running locally the original exception is re-raised so it surfaces
    in the SAM console.
    """

    @functools.wraps(handler)
    def wrapper(event, context):
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception(
                'Unhandled exception in lambda handler. Responding with 500.',
                extra={'event': ErrorCode.UNKNOWN_INTERNAL_SERVER_ERROR},
            )
            return {
                'statusCode': 500,
                'headers': {'Content-Type': 'application/json'},
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'errorCode': ErrorCode.UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper
