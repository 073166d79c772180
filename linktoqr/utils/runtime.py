"""Runtime utilities

Functions:
    running_locally() -> bool:
        True if lambda is running in local SAM, False otherwise.

    get_user_id(event) -> str | None:
        Caller identity ('sub' claim verified by the API Gateway authorizer).

Example:
    >>> os.environ['APP_ENV'] = 'local'
    >>> running_locally()
    True
    >>> get_user_id({'requestContext': {'authorizer': {'claims': {'sub': '42'}}}})
    '42'
"""

import os

from linktoqr.types import LambdaEvent
from linktoqr.constants import ENV


def running_locally() -> bool:
    """Return True if running in SAM local invoke/api, False otherwise."""
    env = os.getenv(ENV.App.APP_ENV, '').lower()
    return env == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'


def get_user_id(event: LambdaEvent) -> str | None:
    """Extract the authenticated caller's id from the authorizer claims.

    Token verification happens upstream (API Gateway authorizer). Requests
    without claims are anonymous.
    """
    authorizer = (event.get('requestContext') or {}).get('authorizer') or {}
    claims = authorizer.get('claims') or {}
    user_id = claims.get('sub')
    return str(user_id) if user_id else None
