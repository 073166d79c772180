import logging

from linktoqr.types import LambdaEvent, LambdaContext, LambdaResponse
from linktoqr.constants import ErrorCode, Surface
from linktoqr.dao.redis import ShortCodeRedisDAO
from linktoqr.dao.exceptions import DataStoreError
from linktoqr.resolver import Decision, RedirectResolver
from linktoqr.utils import load_config, redis_config, app_prefix, base_url
from linktoqr.utils.helpers import guarantee_500_response
from linktoqr.utils.responses import response_302, response_error, response_503, path_code


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle QR scans: redirect a short code to its destination

    This Lambda handler follows this procedure:
    - Step 1: Extract the short code from the path and the credential from `?pw=`
    - Step 2: Resolve the code (lookup, expiration, password, scan count)
    - Step 3: Map the decision to an HTTP response

    HTTP responses:
        302: ALLOWED, Location: destination
        302: PASSWORD_REQUIRED, Location: /password/<code> (missing or wrong password alike)
        302: NOT_FOUND, Location: / (unknown or deactivated codes alike)
        410: EXPIRED
        503: RESOLUTION_FAILED (storage unavailable)
            headers:
                Retry-After: seconds to wait before retrying

    Example:
        >>> event = {'pathParameters': {'code': 'aB3_x9Qz'}}
        >>> response = lambda_handler(event, None)
        >>> response['headers']['Location']
        'https://example.com/menu'
    """
    # 0- Get application's config
    redis_kwargs = redis_config(load_config('redirect_code'))

    # 1- Extract code and credential
    code = path_code(event)
    credential = (event.get('queryStringParameters') or {}).get('pw') or None
    landing = f'{base_url(event)}{Surface.LANDING}'
    if not code:
        logger.info('Missing code in path. Redirecting to landing page.', extra={'event': Decision.NOT_FOUND})
        return response_302(location=landing, error_code=ErrorCode.NOT_FOUND)

    # 2- Resolve
    try:
        resolver = RedirectResolver(ShortCodeRedisDAO(**redis_kwargs, prefix=app_prefix()))
    except DataStoreError:
        logger.exception('Storage unavailable. Responding with 503.', extra={'code': code, 'event': Decision.RESOLUTION_FAILED})
        return response_503(error_code=ErrorCode.RESOLUTION_FAILED)
    resolution = resolver.resolve(code, credential=credential)

    # 3- Map decision to response
    logger.info('Short code resolved.', extra={'code': code, 'decision': resolution.decision})
    match resolution.decision:
        case Decision.ALLOWED:
            return response_302(location=resolution.destination)
        case Decision.PASSWORD_REQUIRED:
            prompt = f'{base_url(event)}{Surface.PASSWORD_PROMPT.format(code=code)}'
            return response_302(location=prompt, error_code=ErrorCode.PASSWORD_REQUIRED)
        case Decision.EXPIRED:
            return response_error(410, message='This QR code has expired', error_code=ErrorCode.EXPIRED)
        case Decision.RESOLUTION_FAILED:
            return response_503(error_code=ErrorCode.RESOLUTION_FAILED)
        case _:
            return response_302(location=landing, error_code=ErrorCode.NOT_FOUND)
