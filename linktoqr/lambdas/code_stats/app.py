import logging

from linktoqr.types import LambdaEvent, LambdaContext, LambdaResponse
from linktoqr.constants import ErrorCode
from linktoqr.dao.redis import ShortCodeRedisDAO
from linktoqr.dao.exceptions import DataStoreError, ShortCodeNotFoundError
from linktoqr.utils import load_config, redis_config, app_prefix
from linktoqr.utils.helpers import guarantee_500_response
from linktoqr.utils.responses import response_json, response_error, response_503, path_code


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Report public scan statistics of a short code

    HTTP responses:
        200: code, destination, scan_count, created_at, last_scanned_at, expires_at
        404: Unknown code (NOT_FOUND); deactivated codes still report their history
        503: Storage unavailable
    """
    redis_kwargs = redis_config(load_config('code_stats'))

    code = path_code(event)
    if not code:
        return response_error(404, message='Not Found', error_code=ErrorCode.NOT_FOUND)

    try:
        record = ShortCodeRedisDAO(**redis_kwargs, prefix=app_prefix()).stats(code)
    except ShortCodeNotFoundError:
        logger.info('Short code not found. Responding with 404.', extra={'code': code, 'event': ErrorCode.NOT_FOUND})
        return response_error(404, message='Not Found', error_code=ErrorCode.NOT_FOUND)
    except DataStoreError:
        logger.exception('Storage unavailable. Responding with 503.', extra={'code': code})
        return response_503(error_code=ErrorCode.RESOLUTION_FAILED)

    return response_json(200, record.to_stats())
