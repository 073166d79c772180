import logging

from linktoqr.types import LambdaEvent, LambdaContext, LambdaResponse
from linktoqr.constants import ErrorCode
from linktoqr.dao.redis import ShortCodeRedisDAO
from linktoqr.dao.exceptions import DataStoreError
from linktoqr.utils import load_config, redis_config, app_prefix, get_user_id
from linktoqr.utils.helpers import guarantee_500_response
from linktoqr.utils.responses import response_json, response_error, response_401, response_503, path_code


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Soft-delete one of the caller's short codes

    The code stops resolving for good and is never issued again; its slot in
    the caller's plan quota is freed.

    HTTP responses:
        200: code, active (false)
        401: No authenticated caller (UNAUTHORIZED)
        404: Missing, already deactivated, anonymous or someone else's code (NOT_FOUND_OR_NOT_OWNED)
        503: Storage unavailable
    """
    redis_kwargs = redis_config(load_config('deactivate_code'))

    owner_id = get_user_id(event)
    if owner_id is None:
        return response_401()

    code = path_code(event)
    try:
        dao = ShortCodeRedisDAO(**redis_kwargs, prefix=app_prefix())
        changed = bool(code) and dao.deactivate(code, owner_id=owner_id)
    except DataStoreError:
        logger.exception('Storage unavailable. Responding with 503.', extra={'code': code, 'owner_id': owner_id})
        return response_503(error_code=ErrorCode.RESOLUTION_FAILED)

    if not changed:
        return response_error(404, message='Not Found', error_code=ErrorCode.NOT_FOUND_OR_NOT_OWNED)

    logger.info('Short code deactivated.', extra={'code': code, 'owner_id': owner_id})
    return response_json(200, {'code': code, 'active': False})
