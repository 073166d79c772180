import logging

from pydantic import ValidationError as PydanticValidationError

from linktoqr.types import LambdaEvent, LambdaContext, LambdaResponse
from linktoqr.constants import ErrorCode
from linktoqr.dao.redis import ShortCodeRedisDAO
from linktoqr.dao.exceptions import DataStoreError
from linktoqr.exceptions import ValidationError
from linktoqr.schemas import UpdateDestinationRequest
from linktoqr.utils import load_config, redis_config, app_prefix, get_user_id
from linktoqr.utils.helpers import guarantee_500_response
from linktoqr.utils.responses import (
    response_json,
    response_error,
    response_400,
    response_401,
    response_503,
    parse_body,
    path_code,
    describe_validation_error,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Change the destination of one of the caller's short codes

    The printed QR image keeps working: only the stored destination changes.

    HTTP responses:
        200: code, destination
        400: Invalid destination (VALIDATION_ERROR)
        401: No authenticated caller (UNAUTHORIZED)
        404: Missing, deactivated, anonymous or someone else's code (NOT_FOUND_OR_NOT_OWNED)
        503: Storage unavailable
    """
    redis_kwargs = redis_config(load_config('update_code'))

    owner_id = get_user_id(event)
    if owner_id is None:
        return response_401()

    code = path_code(event)
    try:
        request = UpdateDestinationRequest.model_validate(parse_body(event))
    except PydanticValidationError as e:
        return response_400(message=describe_validation_error(e))
    except ValueError as e:
        return response_400(message=str(e))

    try:
        dao = ShortCodeRedisDAO(**redis_kwargs, prefix=app_prefix())
        changed = bool(code) and dao.update_destination(code, request.destination, owner_id=owner_id)
    except ValidationError as e:
        return response_400(message=str(e))
    except DataStoreError:
        logger.exception('Storage unavailable. Responding with 503.', extra={'code': code, 'owner_id': owner_id})
        return response_503(error_code=ErrorCode.RESOLUTION_FAILED)

    if not changed:
        logger.info(
            'Short code not found or not owned. Responding with 404.',
            extra={'code': code, 'owner_id': owner_id, 'event': ErrorCode.NOT_FOUND_OR_NOT_OWNED},
        )
        return response_error(404, message='Not Found', error_code=ErrorCode.NOT_FOUND_OR_NOT_OWNED)

    logger.info('Destination updated.', extra={'code': code, 'owner_id': owner_id})
    return response_json(200, {'code': code, 'destination': request.destination})
