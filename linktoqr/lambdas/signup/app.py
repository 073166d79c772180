import logging

from pydantic import ValidationError as PydanticValidationError

from linktoqr.types import LambdaEvent, LambdaContext, LambdaResponse
from linktoqr.constants import ErrorCode
from linktoqr.dao.redis import AccountRedisDAO
from linktoqr.dao.exceptions import AccountAlreadyExistsError, DataStoreError
from linktoqr.schemas import CredentialsRequest
from linktoqr.utils import load_config, redis_config, app_prefix, hash_password
from linktoqr.utils.helpers import guarantee_500_response
from linktoqr.utils.responses import response_json, response_error, response_400, response_503, parse_body, describe_validation_error


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Register a new account on the free plan

    HTTP responses:
        201: account (id, email, plan, created_at)
        400: Invalid email or password (VALIDATION_ERROR)
        409: Email already registered (EMAIL_TAKEN)
        503: Storage unavailable
    """
    redis_kwargs = redis_config(load_config('signup'))

    try:
        request = CredentialsRequest.model_validate(parse_body(event))
    except PydanticValidationError as e:
        return response_400(message=describe_validation_error(e))
    except ValueError as e:
        return response_400(message=str(e))

    try:
        dao = AccountRedisDAO(**redis_kwargs, prefix=app_prefix())
        account = dao.create(request.email, hash_password(request.password))
    except AccountAlreadyExistsError:
        logger.info('Email already registered. Responding with 409.', extra={'event': ErrorCode.EMAIL_TAKEN})
        return response_error(409, message='Email already registered', error_code=ErrorCode.EMAIL_TAKEN)
    except DataStoreError:
        logger.exception('Storage unavailable. Responding with 503.')
        return response_503(error_code=ErrorCode.RESOLUTION_FAILED)

    return response_json(201, {'account': account.to_public()})
