import logging

from pydantic import ValidationError as PydanticValidationError

from linktoqr.types import LambdaEvent, LambdaContext, LambdaResponse
from linktoqr.constants import ErrorCode
from linktoqr.dao.redis import AccountRedisDAO
from linktoqr.dao.exceptions import AccountNotFoundError, DataStoreError
from linktoqr.schemas import CredentialsRequest
from linktoqr.utils import load_config, redis_config, app_prefix, verify_password, dummy_hash
from linktoqr.utils.helpers import guarantee_500_response
from linktoqr.utils.responses import response_json, response_400, response_401, response_503, parse_body, describe_validation_error


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Check account credentials

    Token minting is left to the upstream token issuer; this handler only
    tells it whether the credentials are valid and who they belong to.

    HTTP responses:
        200: account (id, email, plan, created_at)
        400: Malformed request (VALIDATION_ERROR)
        401: Unknown email or wrong password, indistinguishable (INVALID_CREDENTIALS)
        503: Storage unavailable
    """
    redis_kwargs = redis_config(load_config('login'))

    try:
        request = CredentialsRequest.model_validate(parse_body(event))
    except PydanticValidationError as e:
        return response_400(message=describe_validation_error(e))
    except ValueError as e:
        return response_400(message=str(e))

    try:
        dao = AccountRedisDAO(**redis_kwargs, prefix=app_prefix())
        account = dao.find_by_email(request.email)
    except AccountNotFoundError:
        account = None
    except DataStoreError:
        logger.exception('Storage unavailable. Responding with 503.')
        return response_503(error_code=ErrorCode.RESOLUTION_FAILED)

    # Unknown emails still pay for one bcrypt check
    password_hash = account.password_hash if account is not None else dummy_hash()
    if not verify_password(request.password, password_hash) or account is None:
        logger.info('Invalid credentials. Responding with 401.', extra={'event': ErrorCode.INVALID_CREDENTIALS})
        return response_401(message='Invalid email or password', error_code=ErrorCode.INVALID_CREDENTIALS)

    logger.info('Login succeeded.', extra={'account_id': account.account_id})
    return response_json(200, {'account': account.to_public()})
