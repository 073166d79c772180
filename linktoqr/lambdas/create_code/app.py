import logging

from pydantic import ValidationError as PydanticValidationError

from linktoqr.types import LambdaEvent, LambdaContext, LambdaResponse
from linktoqr.constants import ErrorCode, Plan
from linktoqr.dao.redis import ShortCodeRedisDAO, AccountRedisDAO
from linktoqr.dao.exceptions import AccountNotFoundError, DataStoreError
from linktoqr.exceptions import CreateFailedError, QuotaExceededError, ValidationError
from linktoqr.schemas import CreateCodeRequest
from linktoqr.utils import load_config, redis_config, app_prefix, get_short_url, get_user_id, hash_password, limit_for, format_limit
from linktoqr.utils.helpers import guarantee_500_response
from linktoqr.utils.responses import response_json, response_error, response_400, response_503, parse_body, describe_validation_error


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to create dynamic QR short codes

    This Lambda handler follows this procedure to create short codes:
    - Step 1: Validate the request body
    - Step 2: Look up the caller's plan (authenticated callers only)
    - Step 3: Hash the access password, if any
    - Step 4: Allocate the short code (quota checked atomically with the insert)
    - Step 5: Respond with the new code and its public short URL

    HTTP responses:
        201: Short code created
            code, short_url, destination, created_at, expires_at, password_protected
        400: Bad client request (VALIDATION_ERROR)
        403: Plan limit reached (QUOTA_EXCEEDED, upgrade: true)
        503: Storage unavailable or no unique code allocated (CREATE_FAILED)
            headers:
                Retry-After: seconds to wait before retrying

    Example:
        >>> event = {'body': '{"destination": "https://example.com/menu"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
    """
    # 0- Get application's config
    redis_kwargs = redis_config(load_config('create_code'))

    # 1- Validate request body
    try:
        request = CreateCodeRequest.model_validate(parse_body(event))
    except ValueError as e:
        # pydantic.ValidationError is a ValueError too
        message = describe_validation_error(e) if isinstance(e, PydanticValidationError) else str(e)
        logger.info('Invalid create request. Responding with 400.', extra={'event': ErrorCode.VALIDATION_ERROR})
        return response_400(message=message)

    owner_id = get_user_id(event)

    try:
        short_code_dao = ShortCodeRedisDAO(**redis_kwargs, prefix=app_prefix())

        # 2- Resolve the caller's plan limit (anonymous codes are not capped)
        max_active = None
        if owner_id is not None:
            account_dao = AccountRedisDAO(redis_client=short_code_dao.redis, prefix=app_prefix())
            try:
                plan = account_dao.get(owner_id).plan
            except AccountNotFoundError:
                logger.warning('No account for authenticated caller, assuming free plan.', extra={'owner_id': owner_id})
                plan = Plan.FREE
            max_active = limit_for(plan)

        # 3- Hash access password
        password_hash = hash_password(request.password) if request.password else None

        # 4- Allocate short code
        record = short_code_dao.create(
            request.destination,
            owner_id=owner_id,
            expires_at=request.expires_at,
            password_hash=password_hash,
            max_active=max_active,
        )
    except QuotaExceededError as e:
        logger.info(
            'Plan limit reached. Responding with 403.',
            extra={'owner_id': owner_id, 'event': ErrorCode.QUOTA_EXCEEDED, 'limit': e.limit},
        )
        return response_error(
            403,
            message=str(e) or 'Plan limit reached',
            error_code=ErrorCode.QUOTA_EXCEEDED,
            limit=format_limit(e.limit),
            upgrade=True,
        )
    except ValidationError as e:
        return response_400(message=str(e))
    except (CreateFailedError, DataStoreError):
        logger.exception('Failed to create short code. Responding with 503.', extra={'event': ErrorCode.CREATE_FAILED})
        return response_503(error_code=ErrorCode.CREATE_FAILED)

    # 5- Respond with the new code
    logger.info('Short code created. Responding with 201.', extra={'code': record.code, 'owner_id': owner_id})
    return response_json(
        201,
        {
            'code': record.code,
            'short_url': get_short_url(record.code, event),
            'destination': record.destination,
            'created_at': record.created_at.isoformat(),
            'expires_at': record.expires_at.isoformat() if record.expires_at else None,
            'password_protected': record.password_protected,
        },
    )
