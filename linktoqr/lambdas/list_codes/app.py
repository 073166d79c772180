import logging

from linktoqr.types import LambdaEvent, LambdaContext, LambdaResponse
from linktoqr.constants import ErrorCode, Plan
from linktoqr.dao.redis import ShortCodeRedisDAO, AccountRedisDAO
from linktoqr.dao.exceptions import AccountNotFoundError, DataStoreError
from linktoqr.utils import load_config, redis_config, app_prefix, get_short_url, get_user_id, limit_for, format_limit
from linktoqr.utils.helpers import guarantee_500_response
from linktoqr.utils.responses import response_json, response_401, response_503


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """List the caller's active short codes together with plan usage

    HTTP responses:
        200: records (newest first), usage_count, usage_limit ("unlimited" if none), plan
        401: No authenticated caller (UNAUTHORIZED)
        503: Storage unavailable
    """
    redis_kwargs = redis_config(load_config('list_codes'))

    owner_id = get_user_id(event)
    if owner_id is None:
        return response_401()

    try:
        short_code_dao = ShortCodeRedisDAO(**redis_kwargs, prefix=app_prefix())
        account_dao = AccountRedisDAO(redis_client=short_code_dao.redis, prefix=app_prefix())
        try:
            plan = account_dao.get(owner_id).plan
        except AccountNotFoundError:
            plan = Plan.FREE
        records = short_code_dao.list_owned(owner_id)
        usage_count = short_code_dao.count_active(owner_id)
    except DataStoreError:
        logger.exception('Storage unavailable. Responding with 503.', extra={'owner_id': owner_id})
        return response_503(error_code=ErrorCode.RESOLUTION_FAILED)

    logger.debug('Listing owned short codes.', extra={'owner_id': owner_id, 'count': len(records)})
    return response_json(
        200,
        {
            'records': [
                {
                    **record.to_stats(),
                    'short_url': get_short_url(record.code, event),
                    'password_protected': record.password_protected,
                }
                for record in records
            ],
            'usage_count': usage_count,
            'usage_limit': format_limit(limit_for(plan)),
            'plan': str(plan),
        },
    )
