"""API Gateway (Lambda proxy) response builders shared by all handlers.

Error bodies always look like:
    {"message": "<human readable>", "errorCode": "<ErrorCode>", ...extra}

Example:
    >>> response_json(201, {'code': 'aB3_x9Qz'})['statusCode']
    201
    >>> response_503(error_code=ErrorCode.CREATE_FAILED)['headers']['Retry-After']
    '1'
"""

import json
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from linktoqr.types import LambdaEvent, LambdaResponse
from linktoqr.constants import ErrorCode, RETRY_AFTER_SECONDS


JSON_HEADERS = {'Content-Type': 'application/json'}


def response_json(status_code: int, body: dict[str, Any], headers: dict[str, str] | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {**JSON_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def response_error(status_code: int, *, message: str, error_code: str, **extra: Any) -> LambdaResponse:
    return response_json(status_code, {'message': message, 'errorCode': str(error_code), **extra})


def response_400(message: str | None = None, error_code: str = ErrorCode.VALIDATION_ERROR) -> LambdaResponse:
    base = 'Bad Request'
    return response_error(400, message=base if not message else f'{base} ({message})', error_code=error_code)


def response_401(message: str | None = None, error_code: str = ErrorCode.UNAUTHORIZED) -> LambdaResponse:
    return response_error(401, message=message or 'Unauthorized', error_code=error_code)


def response_503(*, error_code: str, message: str | None = None) -> LambdaResponse:
    body = {'message': message or 'Service Unavailable', 'errorCode': str(error_code)}
    return response_json(503, body, headers={'Retry-After': str(RETRY_AFTER_SECONDS)})


def response_302(*, location: str, error_code: str | None = None) -> LambdaResponse:
    body = {} if error_code is None else {'errorCode': str(error_code)}
    return response_json(302, body, headers={'Location': location})


def parse_body(event: LambdaEvent) -> dict[str, Any]:
    """Decode the JSON request body.

    Raises:
        ValueError: If the body is not valid JSON or not a JSON object.
    """
    try:
        body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError as e:
        raise ValueError('invalid JSON body') from e
    if not isinstance(body, dict):
        raise ValueError('JSON body must be an object')
    return body


def describe_validation_error(error: PydanticValidationError) -> str:
    """Flatten a pydantic ValidationError into one line, e.g. "destination: Invalid URL format"."""
    parts = []
    for item in error.errors():
        field = '.'.join(str(loc) for loc in item.get('loc', ()))
        message = item.get('msg', 'invalid value').removeprefix('Value error, ')
        parts.append(f'{field}: {message}' if field else message)
    return '; '.join(parts)


def path_code(event: LambdaEvent) -> str | None:
    return (event.get('pathParameters') or {}).get('code')
