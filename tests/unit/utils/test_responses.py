import json

import pytest
from pydantic import ValidationError as PydanticValidationError

from linktoqr.schemas import CreateCodeRequest
from linktoqr.utils.responses import (
    response_json,
    response_error,
    response_400,
    response_302,
    response_503,
    parse_body,
    path_code,
    describe_validation_error,
)


def test_response_json():
    response = response_json(201, {'code': 'aB3_x9Qz'})

    assert response['statusCode'] == 201
    assert response['headers'] == {'Content-Type': 'application/json'}
    assert json.loads(response['body']) == {'code': 'aB3_x9Qz'}


def test_response_error_carries_extras():
    response = response_error(403, message='Plan limit reached', error_code='QUOTA_EXCEEDED', upgrade=True)
    assert json.loads(response['body']) == {'message': 'Plan limit reached', 'errorCode': 'QUOTA_EXCEEDED', 'upgrade': True}


def test_response_400():
    body = json.loads(response_400(message='invalid JSON body')['body'])
    assert body == {'message': 'Bad Request (invalid JSON body)', 'errorCode': 'VALIDATION_ERROR'}


def test_response_503_sets_retry_after():
    response = response_503(error_code='RESOLUTION_FAILED')

    assert response['statusCode'] == 503
    assert response['headers']['Retry-After'] == '1'
    assert json.loads(response['body'])['errorCode'] == 'RESOLUTION_FAILED'


def test_response_302():
    assert response_302(location='https://example.com')['headers']['Location'] == 'https://example.com'
    assert json.loads(response_302(location='/', error_code='NOT_FOUND')['body']) == {'errorCode': 'NOT_FOUND'}


@pytest.mark.parametrize(
    'event, expected',
    [
        ({'body': '{"destination": "https://example.com"}'}, {'destination': 'https://example.com'}),
        ({'body': None}, {}),
        ({}, {}),
    ],
)
def test_parse_body(event, expected):
    assert parse_body(event) == expected


@pytest.mark.parametrize('body', ['{not json', '[1, 2]', '"text"'])
def test_parse_body_rejects_non_objects(body):
    with pytest.raises(ValueError):
        parse_body({'body': body})


def test_path_code():
    assert path_code({'pathParameters': {'code': 'aB3_x9Qz'}}) == 'aB3_x9Qz'
    assert path_code({'pathParameters': None}) is None
    assert path_code({}) is None


def test_describe_validation_error():
    with pytest.raises(PydanticValidationError) as exc_info:
        CreateCodeRequest.model_validate({'destination': 'ftp://example.com'})

    assert describe_validation_error(exc_info.value) == 'destination: Only HTTP/HTTPS URLs are allowed'
