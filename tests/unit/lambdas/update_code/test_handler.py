import json
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch

from linktoqr.lambdas.update_code import app
from linktoqr.dao.base import ShortCodeBaseDAO
from linktoqr.dao.exceptions import DataStoreError


class TestUpdateCodeHandler:

    @pytest.fixture
    def short_code_dao(self) -> ShortCodeBaseDAO:
        dao = MagicMock(spec=ShortCodeBaseDAO)
        dao.update_destination.return_value = True
        return dao

    @pytest.fixture(autouse=True)
    def setup(self, monkeypatch: MonkeyPatch, short_code_dao, make_event) -> None:
        monkeypatch.setattr(app, 'load_config', lambda *a, **kw: {'redis': {'host': 'redis.test'}})
        monkeypatch.setattr(app, 'ShortCodeRedisDAO', MagicMock(return_value=short_code_dao))

        self.short_code_dao = short_code_dao
        self.make_event = make_event

    def test_update(self) -> None:
        event = self.make_event(code='aB3_x9Qz', user_id='42', body={'destination': 'https://example.com/drinks'})

        response = app.lambda_handler(event, None)

        assert response['statusCode'] == 200
        assert json.loads(response['body']) == {'code': 'aB3_x9Qz', 'destination': 'https://example.com/drinks'}
        self.short_code_dao.update_destination.assert_called_once_with('aB3_x9Qz', 'https://example.com/drinks', owner_id='42')

    def test_not_found_or_not_owned(self) -> None:
        self.short_code_dao.update_destination.return_value = False
        event = self.make_event(code='aB3_x9Qz', user_id='7', body={'destination': 'https://example.com/drinks'})

        response = app.lambda_handler(event, None)

        assert response['statusCode'] == 404
        assert json.loads(response['body'])['errorCode'] == 'NOT_FOUND_OR_NOT_OWNED'

    def test_unauthenticated(self) -> None:
        event = self.make_event(code='aB3_x9Qz', body={'destination': 'https://example.com/drinks'})

        response = app.lambda_handler(event, None)

        assert response['statusCode'] == 401
        self.short_code_dao.update_destination.assert_not_called()

    @pytest.mark.parametrize('body', ['{oops', {}, {'destination': 'javascript:alert(1)'}])
    def test_validation_errors(self, body) -> None:
        response = app.lambda_handler(self.make_event(code='aB3_x9Qz', user_id='42', body=body), None)

        assert response['statusCode'] == 400
        assert json.loads(response['body'])['errorCode'] == 'VALIDATION_ERROR'
        self.short_code_dao.update_destination.assert_not_called()

    def test_storage_failure(self) -> None:
        self.short_code_dao.update_destination.side_effect = DataStoreError('down')
        event = self.make_event(code='aB3_x9Qz', user_id='42', body={'destination': 'https://example.com/drinks'})

        response = app.lambda_handler(event, None)

        assert response['statusCode'] == 503
