import json
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch

from linktoqr.lambdas.deactivate_code import app
from linktoqr.dao.base import ShortCodeBaseDAO
from linktoqr.dao.exceptions import DataStoreError


class TestDeactivateCodeHandler:

    @pytest.fixture
    def short_code_dao(self) -> ShortCodeBaseDAO:
        dao = MagicMock(spec=ShortCodeBaseDAO)
        dao.deactivate.return_value = True
        return dao

    @pytest.fixture(autouse=True)
    def setup(self, monkeypatch: MonkeyPatch, short_code_dao, make_event) -> None:
        monkeypatch.setattr(app, 'load_config', lambda *a, **kw: {'redis': {'host': 'redis.test'}})
        monkeypatch.setattr(app, 'ShortCodeRedisDAO', MagicMock(return_value=short_code_dao))

        self.short_code_dao = short_code_dao
        self.make_event = make_event

    def test_deactivate(self) -> None:
        response = app.lambda_handler(self.make_event(code='aB3_x9Qz', user_id='42'), None)

        assert response['statusCode'] == 200
        assert json.loads(response['body']) == {'code': 'aB3_x9Qz', 'active': False}
        self.short_code_dao.deactivate.assert_called_once_with('aB3_x9Qz', owner_id='42')

    def test_not_found_or_not_owned(self) -> None:
        self.short_code_dao.deactivate.return_value = False

        response = app.lambda_handler(self.make_event(code='aB3_x9Qz', user_id='7'), None)

        assert response['statusCode'] == 404
        assert json.loads(response['body'])['errorCode'] == 'NOT_FOUND_OR_NOT_OWNED'

    def test_missing_code(self) -> None:
        response = app.lambda_handler(self.make_event(user_id='42'), None)

        assert response['statusCode'] == 404
        self.short_code_dao.deactivate.assert_not_called()

    def test_unauthenticated(self) -> None:
        response = app.lambda_handler(self.make_event(code='aB3_x9Qz'), None)

        assert response['statusCode'] == 401
        self.short_code_dao.deactivate.assert_not_called()

    def test_storage_failure(self) -> None:
        self.short_code_dao.deactivate.side_effect = DataStoreError('down')

        response = app.lambda_handler(self.make_event(code='aB3_x9Qz', user_id='42'), None)

        assert response['statusCode'] == 503
        assert response['headers']['Retry-After'] == '1'
