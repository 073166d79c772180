import json
from datetime import datetime, UTC
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch

from linktoqr.constants import Plan
from linktoqr.lambdas.list_codes import app
from linktoqr.models import Account, ShortCodeRecord
from linktoqr.dao.base import ShortCodeBaseDAO, AccountBaseDAO
from linktoqr.dao.exceptions import AccountNotFoundError, DataStoreError


CREATED_AT = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


class TestListCodesHandler:

    @pytest.fixture
    def short_code_dao(self) -> ShortCodeBaseDAO:
        dao = MagicMock(spec=ShortCodeBaseDAO)
        dao.redis = MagicMock()
        dao.list_owned.return_value = [
            ShortCodeRecord(code='code0002', destination='https://example.com/2', created_at=CREATED_AT, owner_id='42'),
            ShortCodeRecord(code='code0001', destination='https://example.com/1', created_at=CREATED_AT, owner_id='42', scan_count=3),
        ]
        dao.count_active.return_value = 2
        return dao

    @pytest.fixture
    def account_dao(self) -> AccountBaseDAO:
        dao = MagicMock(spec=AccountBaseDAO)
        dao.get.return_value = Account(account_id='42', email='jane@example.com', password_hash='h', plan=Plan.FREE)
        return dao

    @pytest.fixture(autouse=True)
    def setup(self, monkeypatch: MonkeyPatch, short_code_dao, account_dao, make_event) -> None:
        monkeypatch.setattr(app, 'load_config', lambda *a, **kw: {'redis': {'host': 'redis.test'}})
        monkeypatch.setattr(app, 'ShortCodeRedisDAO', MagicMock(return_value=short_code_dao))
        monkeypatch.setattr(app, 'AccountRedisDAO', MagicMock(return_value=account_dao))

        self.short_code_dao = short_code_dao
        self.account_dao = account_dao
        self.make_event = make_event

    def test_list(self) -> None:
        response = app.lambda_handler(self.make_event(user_id='42'), None)
        body = json.loads(response['body'])

        assert response['statusCode'] == 200
        assert [r['code'] for r in body['records']] == ['code0002', 'code0001']
        assert body['records'][1]['scan_count'] == 3
        assert body['records'][0]['short_url'] == 'https://qr.example.com/r/code0002'
        assert body['usage_count'] == 2
        assert body['usage_limit'] == 2
        assert body['plan'] == 'free'
        self.short_code_dao.list_owned.assert_called_once_with('42')
        self.short_code_dao.count_active.assert_called_once_with('42')

    def test_unlimited_plan(self) -> None:
        self.account_dao.get.return_value = Account(account_id='42', email='j@example.com', password_hash='h', plan=Plan.BUSINESS)

        body = json.loads(app.lambda_handler(self.make_event(user_id='42'), None)['body'])

        assert body['usage_limit'] == 'unlimited'
        assert body['plan'] == 'business'

    def test_usage_count_comes_from_active_count(self) -> None:
        self.short_code_dao.count_active.return_value = 5

        body = json.loads(app.lambda_handler(self.make_event(user_id='42'), None)['body'])

        assert body['usage_count'] == 5
        assert len(body['records']) == 2

    def test_unknown_account_defaults_to_free_plan(self) -> None:
        self.account_dao.get.side_effect = AccountNotFoundError()

        body = json.loads(app.lambda_handler(self.make_event(user_id='42'), None)['body'])

        assert body['plan'] == 'free'

    def test_unauthenticated(self) -> None:
        response = app.lambda_handler(self.make_event(), None)

        assert response['statusCode'] == 401
        assert json.loads(response['body'])['errorCode'] == 'UNAUTHORIZED'
        self.short_code_dao.list_owned.assert_not_called()

    def test_storage_failure(self) -> None:
        self.short_code_dao.list_owned.side_effect = DataStoreError('down')

        response = app.lambda_handler(self.make_event(user_id='42'), None)

        assert response['statusCode'] == 503
