import json
from datetime import datetime, UTC
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch

from linktoqr.constants import Plan
from linktoqr.lambdas.signup import app
from linktoqr.models import Account
from linktoqr.dao.base import AccountBaseDAO
from linktoqr.dao.exceptions import AccountAlreadyExistsError, DataStoreError
from linktoqr.utils.credentials import verify_password


class TestSignupHandler:

    @pytest.fixture
    def account_dao(self) -> AccountBaseDAO:
        dao = MagicMock(spec=AccountBaseDAO)
        dao.create.side_effect = lambda email, password_hash: Account(
            account_id='1',
            email=email.strip().lower(),
            password_hash=password_hash,
            plan=Plan.FREE,
            created_at=datetime(2026, 3, 1, 12, 0, tzinfo=UTC),
        )
        return dao

    @pytest.fixture(autouse=True)
    def setup(self, monkeypatch: MonkeyPatch, account_dao, make_event) -> None:
        monkeypatch.setattr(app, 'load_config', lambda *a, **kw: {'redis': {'host': 'redis.test'}})
        monkeypatch.setattr(app, 'AccountRedisDAO', MagicMock(return_value=account_dao))

        self.account_dao = account_dao
        self.make_event = make_event

    def test_signup(self) -> None:
        response = app.lambda_handler(self.make_event(body={'email': 'Jane@Example.com', 'password': 'secret123'}), None)
        body = json.loads(response['body'])

        assert response['statusCode'] == 201
        assert body == {
            'account': {
                'id': '1',
                'email': 'jane@example.com',
                'plan': 'free',
                'created_at': '2026-03-01T12:00:00+00:00',
            }
        }
        email, password_hash = self.account_dao.create.call_args.args
        assert email == 'Jane@Example.com'
        assert verify_password('secret123', password_hash)

    def test_email_taken(self) -> None:
        self.account_dao.create.side_effect = AccountAlreadyExistsError()

        response = app.lambda_handler(self.make_event(body={'email': 'jane@example.com', 'password': 'secret123'}), None)

        assert response['statusCode'] == 409
        assert json.loads(response['body'])['errorCode'] == 'EMAIL_TAKEN'

    @pytest.mark.parametrize(
        'body',
        ['nope', {'email': 'jane@example.com', 'password': '123'}, {'email': 'jane', 'password': 'secret123'}],
    )
    def test_validation_errors(self, body) -> None:
        response = app.lambda_handler(self.make_event(body=body), None)

        assert response['statusCode'] == 400
        self.account_dao.create.assert_not_called()

    def test_storage_failure(self) -> None:
        self.account_dao.create.side_effect = DataStoreError('down')

        response = app.lambda_handler(self.make_event(body={'email': 'jane@example.com', 'password': 'secret123'}), None)

        assert response['statusCode'] == 503
