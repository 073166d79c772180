import json
from datetime import datetime, UTC
from typing import Any

import fakeredis
import pytest

from linktoqr.dao.redis import ShortCodeRedisDAO, AccountRedisDAO


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    """Keep tests fast and independent from the developer's shell."""
    monkeypatch.setenv('BCRYPT_ROUNDS', '4')
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)
    monkeypatch.delenv('PUBLIC_BASE_URL', raising=False)


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def fake_server() -> fakeredis.FakeServer:
    return fakeredis.FakeServer()


@pytest.fixture
def fake_redis(fake_server) -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(server=fake_server, decode_responses=True)


@pytest.fixture
def short_code_dao(fake_redis, app_prefix) -> ShortCodeRedisDAO:
    return ShortCodeRedisDAO(redis_client=fake_redis, prefix=app_prefix)


@pytest.fixture
def account_dao(fake_redis, app_prefix) -> AccountRedisDAO:
    return AccountRedisDAO(redis_client=fake_redis, prefix=app_prefix)


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _make_event(
    *,
    body: dict[str, Any] | str | None = None,
    code: str | None = None,
    user_id: str | None = None,
    query: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Build a minimal API Gateway proxy event."""
    request_context: dict[str, Any] = {'domainName': 'qr.example.com', 'stage': 'test'}
    if user_id is not None:
        request_context['authorizer'] = {'claims': {'sub': user_id}}
    return {
        'body': body if isinstance(body, str) or body is None else json.dumps(body),
        'pathParameters': {'code': code} if code is not None else None,
        'queryStringParameters': query,
        'requestContext': request_context,
    }


@pytest.fixture
def make_event():
    """Factory for API Gateway proxy events (body, path code, caller identity, query string)."""
    return _make_event
