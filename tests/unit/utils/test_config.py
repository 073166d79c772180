"""Unit tests for configuration utilities in config.py

Test coverage includes:

1. Environment variable resolution
   - Ensures app_env(), app_name(), app_prefix() correctly read environment variables.

2. Project root resolution

3. Configuration loading behavior
   - Ensures load_config() returns the lambda's section for the active backend.
   - Ensures load_config() raises ClientError when AppConfig calls fail.
   - Ensures missing AppConfig identifiers and malformed documents are reported.

4. redis_config() keyword argument mapping
"""

import os
import json
from io import BytesIO
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import botocore

from linktoqr.utils import config
from linktoqr.exceptions import BadConfigurationError, MissingEnvironmentVariableError


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture(autouse=True)
def _appconfig_env(monkeypatch):
    monkeypatch.setenv('APPCONFIG_APP_ID', 'app123')
    monkeypatch.setenv('APPCONFIG_ENV_ID', 'env123')
    monkeypatch.setenv('APPCONFIG_PROFILE_ID', 'prof123')
    monkeypatch.delenv('APPCONFIG_AGENT_URL', raising=False)


@pytest.fixture
def appconfig_payload():
    # fmt: off
    return {
        'build': 42,
        'active_backend': 'redis',
        'configs': {
            'create_code': {
                'redis': {
                    'host': 'monkey',
                    'port': 659595,
                    'db': 3
                }
            }
        },
    }
    # fmt: on


@pytest.fixture
def appconfig_client(monkeypatch, appconfig_payload):
    client = MagicMock()
    client.start_configuration_session.return_value = {'InitialConfigurationToken': 'monkey_token'}
    client.get_latest_configuration.return_value = {'Configuration': BytesIO(json.dumps(appconfig_payload).encode('utf-8'))}
    monkeypatch.setattr(config.boto3, 'client', lambda service: client)
    return client


# -------------------------------
# 1. Environment variable resolution
# -------------------------------


def test_app_env(monkeypatch):
    monkeypatch.setitem(os.environ, 'APP_ENV', 'Test')
    assert config.app_env() == 'test'


def test_app_env_defaults_to_local(monkeypatch):
    monkeypatch.delitem(os.environ, 'APP_ENV', raising=False)
    assert config.app_env() == 'local'


def test_app_name(monkeypatch):
    monkeypatch.setitem(os.environ, 'APP_NAME', 'linktoqr')
    assert config.app_name() == 'linktoqr'


def test_app_prefix(monkeypatch):
    monkeypatch.setitem(os.environ, 'APP_NAME', 'linktoqr')
    monkeypatch.setitem(os.environ, 'APP_ENV', 'test')
    assert config.app_prefix() == 'linktoqr:test'


def test_app_prefix_without_app_name(monkeypatch):
    monkeypatch.delitem(os.environ, 'APP_NAME', raising=False)
    assert config.app_prefix() is None


# -------------------------------
# 2. Project root resolution
# -------------------------------


def test_project_root(monkeypatch):
    monkeypatch.setitem(os.environ, 'PROJECT_ROOT', '/monkey/path')
    assert config.project_root() == Path('/monkey/path')


# -------------------------------
# 3. Configuration loading behavior
# -------------------------------


def test_load_config(appconfig_client):
    result = config.load_config('create_code')

    assert result == {'redis': {'host': 'monkey', 'port': 659595, 'db': 3}}
    appconfig_client.start_configuration_session.assert_called_once_with(
        ApplicationIdentifier='app123',
        EnvironmentIdentifier='env123',
        ConfigurationProfileIdentifier='prof123',
    )
    appconfig_client.get_latest_configuration.assert_called_once_with(ConfigurationToken='monkey_token')


def test_load_config_for_unknown_lambda(appconfig_client):
    with pytest.raises(BadConfigurationError):
        config.load_config('no_such_lambda')


def test_load_config_propagates_client_error(monkeypatch):
    client = MagicMock()
    client.start_configuration_session.side_effect = botocore.exceptions.ClientError(
        {'Error': {'Code': 'ResourceNotFoundException'}}, 'StartConfigurationSession'
    )
    monkeypatch.setattr(config.boto3, 'client', lambda service: client)

    with pytest.raises(botocore.exceptions.ClientError):
        config.load_config('create_code')


def test_load_config_requires_appconfig_identifiers(monkeypatch, appconfig_client):
    monkeypatch.delenv('APPCONFIG_ENV_ID')

    with pytest.raises(MissingEnvironmentVariableError, match='APPCONFIG_ENV_ID'):
        config.load_config('create_code')
    appconfig_client.start_configuration_session.assert_not_called()


# -------------------------------
# 4. redis_config()
# -------------------------------


def test_redis_config():
    assert config.redis_config({'redis': {'host': 'localhost', 'port': 6379}}) == {
        'redis_host': 'localhost',
        'redis_port': 6379,
    }


def test_redis_config_with_unsupported_backend():
    with pytest.raises(BadConfigurationError):
        config.redis_config({'dynamodb': {'table': 'links'}})
