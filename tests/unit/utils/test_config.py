"""Unit tests for configuration utilities in config.py

Test coverage includes:

1. Environment variable resolution
   - Ensures app_env(), app_name(), app_prefix() correctly read environment variables.

2. Configuration loading behavior
   - Ensures load_config() reads a local YAML/JSON file when URLSHORTENER_CONFIG_FILE is set.
   - Ensures load_config() falls back to AWS AppConfig (mocked boto3 client).
   - Ensures AppConfig failures raise ConfigurationError.
   - Ensures missing AppConfig identifiers raise MissingEnvironmentVariableError.

3. Validation
   - Ensures URLSHORTENER_BACKEND overrides active_backend.
   - Ensures unknown backends and missing backend settings raise BadConfigurationError.

4. Shortener settings
   - Ensures defaults, overrides and invalid values.
"""

import json
from io import BytesIO
from unittest.mock import MagicMock

import pytest
import botocore

from urlshortener.utils import config
from urlshortener.constants import Shortcode
from urlshortener.exceptions import BadConfigurationError, ConfigurationError, MissingEnvironmentVariableError


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    """Set up environment variables for testing."""
    monkeypatch.setenv('APPCONFIG_APP_ID', 'app123')
    monkeypatch.setenv('APPCONFIG_ENV_ID', 'env123')
    monkeypatch.setenv('APPCONFIG_PROFILE_ID', 'prof123')
    monkeypatch.delenv('URLSHORTENER_CONFIG_FILE', raising=False)
    monkeypatch.delenv('URLSHORTENER_BACKEND', raising=False)


@pytest.fixture
def appconfig_payload():
    """Provide a default AppConfig payload used by multiple tests."""
    # fmt: off
    return {
        'build': 42,
        'active_backend': 'redis',
        'shortener': {
            'base_url': 'https://sho.rt',
        },
        'backends': {
            'redis': {
                'host': 'monkey',
                'port': 6380,
                'db': 3
            },
            'postgresql': {
                'url': 'postgresql+psycopg://app:secret@db:5432/urlshortener'
            },
        },
    }
    # fmt: on


@pytest.fixture
def appconfig_client(monkeypatch, appconfig_payload):
    """Mock the AppConfig Data client."""
    mock_appconfig = MagicMock()
    mock_appconfig.start_configuration_session.return_value = {'InitialConfigurationToken': 'monkey_token'}
    mock_appconfig.get_latest_configuration.return_value = {
        'Configuration': BytesIO(json.dumps(appconfig_payload).encode('utf-8')),
    }
    monkeypatch.setattr(config.boto3, 'client', MagicMock(return_value=mock_appconfig))
    return mock_appconfig


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / 'local.yml'
    path.write_text(
        'active_backend: sqlite\n'
        'shortener:\n'
        '  base_url: http://localhost:8000\n'
        '  code_length: 10\n'
        'backends:\n'
        '  sqlite:\n'
        '    url: sqlite:///urlshortener.db\n',
        encoding='utf-8',
    )
    monkeypatch.setenv('URLSHORTENER_CONFIG_FILE', str(path))
    return path


# -------------------------------
# 1. Environment variable resolution
# -------------------------------


def test_app_env(monkeypatch):
    monkeypatch.setenv('APP_ENV', 'DEV')
    assert config.app_env() == 'dev'


def test_app_env_defaults_to_local(monkeypatch):
    monkeypatch.delenv('APP_ENV', raising=False)
    assert config.app_env() == 'local'


def test_app_name_not_set(monkeypatch):
    monkeypatch.delenv('APP_NAME', raising=False)
    assert config.app_name() is None
    assert config.app_prefix() is None


def test_app_prefix(monkeypatch):
    monkeypatch.setenv('APP_NAME', 'urlshortener')
    monkeypatch.setenv('APP_ENV', 'prod')
    assert config.app_prefix() == 'urlshortener:prod'


# -------------------------------
# 2. Configuration loading behavior
# -------------------------------


def test_load_config_from_appconfig(appconfig_client, appconfig_payload):
    result = config.load_config()

    assert result['active_backend'] == 'redis'
    assert config.backend_config(result) == ('redis', {'host': 'monkey', 'port': 6380, 'db': 3})

    appconfig_client.start_configuration_session.assert_called_once_with(
        ApplicationIdentifier='app123',
        EnvironmentIdentifier='env123',
        ConfigurationProfileIdentifier='prof123',
    )
    appconfig_client.get_latest_configuration.assert_called_once_with(ConfigurationToken='monkey_token')


def test_load_config_from_local_file(config_file, appconfig_client):
    result = config.load_config()

    assert config.backend_config(result) == ('sqlite', {'url': 'sqlite:///urlshortener.db'})
    appconfig_client.start_configuration_session.assert_not_called()


def test_local_file_does_not_require_appconfig_environment(config_file, monkeypatch):
    monkeypatch.delenv('APPCONFIG_APP_ID')
    assert config.load_config()['active_backend'] == 'sqlite'


def test_missing_local_file_raises_error(monkeypatch, tmp_path):
    monkeypatch.setenv('URLSHORTENER_CONFIG_FILE', str(tmp_path / 'missing.yml'))

    with pytest.raises(ConfigurationError, match='not found'):
        config.load_config()


def test_appconfig_client_error_raises_configuration_error(monkeypatch):
    mock_appconfig = MagicMock()
    mock_appconfig.start_configuration_session.side_effect = botocore.exceptions.ClientError(
        {'Error': {'Code': 'ResourceNotFoundException'}}, 'StartConfigurationSession'
    )
    monkeypatch.setattr(config.boto3, 'client', MagicMock(return_value=mock_appconfig))

    with pytest.raises(ConfigurationError, match='Failed to load configuration from AWS AppConfig.'):
        config.load_config()


def test_missing_appconfig_environment_raises_error(monkeypatch):
    monkeypatch.delenv('APPCONFIG_PROFILE_ID')

    with pytest.raises(MissingEnvironmentVariableError, match="'APPCONFIG_PROFILE_ID'"):
        config.load_config()


# -------------------------------
# 3. Validation
# -------------------------------


def test_backend_override(monkeypatch, appconfig_client):
    monkeypatch.setenv('URLSHORTENER_BACKEND', 'PostgreSQL')
    assert config.load_config()['active_backend'] == 'postgresql'


def test_memory_backend_needs_no_settings(monkeypatch, appconfig_client):
    monkeypatch.setenv('URLSHORTENER_BACKEND', 'memory')
    assert config.backend_config(config.load_config()) == ('memory', {})


def test_unknown_backend_raises_error(monkeypatch, appconfig_client):
    monkeypatch.setenv('URLSHORTENER_BACKEND', 'couchdb')

    with pytest.raises(BadConfigurationError, match="Unsupported active_backend: 'couchdb'"):
        config.load_config()


def test_missing_backend_settings_raise_error(monkeypatch, appconfig_client):
    monkeypatch.setenv('URLSHORTENER_BACKEND', 'mongodb')

    with pytest.raises(BadConfigurationError, match="Missing connection settings for active backend 'mongodb'."):
        config.load_config()


def test_backend_config_without_active_backend():
    with pytest.raises(BadConfigurationError, match="no 'active_backend'"):
        config.backend_config({'backends': {'redis': {'host': 'redis'}}})


def test_backend_config_with_unknown_backend():
    with pytest.raises(BadConfigurationError, match="Unsupported active_backend: 'couchdb'"):
        config.backend_config({'active_backend': 'couchdb'})


# -------------------------------
# 4. Shortener settings
# -------------------------------


def test_shortener_settings_defaults():
    settings = config.ShortenerSettings.from_config({})
    assert settings == config.ShortenerSettings('http://localhost:8000', Shortcode.LENGTH, Shortcode.ALPHABET, Shortcode.MAX_ATTEMPTS)


def test_shortener_settings_from_config():
    settings = config.ShortenerSettings.from_config({'shortener': {'base_url': 'https://sho.rt', 'code_length': '10', 'max_attempts': 3}})
    assert settings.base_url == 'https://sho.rt'
    assert settings.code_length == 10
    assert settings.max_attempts == 3


@pytest.mark.parametrize(
    'section',
    [
        {'base_url': 'sho.rt'},
        {'code_length': 0},
        {'code_length': 'eight'},
        {'max_attempts': -1},
        {'code_length': Shortcode.MAX_LENGTH + 1},
        {'alphabet': 'A'},
        {'alphabet': 'AAB'},
        {'alphabet': 42},
        {'unknown': True},
        ['not', 'a', 'mapping'],
    ],
)
def test_invalid_shortener_settings(section):
    with pytest.raises(BadConfigurationError):
        config.ShortenerSettings.from_config({'shortener': section})


def test_invalid_alphabet_reports_reason():
    with pytest.raises(BadConfigurationError, match="Invalid 'shortener' alphabet: .*duplicate"):
        config.ShortenerSettings.from_config({'shortener': {'alphabet': 'AAB'}})


def test_longest_code_length_is_accepted():
    settings = config.ShortenerSettings.from_config({'shortener': {'code_length': Shortcode.MAX_LENGTH}})
    assert settings.code_length == Shortcode.MAX_LENGTH
