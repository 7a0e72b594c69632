"""Utility functions for application configuration management.

The application is configured by a single configuration document which
selects exactly one active storage backend and carries the shortener settings:

    {
        "active_backend": "postgresql",
        "shortener": {
            "base_url": "https://sho.rt",
            "code_length": 8,
            "alphabet": "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz23456789",
            "max_attempts": 8
        },
        "backends": {
            "postgresql": {"url": "postgresql+psycopg://app:secret@db:5432/urlshortener"},
            "redis": {"host": "redis", "port": 6379, "db": 0},
            ...
        }
    }

The document is resolved once at process start from one of two sources:

    1. A local YAML (or JSON) file named by `URLSHORTENER_CONFIG_FILE`.
    2. AWS AppConfig, identified by `APPCONFIG_APP_ID`, `APPCONFIG_ENV_ID`
       and `APPCONFIG_PROFILE_ID`.

`URLSHORTENER_BACKEND` overrides the document's `active_backend`.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAO key namespaces, or None if `APP_NAME` is not set.

    load_config() -> AppConfig
        Load and validate the configuration document.

    backend_config(config: AppConfig) -> tuple[str, BackendConfig]
        Return the active backend name and its connection settings.

Example:
    >>> from urlshortener.utils.config import load_config, backend_config
    >>> os.environ['URLSHORTENER_CONFIG_FILE'] = 'config/local.yml'
    >>> backend, settings = backend_config(load_config())
    >>> backend
    'sqlite'
"""

import os
import json
import logging
import functools
from dataclasses import dataclass
from pathlib import Path
from collections.abc import Callable

import boto3
import yaml
from botocore.exceptions import BotoCoreError, ClientError

from urlshortener.constants import ENV, Backend, Shortcode
from urlshortener.exceptions import BadConfigurationError, ConfigurationError
from urlshortener.types import AppConfig, BackendConfig
from urlshortener.utils.helpers import require_environment, is_absolute_http_url
from urlshortener.utils.shortener import validate_alphabet


logger = logging.getLogger(__name__)


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'urlshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'urlshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


@dataclass(frozen=True)
class ShortenerSettings:
    """Settings of the creation flow (the `shortener` section of the configuration document)."""

    base_url: str = 'http://localhost:8000'
    code_length: int = Shortcode.LENGTH
    alphabet: str = Shortcode.ALPHABET
    max_attempts: int = Shortcode.MAX_ATTEMPTS

    @classmethod
    def from_config(cls, config: AppConfig) -> 'ShortenerSettings':
        section = config.get('shortener') or {}
        if not isinstance(section, dict):
            raise BadConfigurationError("'shortener' section must be a mapping.")

        unknown = set(section) - {'base_url', 'code_length', 'alphabet', 'max_attempts'}
        if unknown:
            raise BadConfigurationError(f"Unknown keys in 'shortener' section: {', '.join(sorted(unknown))}")

        try:
            settings = cls(**section)
            code_length, max_attempts = int(settings.code_length), int(settings.max_attempts)
        except (TypeError, ValueError) as e:
            raise BadConfigurationError(f"Invalid 'shortener' section: {e}") from e

        if not is_absolute_http_url(settings.base_url):
            raise BadConfigurationError(f'Base URL must be an absolute HTTP/HTTPS URL (given value: {settings.base_url!r}).')
        if code_length < 1 or max_attempts < 1:
            raise BadConfigurationError('code_length and max_attempts must be positive integers.')
        if code_length > Shortcode.MAX_LENGTH:
            raise BadConfigurationError(f'code_length must not exceed {Shortcode.MAX_LENGTH} (given value: {code_length}).')

        try:
            validate_alphabet(settings.alphabet)
        except (TypeError, ValueError) as e:
            raise BadConfigurationError(f"Invalid 'shortener' alphabet: {e}") from e

        return cls(base_url=settings.base_url, code_length=code_length, alphabet=settings.alphabet, max_attempts=max_attempts)


def _validate_document(func: Callable[[], AppConfig]) -> Callable[[], AppConfig]:
    """Decorator: validate the configuration document and apply the backend override"""

    @functools.wraps(func)
    def wrapper() -> AppConfig:
        config = func()
        if not isinstance(config, dict):
            raise BadConfigurationError('Configuration document must be a mapping.')

        override = os.getenv(ENV.App.BACKEND)
        if override:
            config = {**config, 'active_backend': override}

        backend = str(config.get('active_backend', '')).lower()
        if backend not in set(Backend):
            raise BadConfigurationError(f'Unsupported active_backend: {config.get("active_backend")!r}')
        config['active_backend'] = backend

        backends = config.setdefault('backends', {})
        if not isinstance(backends, dict):
            raise BadConfigurationError("'backends' section must be a mapping.")
        if backend != Backend.MEMORY and backend not in backends:
            raise BadConfigurationError(f"Missing connection settings for active backend '{backend}'.")

        logger.debug('Loaded configuration.', extra={'backend': backend, 'build': config.get('build')})
        return config

    return wrapper


def _load_local_file(func: Callable[[], AppConfig]) -> Callable[[], AppConfig]:
    """Decorator: load the configuration document from a local YAML/JSON file

    Behavior:
        - If `URLSHORTENER_CONFIG_FILE` is set, parse that file (YAML is a
          superset of JSON, so both formats are accepted).
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).
    """

    @functools.wraps(func)
    def wrapper() -> AppConfig:
        path = os.getenv(ENV.App.CONFIG_FILE)
        if not path:
            return func()

        logger.debug('Trying to load configuration from local file.', extra={'path': path})
        try:
            with Path(path).open(encoding='utf-8') as f:
                return yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f'Configuration file {path} not found.') from e
        except yaml.YAMLError as e:
            raise BadConfigurationError(f'Configuration file {path} is not valid YAML/JSON.') from e

    return wrapper


@_validate_document
@_load_local_file
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config() -> AppConfig:
    """Load the configuration document from AWS AppConfig

    Environment variables required (unless `URLSHORTENER_CONFIG_FILE` is set):
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Returns:
        AppConfig: The validated configuration document.

    Raises:
        MissingEnvironmentVariableError:
            If neither a local file nor the AppConfig identifiers are configured.
        ConfigurationError:
            If AppConfig cannot be reached.
        BadConfigurationError:
            If the document is malformed.

    Example:
        >>> config = load_config()
        >>> config['active_backend']
        'postgresql'
    """
    logger.debug('Trying to load configuration from AWS AppConfig.')

    try:
        appconfig = boto3.client('appconfigdata')

        # Start an AppConfig data session
        session_token = appconfig.start_configuration_session(
            ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
            EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
            ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
        )['InitialConfigurationToken']

        # Fetch the configuration
        response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
        content = response['Configuration'].read()
    except (BotoCoreError, ClientError) as e:
        raise ConfigurationError('Failed to load configuration from AWS AppConfig.') from e

    try:
        return json.loads(content.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise BadConfigurationError('AppConfig configuration is not valid JSON.') from e


def backend_config(config: AppConfig) -> tuple[str, BackendConfig]:
    """Return the active backend name and its connection settings

    Raises:
        BadConfigurationError: `active_backend` is missing or not a supported backend.

    Example:
        >>> backend_config({'active_backend': 'redis', 'backends': {'redis': {'host': 'redis'}}})
        ('redis', {'host': 'redis'})
    """
    backend = config.get('active_backend')
    if not backend:
        raise BadConfigurationError("Configuration document has no 'active_backend'.")
    backend = str(backend).lower()
    if backend not in set(Backend):
        raise BadConfigurationError(f'Unsupported active_backend: {config.get("active_backend")!r}')
    return backend, dict(config.get('backends', {}).get(backend) or {})
