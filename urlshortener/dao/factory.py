"""Selection of the active storage backend

Exactly one backend is active per process. It is named by the configuration
document's `active_backend` key; its connection settings live under
`backends.<name>` and are passed to the DAO as prefixed keyword arguments:

    backends:
      redis:                       ->  ShortURLRedisDAO(redis_host='redis', redis_port=6379)
        host: redis
        port: 6379
      postgresql:                  ->  ShortURLSQLDAO(sql_url='postgresql+psycopg://...')
        url: postgresql+psycopg://...

Backend drivers are imported lazily, so a process only loads the driver it uses.

Functions:
    get_short_url_dao(config: AppConfig) -> ShortURLBaseDAO
        Build the DAO of the active backend.
"""

import logging
import importlib

from urlshortener.constants import Backend
from urlshortener.exceptions import BadConfigurationError
from urlshortener.types import AppConfig, BackendConfig
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.utils.config import app_prefix, backend_config


logger = logging.getLogger(__name__)

SQL_BACKENDS = frozenset({Backend.POSTGRESQL, Backend.MYSQL, Backend.MARIADB, Backend.SQLITE, Backend.MSSQL, Backend.SQL})

# backend -> (module, class, keyword argument prefix)
# fmt: off
DAO_REGISTRY = {
    Backend.MEMORY:   ('urlshortener.dao.memory',   'ShortURLMemoryDAO',   None),
    Backend.MONGODB:  ('urlshortener.dao.mongo',    'ShortURLMongoDAO',    'mongo'),
    Backend.REDIS:    ('urlshortener.dao.redis',    'ShortURLRedisDAO',    'redis'),
    Backend.DYNAMODB: ('urlshortener.dao.dynamodb', 'ShortURLDynamoDBDAO', 'dynamodb'),
    **{backend: ('urlshortener.dao.sql', 'ShortURLSQLDAO', 'sql') for backend in SQL_BACKENDS},
}
# fmt: on


def _dao_kwargs(backend: str, prefix: str | None, settings: BackendConfig) -> dict:
    if prefix is None:
        return {}

    kwargs = {f'{prefix}_{key}': value for key, value in settings.items()}
    if backend == Backend.REDIS:
        kwargs['prefix'] = app_prefix()
    if backend in SQL_BACKENDS and not kwargs.get('sql_url'):
        raise BadConfigurationError(f"Missing 'url' in connection settings of backend '{backend}'.")
    return kwargs


def get_short_url_dao(config: AppConfig) -> ShortURLBaseDAO:
    """Build the DAO of the active backend

    Args:
        config (AppConfig):
            Configuration document (see urlshortener.utils.config.load_config).

    Returns:
        ShortURLBaseDAO: the DAO, already connected (healthchecked).

    Raises:
        BadConfigurationError:
            If the backend is unknown or its settings are invalid.
        DataStoreError:
            If the backend is unreachable.

    Example:
        >>> dao = get_short_url_dao({'active_backend': 'sqlite', 'backends': {'sqlite': {'url': 'sqlite:///local.db'}}})
        >>> type(dao).__name__
        'ShortURLSQLDAO'
    """
    backend, settings = backend_config(config)
    module_name, class_name, prefix = DAO_REGISTRY[Backend(backend)]
    dao_class = getattr(importlib.import_module(module_name), class_name)

    try:
        dao = dao_class(**_dao_kwargs(backend, prefix, settings))
    except TypeError as e:
        raise BadConfigurationError(f"Invalid connection settings for backend '{backend}': {e}") from e

    logger.info('Initialized short URL data store.', extra={'backend': backend, 'dao': class_name})
    return dao
