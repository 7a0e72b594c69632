from enum import StrEnum


class Shortcode:
    """Shortcode generation defaults."""

    # Base58-like alphabet: no 0/O and no 1/l/I
    ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz23456789'
    LENGTH = 8
    MAX_ATTEMPTS = 8
    # Width of the `code` columns (see urlshortener.dao.sql.schema)
    MAX_LENGTH = 32


class ResolutionDelay:
    """Bounds (in seconds) of the randomized delay applied to unresolvable shortcodes."""

    MIN = 0.015
    MAX = 0.045


class Platform:
    """Client signature fragments used for deep-link routing."""

    IOS = ('iphone', 'ipad', 'ipod')
    ANDROID = ('android',)


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        LOG_LEVEL = 'LOG_LEVEL'
        LOG_FORMAT = 'LOG_FORMAT'
        CONFIG_FILE = 'URLSHORTENER_CONFIG_FILE'
        BACKEND = 'URLSHORTENER_BACKEND'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'


class Backend(StrEnum):
    """Supported values of the `active_backend` configuration key."""

    MEMORY = 'memory'
    POSTGRESQL = 'postgresql'
    MYSQL = 'mysql'
    MARIADB = 'mariadb'
    SQLITE = 'sqlite'
    MSSQL = 'mssql'
    SQL = 'sql'
    MONGODB = 'mongodb'
    REDIS = 'redis'
    DYNAMODB = 'dynamodb'


# Log event codes
SHORT_URL_CREATED = 'SHORT_URL_CREATED'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
SHORT_URL_EXPIRED = 'SHORT_URL_EXPIRED'
SHORT_URL_RESOLVED = 'SHORT_URL_RESOLVED'
SHORTCODE_COLLISION = 'SHORTCODE_COLLISION'
SHORTCODE_GENERATION_EXHAUSTED = 'SHORTCODE_GENERATION_EXHAUSTED'
DEEP_LINK_COLUMNS_MISSING = 'DEEP_LINK_COLUMNS_MISSING'
