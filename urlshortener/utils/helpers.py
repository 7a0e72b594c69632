"""Helper utilities shared by the services and DAOs.

Functions:
    get_short_url(shortcode: str, base_url: str) -> str
        Get string representation of short URL for a given shortcode
    utc_now() -> datetime
        Current time as a timezone-aware UTC datetime
    ensure_utc(value: datetime | None) -> datetime | None
        Normalize naive or offset datetimes to UTC
    parse_datetime(value: datetime | str | None) -> datetime | None
        Parse ISO-8601 strings (or pass through datetimes) as UTC datetimes
    is_blank(value: str | None) -> bool
        True for None, empty or whitespace-only strings
    is_absolute_http_url(url: str | None) -> bool
        True for absolute http:// or https:// URLs with a host
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present

Example:
    >>> from urlshortener.utils.helpers import get_short_url
    >>> get_short_url('abc123', 'https://sho.rt/')
    'https://sho.rt/abc123'
"""

import os
import functools
from datetime import datetime, UTC
from urllib.parse import urlsplit
from collections.abc import Callable

from urlshortener.exceptions import MissingEnvironmentVariableError


def get_short_url(shortcode: str, base_url: str) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        base_url (str): public base URL of the shortener, e.g. 'https://sho.rt'

    Returns:
        str: short url string representation
    """
    return f'{base_url.rstrip("/")}/{shortcode}'


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalize a datetime to UTC

    Naive datetimes are assumed to already be in UTC (this is how SQLite,
    MySQL and MongoDB hand timestamps back by default).
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_datetime(value: datetime | str | None) -> datetime | None:
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    return ensure_utc(datetime.fromisoformat(value))


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def is_absolute_http_url(url: str | None) -> bool:
    """Check that a URL is an absolute HTTP/HTTPS URL

    Example:
        >>> is_absolute_http_url('https://example.com/page?id=1')
        True
        >>> is_absolute_http_url('ftp://example.com/file')
        False
        >>> is_absolute_http_url('/relative/path')
        False
    """
    if is_blank(url):
        return False
    try:
        components = urlsplit(url.strip())
    except ValueError:
        return False
    return components.scheme.lower() in {'http', 'https'} and bool(components.netloc) and bool(components.hostname)


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator
