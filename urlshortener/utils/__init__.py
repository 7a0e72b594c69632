from urlshortener.utils.config import app_env, app_name, app_prefix, load_config, backend_config, ShortenerSettings
from urlshortener.utils.helpers import (
    get_short_url,
    utc_now,
    ensure_utc,
    parse_datetime,
    is_blank,
    is_absolute_http_url,
    require_environment,
)
from urlshortener.utils.shortener import generate_shortcode, generate_unique_shortcode
from urlshortener.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'generate_unique_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'backend_config',
    'ShortenerSettings',
    'get_short_url',
    'utc_now',
    'ensure_utc',
    'parse_datetime',
    'is_blank',
    'is_absolute_http_url',
    'require_environment',
    'initialize_logging',
]
