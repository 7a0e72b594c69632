from urlshortener.services.shorten import ShortenURLResponse, shorten_url, normalize_deep_links
from urlshortener.services.resolve import resolve_short_url
from urlshortener.services.analytics import get_analytics
from urlshortener.services.validation import validate_shorten_request
from urlshortener.services.shortener import URLShortener


__all__ = [
    'ShortenURLResponse',
    'shorten_url',
    'normalize_deep_links',
    'resolve_short_url',
    'get_analytics',
    'validate_shorten_request',
    'URLShortener',
]
