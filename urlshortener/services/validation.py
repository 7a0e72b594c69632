"""Validation of shortening requests.

Rules:
    - The URL to shorten is an absolute HTTP/HTTPS URL.
    - Deep-link targets are absolute URLs. `javascript:` and `data:` targets are
      rejected; desktop and fallback targets must use HTTP/HTTPS while the iOS
      and Android targets may use app schemes (e.g. 'myapp://item/42').
    - An expiry lies strictly in the future.

Functions:
    validate_shorten_request(url, expires_at=None, deep_links=None, now=None)
        Raise on the first rule the request breaks.
"""

from datetime import datetime
from typing import Optional
from urllib.parse import urlsplit

from urlshortener.exceptions import InvalidDeepLinkError, InvalidExpiryError, InvalidURLError
from urlshortener.models import DeepLinkTargets
from urlshortener.utils.helpers import ensure_utc, is_absolute_http_url, is_blank, utc_now


BLOCKED_SCHEMES = frozenset({'javascript', 'data'})


def _validate_deep_link(url: Optional[str], field: str, require_http: bool) -> None:
    if is_blank(url):
        return

    try:
        components = urlsplit(url.strip())
    except ValueError as e:
        raise InvalidDeepLinkError(f'{field} must be an absolute URL (given value: {url!r}).') from e

    scheme = components.scheme.lower()
    if not scheme or not (components.netloc or components.path):
        raise InvalidDeepLinkError(f'{field} must be an absolute URL (given value: {url!r}).')
    if scheme in BLOCKED_SCHEMES:
        raise InvalidDeepLinkError(f"{field} uses a disallowed URL scheme '{scheme}'.")
    if require_http and not is_absolute_http_url(url):
        raise InvalidDeepLinkError(f'{field} must be an absolute HTTP/HTTPS URL (given value: {url!r}).')


def validate_shorten_request(
    url: str,
    expires_at: Optional[datetime] = None,
    deep_links: Optional[DeepLinkTargets] = None,
    now: Optional[datetime] = None,
) -> None:
    """Validate the inputs of a shortening

    Args:
        url (str): URL to shorten.
        expires_at (Optional[datetime]): requested expiry. Naive datetimes are interpreted as UTC.
        deep_links (Optional[DeepLinkTargets]): requested platform-specific targets.
        now (Optional[datetime]): reference time for the expiry check. Defaults to the current UTC time.

    Raises:
        InvalidURLError: url is not an absolute HTTP/HTTPS URL.
        InvalidDeepLinkError: a deep-link target is malformed or uses a disallowed scheme.
        InvalidExpiryError: expires_at is not after now.

    Example:
        >>> validate_shorten_request('https://example.com', deep_links=DeepLinkTargets(desktop_url='myapp://x'))
        Traceback (most recent call last):
        ...
        urlshortener.exceptions.InvalidDeepLinkError: desktop_url must be an absolute HTTP/HTTPS URL (given value: 'myapp://x').
    """
    if not is_absolute_http_url(url):
        raise InvalidURLError(f'URL must be an absolute HTTP/HTTPS URL (given value: {url!r}).')

    if deep_links is not None:
        _validate_deep_link(deep_links.ios_url, 'ios_url', require_http=False)
        _validate_deep_link(deep_links.android_url, 'android_url', require_http=False)
        _validate_deep_link(deep_links.desktop_url, 'desktop_url', require_http=True)
        _validate_deep_link(deep_links.fallback_url, 'fallback_url', require_http=True)

    if expires_at is not None:
        now = ensure_utc(now) if now is not None else utc_now()
        if ensure_utc(expires_at) <= now:
            raise InvalidExpiryError(f'Expiry must be in the future (given value: {expires_at.isoformat()}).')
