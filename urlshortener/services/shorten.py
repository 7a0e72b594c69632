"""Creation flow: validate a URL, generate a unique shortcode and persist the short URL.

Functions:
    shorten_url(dao, url, *, base_url, expires_at=None, deep_links=None, settings=None, now=None)
        Create a short URL and return a ShortenURLResponse.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from urlshortener.constants import SHORT_URL_CREATED
from urlshortener.models import DeepLinkTargets, ShortURLModel
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.utils.config import ShortenerSettings
from urlshortener.services.validation import validate_shorten_request
from urlshortener.utils.helpers import get_short_url, is_blank, utc_now
from urlshortener.utils.shortener import generate_unique_shortcode


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShortenURLResponse:
    """Result of a successful shortening

    Attributes:
        shortcode (str): generated shortcode
        short_url (str): base URL + '/' + shortcode
        created_at (datetime): UTC creation timestamp
        expires_at (Optional[datetime]): UTC expiry timestamp
        deep_links (Optional[DeepLinkTargets]): stored deep links (after normalization)
    """

    shortcode: str
    short_url: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    deep_links: Optional[DeepLinkTargets] = None

    def to_dict(self) -> dict[str, Any]:
        body = {
            'shortcode': self.shortcode,
            'short_url': self.short_url,
            'created_at': self.created_at.isoformat(),
            'expires_at': self.expires_at.isoformat() if self.expires_at else None,
            'deep_links': self.deep_links.to_dict() if self.deep_links else None,
        }
        return {key: value for key, value in body.items() if value is not None}


def normalize_deep_links(deep_links: Optional[DeepLinkTargets], url: str) -> Optional[DeepLinkTargets]:
    """Drop all-blank deep-link sets and default a blank fallback to the original URL

    Example:
        >>> normalize_deep_links(DeepLinkTargets(ios_url='app://i'), 'https://example.com')
        DeepLinkTargets(ios_url='app://i', android_url=None, desktop_url=None, fallback_url='https://example.com')
    """
    if deep_links is None:
        return None

    links = DeepLinkTargets.from_fields(deep_links.ios_url, deep_links.android_url, deep_links.desktop_url, deep_links.fallback_url)
    if links is None:
        return None
    if is_blank(links.fallback_url):
        links = DeepLinkTargets(links.ios_url, links.android_url, links.desktop_url, fallback_url=url)
    return links


def shorten_url(
    dao: ShortURLBaseDAO,
    url: str,
    *,
    base_url: Optional[str] = None,
    expires_at: Optional[datetime] = None,
    deep_links: Optional[DeepLinkTargets] = None,
    settings: Optional[ShortenerSettings] = None,
    now: Optional[datetime] = None,
) -> ShortenURLResponse:
    """Shorten a URL

    This function follows this procedure to shorten URLs:
    - Step 1: Validate the request (URL, deep links, expiry)
    - Step 2: Normalize deep links
    - Step 3: Generate a unique shortcode
    - Step 4: Store the short URL (via DAO)
    - Step 5: Build the response

    Args:
        dao (ShortURLBaseDAO):
            Data store of the active backend.
        url (str):
            URL to shorten.
        base_url (Optional[str]):
            Public base URL of the shortener. Defaults to settings.base_url.
        expires_at (Optional[datetime]):
            Optional expiry. Naive datetimes are interpreted as UTC.
        deep_links (Optional[DeepLinkTargets]):
            Optional platform-specific targets.
        settings (Optional[ShortenerSettings]):
            Shortcode length, alphabet and attempts. Defaults to ShortenerSettings().
        now (Optional[datetime]):
            Creation timestamp. Defaults to the current UTC time.

    Returns:
        ShortenURLResponse: the created short URL.

    Raises:
        InvalidURLError:
            If url is not an absolute HTTP/HTTPS URL.
        InvalidDeepLinkError:
            If a deep-link target is malformed or uses a disallowed scheme.
        InvalidExpiryError:
            If expires_at is not in the future.
        ShortcodeGenerationExhaustedError:
            If every generated shortcode collided.
        ShortURLAlreadyExistsError:
            If a concurrent writer took the shortcode after the existence check.
        DataStoreError:
            If the data store is unreachable.

    Example:
        >>> response = shorten_url(dao, 'https://example.com/page', base_url='https://sho.rt')
        >>> response.short_url
        'https://sho.rt/q7XrJmNa'
    """
    settings = settings or ShortenerSettings()
    now = now or utc_now()

    # 1- Validate the request
    validate_shorten_request(url, expires_at=expires_at, deep_links=deep_links, now=now)
    url = url.strip()

    # 2- Normalize deep links
    deep_links = normalize_deep_links(deep_links, url)

    # 3- Generate a unique shortcode
    shortcode = generate_unique_shortcode(
        dao,
        length=settings.code_length,
        max_attempts=settings.max_attempts,
        alphabet=settings.alphabet,
    )

    # 4- Store the short URL
    short_url = ShortURLModel.create(
        shortcode,
        url,
        expires_at=expires_at,
        deep_links=deep_links,
        created_at=now,
    )
    dao.insert(short_url)

    logger.info(
        'Short URL created.',
        extra={'shortcode': shortcode, 'expires_at': short_url.expires_at, 'deep_links': deep_links is not None, 'event': SHORT_URL_CREATED},
    )

    # 5- Build the response
    return ShortenURLResponse(
        shortcode=shortcode,
        short_url=get_short_url(shortcode, base_url or settings.base_url),
        created_at=short_url.created_at,
        expires_at=short_url.expires_at,
        deep_links=short_url.deep_links,
    )
