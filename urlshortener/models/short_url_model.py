import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from urlshortener.constants import Platform
from urlshortener.utils.helpers import ensure_utc, is_blank, utc_now


@dataclass(frozen=True)
class DeepLinkTargets:
    """Platform-specific destinations of a short URL.

    Attributes:
        ios_url (Optional[str]):
            Destination for iPhone, iPad and iPod clients (app URI scheme or web URL).
        android_url (Optional[str]):
            Destination for Android clients.
        desktop_url (Optional[str]):
            Destination for clients that are neither iOS nor Android.
        fallback_url (Optional[str]):
            Destination when no platform-specific target applies.

    Example:
        >>> links = DeepLinkTargets(ios_url='myapp://item/42', fallback_url='https://example.com/item/42')
        >>> links.has_any
        True
        >>> DeepLinkTargets.from_fields(ios_url='  ', android_url=None) is None
        True
    """

    ios_url: Optional[str] = None
    android_url: Optional[str] = None
    desktop_url: Optional[str] = None
    fallback_url: Optional[str] = None

    @property
    def has_any(self) -> bool:
        return not all(is_blank(url) for url in (self.ios_url, self.android_url, self.desktop_url, self.fallback_url))

    @classmethod
    def from_fields(
        cls,
        ios_url: Optional[str] = None,
        android_url: Optional[str] = None,
        desktop_url: Optional[str] = None,
        fallback_url: Optional[str] = None,
    ) -> Optional['DeepLinkTargets']:
        """Build deep-link targets from raw (possibly blank) fields.

        Blank fields are stored as None. Returns None when every field is blank,
        so a deep-link set is either absent or has at least one usable target.
        """
        # fmt: off
        targets = cls(
            ios_url=None if is_blank(ios_url) else ios_url,
            android_url=None if is_blank(android_url) else android_url,
            desktop_url=None if is_blank(desktop_url) else desktop_url,
            fallback_url=None if is_blank(fallback_url) else fallback_url,
        )
        # fmt: on
        return targets if targets.has_any else None

    def to_dict(self) -> dict[str, str]:
        return {key: value for key, value in vars(self).items() if value is not None}


@dataclass(frozen=True)
class ShortURLModel:
    """Represent a shortened URL mapping.

    Instances are immutable. Use `ShortURLModel.create()` to build new records:
    it validates the required fields and normalizes deep links.

    Attributes:
        shortcode (str):
            The unique short identifier representing the shortened URL.
        original_url (str):
            The absolute HTTP/HTTPS URL that the shortcode redirects to.
        created_at (datetime):
            UTC creation timestamp.
        expires_at (Optional[datetime]):
            UTC expiry timestamp. The record is logically deleted once
            `expires_at <= now`; it is never physically removed by the engine.
        deep_links (Optional[DeepLinkTargets]):
            Platform-specific destinations, or None.
        id (str):
            Opaque unique identifier (UUID4).

    Example:
        >>> url = ShortURLModel.create('abc123', 'https://example.com/article/123')
        >>> url.shortcode
        'abc123'
        >>> url.resolve_target('Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X)')
        'https://example.com/article/123'
    """

    shortcode: str
    original_url: str
    created_at: datetime = field(default_factory=utc_now)
    expires_at: Optional[datetime] = None
    deep_links: Optional[DeepLinkTargets] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def create(
        cls,
        shortcode: str,
        original_url: str,
        expires_at: Optional[datetime] = None,
        deep_links: Optional[DeepLinkTargets] = None,
        *,
        created_at: Optional[datetime] = None,
        id: Optional[str] = None,  # noqa: A002
    ) -> 'ShortURLModel':
        """Validate and build a ShortURLModel

        Args:
            shortcode (str):
                Short identifier, must not be blank.
            original_url (str):
                Destination URL, must not be blank.
            expires_at (Optional[datetime]):
                Optional expiry, normalized to UTC.
            deep_links (Optional[DeepLinkTargets]):
                Optional deep links. A set without any non-blank field is dropped.
            created_at (Optional[datetime]):
                Creation timestamp. Defaults to now (UTC).
            id (Optional[str]):
                Existing identifier (when loading from a data store). Defaults to a new UUID4.

        Raises:
            ValueError:
                If shortcode or original_url is blank.
        """
        if is_blank(shortcode):
            raise ValueError('Short code is required.')
        if is_blank(original_url):
            raise ValueError('Original URL is required.')

        if deep_links is not None:
            deep_links = DeepLinkTargets.from_fields(
                deep_links.ios_url,
                deep_links.android_url,
                deep_links.desktop_url,
                deep_links.fallback_url,
            )

        return cls(
            shortcode=shortcode,
            original_url=original_url,
            created_at=ensure_utc(created_at) if created_at is not None else utc_now(),
            expires_at=ensure_utc(expires_at),
            deep_links=deep_links,
            id=id or str(uuid.uuid4()),
        )

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= ensure_utc(now)

    def resolve_target(self, client_signature: Optional[str] = None) -> str:
        """Pick the destination URL for a client

        Strict priority chain, first non-blank applicable target wins:
        iOS -> Android -> desktop (only if neither iOS nor Android matched) -> fallback -> original URL.

        Args:
            client_signature (Optional[str]):
                Raw client platform hint (usually the User-Agent header).

        Returns:
            str: the destination URL.

        Example:
            >>> links = DeepLinkTargets('app://i', 'app://a', 'https://d', 'https://f')
            >>> url = ShortURLModel.create('abc123', 'https://example.com', deep_links=links)
            >>> url.resolve_target('Mozilla/5.0 (Linux; Android 14; Pixel 8)')
            'app://a'
            >>> url.resolve_target('curl/8.0')
            'https://d'
        """
        links = self.deep_links
        if links is None:
            return self.original_url

        signature = (client_signature or '').lower()
        is_ios = any(fragment in signature for fragment in Platform.IOS)
        is_android = any(fragment in signature for fragment in Platform.ANDROID)

        if is_ios and not is_blank(links.ios_url):
            return links.ios_url
        if is_android and not is_blank(links.android_url):
            return links.android_url
        if not is_ios and not is_android and not is_blank(links.desktop_url):
            return links.desktop_url
        if not is_blank(links.fallback_url):
            return links.fallback_url
        return self.original_url
