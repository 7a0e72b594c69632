"""In-process Data Access Object (DAO) for managing shortened URLs

Backs local development, the CLI's default configuration and tests. State lives
in the DAO instance and is lost with it.

Classes:
    ShortURLMemoryDAO:
        Thread-safe dictionary-backed implementation of ShortURLBaseDAO.

Example:
    >>> dao = ShortURLMemoryDAO()
    >>> dao.insert(ShortURLModel.create('abc12345', 'https://example.com/page')).exists('abc12345')
    True
"""

import threading
from datetime import datetime

from beartype import beartype

from urlshortener.models import ShortURLModel, ShortURLAnalytics
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.exceptions import ShortURLAlreadyExistsError
from urlshortener.utils.helpers import ensure_utc


class ShortURLMemoryDAO(ShortURLBaseDAO):
    """Dictionary-backed DAO

    Attributes:
        _short_urls (dict[str, ShortURLModel]):
            Short URLs by shortcode. Models are immutable, so they are
            stored and returned as-is.
        _analytics (dict[str, ShortURLAnalytics]):
            Resolution statistics by shortcode.
        _lock (threading.Lock):
            Guards every read-modify-write of the two dictionaries.
    """

    def __init__(self):
        self._short_urls: dict[str, ShortURLModel] = {}
        self._analytics: dict[str, ShortURLAnalytics] = {}
        self._lock = threading.Lock()

    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        with self._lock:
            return shortcode in self._short_urls

    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLMemoryDAO':
        with self._lock:
            if short_url.shortcode in self._short_urls:
                raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")
            self._short_urls[short_url.shortcode] = short_url
        return self

    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel | None:
        with self._lock:
            return self._short_urls.get(shortcode)

    @beartype
    def hit(self, shortcode: str, resolved_at: datetime, **kwargs) -> None:
        with self._lock:
            current = self._analytics.get(shortcode) or ShortURLAnalytics.empty(shortcode)
            self._analytics[shortcode] = ShortURLAnalytics(
                shortcode=shortcode,
                total_resolutions=current.total_resolutions + 1,
                last_resolved_at=ensure_utc(resolved_at),
            )

    @beartype
    def analytics(self, shortcode: str, **kwargs) -> ShortURLAnalytics:
        with self._lock:
            return self._analytics.get(shortcode) or ShortURLAnalytics.empty(shortcode)
