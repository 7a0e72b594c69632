"""Facade bundling the active DAO with the shortener settings

Example:
    >>> shortener = URLShortener.from_config()
    >>> response = shortener.shorten('https://example.com/page')
    >>> shortener.resolve(response.shortcode)
    'https://example.com/page'
    >>> shortener.analytics(response.shortcode).total_resolutions
    1
"""

import time
from datetime import datetime
from typing import Optional

from urlshortener.models import DeepLinkTargets, ShortURLAnalytics
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.factory import get_short_url_dao
from urlshortener.types import AppConfig, Clock, Sleeper
from urlshortener.utils.config import ShortenerSettings, load_config
from urlshortener.utils.helpers import utc_now
from urlshortener.services.shorten import ShortenURLResponse, shorten_url
from urlshortener.services.resolve import resolve_short_url
from urlshortener.services.analytics import get_analytics


class URLShortener:
    """Create, resolve and inspect short URLs against one data store

    Attributes:
        dao (ShortURLBaseDAO): data store of the active backend
        settings (ShortenerSettings): base URL and shortcode generation settings
        clock (Callable[[], datetime]): UTC clock
        sleep (Callable[[float], None]): sleep used by the not-found delay
    """

    def __init__(
        self,
        dao: ShortURLBaseDAO,
        settings: Optional[ShortenerSettings] = None,
        clock: Clock = utc_now,
        sleep: Sleeper = time.sleep,
    ):
        self.dao = dao
        self.settings = settings or ShortenerSettings()
        self.clock = clock
        self.sleep = sleep

    @classmethod
    def from_config(cls, config: Optional[AppConfig] = None) -> 'URLShortener':
        """Build the facade from the configuration document (loaded if not given)

        Raises:
            ConfigurationError:
                If the configuration can't be loaded or is invalid.
            DataStoreError:
                If the active backend is unreachable.
        """
        config = config if config is not None else load_config()
        return cls(get_short_url_dao(config), ShortenerSettings.from_config(config))

    def shorten(
        self,
        url: str,
        expires_at: Optional[datetime] = None,
        deep_links: Optional[DeepLinkTargets] = None,
    ) -> ShortenURLResponse:
        return shorten_url(
            self.dao,
            url,
            base_url=self.settings.base_url,
            expires_at=expires_at,
            deep_links=deep_links,
            settings=self.settings,
            now=self.clock(),
        )

    def resolve(self, shortcode: str, client_signature: Optional[str] = None) -> Optional[str]:
        return resolve_short_url(self.dao, shortcode, client_signature, now=self.clock(), sleep=self.sleep)

    def analytics(self, shortcode: str) -> ShortURLAnalytics:
        return get_analytics(self.dao, shortcode)
