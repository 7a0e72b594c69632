"""Data Access Object (DAO) implementation for managing shortened URLs in Redis

This module provides a Redis-based implementation of ShortURLBaseDAO.

Key layout (see RedisKeySchema):
    <prefix>:links:<shortcode>              STRING  JSON document of the short URL
    <prefix>:links:<shortcode>:analytics    HASH    total_resolutions, last_resolved_at_utc

Responsibilities:
    - Insert and retrieve short URLs from Redis;
    - Enforce shortcode uniqueness with SET NX;
    - Count resolutions with atomic HINCRBY;
    - Translate Redis errors into DAO exceptions.

Classes:
    ShortURLRedisDAO:
        DAO for storing and retrieving ShortURLModel in a Redis datastore.

Example:
    >>> from urlshortener.models import ShortURLModel
    >>> from urlshortener.dao.redis import ShortURLRedisDAO

    >>> dao = ShortURLRedisDAO(prefix="urlshortener:dev")

    >>> short_url = ShortURLModel.create('abc12345', 'https://example.com/page')
    >>> dao.insert(short_url)
    <ShortURLRedisDAO>

    >>> dao.get('abc12345').original_url
    'https://example.com/page'

    >>> dao.hit('abc12345', datetime.now(UTC))
    >>> dao.analytics('abc12345').total_resolutions
    1
"""

import json
from datetime import datetime

from beartype import beartype

from urlshortener.models import ShortURLModel, ShortURLAnalytics
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.documents import dump_short_url, load_short_url, load_analytics
from urlshortener.dao.redis.mixins import RedisClientMixin
from urlshortener.dao.redis.helpers import handle_redis_errors
from urlshortener.dao.exceptions import ShortURLAlreadyExistsError
from urlshortener.utils.helpers import ensure_utc


class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    NOTE:
        Short URL keys carry no TTL. Expired links are logically deleted
        (evaluated by the services) and their shortcodes are never reused.
    """

    @handle_redis_errors
    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        return bool(self.redis.exists(self.keys.link_key(shortcode)))

    @handle_redis_errors
    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLRedisDAO':
        """Insert a short URL mapping into Redis

        The document is written with SET NX, so the existence check and the
        write are a single atomic command. A concurrent writer that already
        took the shortcode makes SET NX return nil.

        Args:
            short_url (ShortURLModel):
                ShortURLModel instance representing the shortened URL mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLRedisDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a short URL with the same shortcode already exists.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        document = json.dumps(dump_short_url(short_url, iso=True))
        if not self.redis.set(self.keys.link_key(short_url.shortcode), document, nx=True):
            raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")
        return self

    @handle_redis_errors
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel | None:
        raw = self.redis.get(self.keys.link_key(shortcode))
        if raw is None:
            return None
        return load_short_url(json.loads(raw))

    @handle_redis_errors
    @beartype
    def hit(self, shortcode: str, resolved_at: datetime, **kwargs) -> None:
        """Record a resolution of a short URL

        HINCRBY creates the analytics hash on the first resolution. Both commands
        run in one MULTI/EXEC transaction, so the counter and the timestamp are
        updated together.

        Args:
            shortcode (str):
                The short code that was resolved.
            resolved_at (datetime):
                UTC timestamp of the resolution.
            **kwargs:
                Optional keyword arguments (for future use).

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        analytics_key = self.keys.link_analytics_key(shortcode)
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hincrby(analytics_key, 'total_resolutions', 1)
            pipe.hset(analytics_key, 'last_resolved_at_utc', ensure_utc(resolved_at).isoformat())
            pipe.execute()

    @handle_redis_errors
    @beartype
    def analytics(self, shortcode: str, **kwargs) -> ShortURLAnalytics:
        return load_analytics(shortcode, self.redis.hgetall(self.keys.link_analytics_key(shortcode)))
