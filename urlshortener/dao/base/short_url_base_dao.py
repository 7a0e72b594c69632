"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for all ShortURL DAO implementations,
regardless of the underlying storage mechanism (e.g., PostgreSQL, MySQL, SQLite,
MongoDB, Redis, DynamoDB). The services run unmodified against any of them.

Responsibilities:
    - Provide an interface for inserting and retrieving ShortURLModel objects.
    - Record resolutions and aggregate them into ShortURLAnalytics.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from urlshortener.models import ShortURLModel
        >>> from urlshortener.dao.sql import ShortURLSQLDAO

        >>> dao = ShortURLSQLDAO(sql_url='sqlite:///urlshortener.db')

        >>> short_url = ShortURLModel.create('a1b2c3d4', 'https://example.com/blog/article-123')
        >>> dao.insert(short_url)

        >>> dao.get('a1b2c3d4').original_url
        'https://example.com/blog/article-123'

        >>> dao.hit('a1b2c3d4', datetime.now(UTC))
        >>> dao.analytics('a1b2c3d4').total_resolutions
        1

        >>> dao.get('missing') is None
        True
"""

from abc import ABC, abstractmethod
from datetime import datetime

from urlshortener.models import ShortURLModel, ShortURLAnalytics


class ShortURLBaseDAO(ABC):
    """Interface for ShortURL data access objects (DAOs).

    Methods:
        exists(shortcode: str, **kwargs) -> bool:
            True if a record (expired or not) with this shortcode exists.
            Raises DataStoreError on connection or read failure.

        insert(short_url: ShortURLModel, **kwargs) -> ShortURLBaseDAO:
            Insert a new ShortURLModel into the data store.
            Raises ShortURLAlreadyExistsError if the short code already exists.
            Raises DataStoreError on connection or write failure.

        get(shortcode: str, **kwargs) -> ShortURLModel | None:
            Retrieve a ShortURLModel from the data store by short code.
            Returns None if not found.
            Raises DataStoreError on connection or read failure.

        hit(shortcode: str, resolved_at: datetime, **kwargs) -> None:
            Atomically record one resolution of a shortcode.
            Raises DataStoreError on connection or write failure.

        analytics(shortcode: str, **kwargs) -> ShortURLAnalytics:
            Retrieve the aggregated resolution statistics of a shortcode.
            Raises DataStoreError on connection or read failure.

        provision(**kwargs) -> None:
            Create tables/indexes if missing (no-op by default).

    Subclassing:
        Datastore-specific implementations (e.g., ShortURLSQLDAO or
        ShortURLRedisDAO) must extend this class and implement all
        abstract methods.

    NOTE:
        - Expired records are kept; expiry is evaluated by the services.
          Shortcodes are never reused.
        - Shortcode uniqueness must be enforced by the data store itself
          (unique index, conditional write, SET NX...), as a second line of
          defense against concurrent writers racing on the same shortcode.
    """

    @abstractmethod
    def exists(self, shortcode: str, **kwargs) -> bool:
        """Check whether a shortcode is already taken.

        Args:
            shortcode (str):
                The short code to check.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            bool: True if a record with this shortcode exists (expired or not).

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLBaseDAO':
        """Insert a new ShortURLModel into the data store.

        Args:
            short_url (ShortURLModel):
                The ShortURLModel instance to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLBaseDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a ShortURLModel with the same short code already exists

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> ShortURLModel | None:
        """Retrieve a ShortURLModel from the data store by its short code.

        Args:
            shortcode (str):
                The short code of the ShortURLModel to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLModel | None: The ShortURLModel instance if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def hit(self, shortcode: str, resolved_at: datetime, **kwargs) -> None:
        """Record a resolution of a short URL.

        NOTE: Implementations must perform an atomic upsert (insert the analytics
              row with a count of 1, or increment it) using the data store's native
              primitives. Two concurrent hits must both be counted; a
              read-modify-write from the application is not acceptable.

        Args:
            shortcode (str):
                The short code that was resolved.

            resolved_at (datetime):
                UTC timestamp of the resolution.

            **kwargs:
                Additional keyword arguments, used by data store.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def analytics(self, shortcode: str, **kwargs) -> ShortURLAnalytics:
        """Retrieve the resolution statistics of a short URL.

        Args:
            shortcode (str):
                The short code to retrieve statistics for.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLAnalytics:
                The aggregated statistics. A zero-valued record if the
                shortcode was never resolved (never None).

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    def provision(self, **kwargs) -> None:
        """Create the tables, indexes or collections the DAO relies on.

        Idempotent. Stores without a schema have nothing to provision.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        return None
