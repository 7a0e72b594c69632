"""MongoDB mixin providing shared client initialization, indexes and connectivity checks.

Responsibilities:
    - Initialize MongoDB client and collections
    - Ensure the unique indexes on `code`
    - Healthcheck MongoDB client

Classes:
    - MongoClientMixin: Base mixin to inject MongoDB client setup, indexes & healthcheck.

Example:
    Typical usage with a DAO implementation:

        >>> class ShortURLMongoDAO(MongoClientMixin, ShortURLBaseDAO):
        ...     pass
        ...
        >>> dao = ShortURLMongoDAO(mongo_url='mongodb://mongo:27017', mongo_database='urlshortener')
        >>> dao._healthcheck()
        True
"""

from typing import Optional

import pymongo
from pymongo import errors

from urlshortener.dao.exceptions import DataStoreError


SHORT_URLS_COLLECTION = 'shorturls'
ANALYTICS_COLLECTION = 'shorturlanalytics'


class MongoClientMixin:
    """Mixin MongoDB client setup and health check for MongoDB-backed DAOs.

    Attributes:
        mongo (pymongo.MongoClient):
            Active MongoDB client instance used by subclasses.

        short_urls (pymongo.collection.Collection):
            Collection of short URL documents.

        analytics_collection (pymongo.collection.Collection):
            Collection of analytics documents (one per resolved shortcode).

        location (str):
            Human-readable server location for error messages.

    Methods:
        _healthcheck(raise_error: bool = True) -> bool:
            Query the server info to verify connectivity.
            Optionally raise a DataStoreError if unreachable.

        _ensure_indexes() -> None:
            Create the unique indexes on `code` (idempotent).
    """

    def __init__(
        self,
        mongo_url: Optional[str] = 'mongodb://localhost:27017',
        mongo_database: Optional[str] = 'urlshortener',
        mongo_timeout_ms: Optional[int] = 5000,
        mongo_client: Optional[pymongo.MongoClient] = None,
    ):
        """Initialize a MongoDB-based DAO

        The option is given to either use an existing client instance or
        create one from a connection string.

        Args:
            mongo_url (Optional[str]):
                MongoDB connection string. Defaults to 'mongodb://localhost:27017'.

            mongo_database (Optional[str]):
                Database name. Defaults to 'urlshortener'.

            mongo_timeout_ms (Optional[int]):
                Server selection, connect and socket timeout in milliseconds. Defaults to 5000.

            mongo_client (Optional[pymongo.MongoClient]):
                Pre-initialized client. If None, a new client is created.

        Raises:
            DataStoreError:
                If the MongoDB healthcheck fails (connectivity issues).
        """
        if mongo_client is None:
            mongo_client = pymongo.MongoClient(
                mongo_url,
                serverSelectionTimeoutMS=int(mongo_timeout_ms),
                connectTimeoutMS=int(mongo_timeout_ms),
                socketTimeoutMS=int(mongo_timeout_ms),
            )

        self.mongo = mongo_client
        self.location = f'{mongo_url}/{mongo_database}' if mongo_url else str(mongo_database)

        database = self.mongo[mongo_database]
        self.short_urls = database[SHORT_URLS_COLLECTION]
        self.analytics_collection = database[ANALYTICS_COLLECTION]

        self._healthcheck()
        self._ensure_indexes()

    def _ensure_indexes(self) -> None:
        try:
            self.short_urls.create_index('code', unique=True)
            self.analytics_collection.create_index('code', unique=True)
        except errors.PyMongoError as e:
            raise DataStoreError(f"Can't create indexes at {self.location}.") from e

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """Query the server info to healthcheck connectivity

        Args:
            raise_error (bool):
                If True, raises DataStoreError on failure. Defaults to True.

        Returns:
            bool:
                True if MongoDB is reachable, False otherwise (only if raise_error=False).

        Raises:
            DataStoreError:
                If the MongoDB connection cannot be established and raise_error=True.
        """
        try:
            self.mongo.server_info()
        except errors.ConnectionFailure as e:
            if raise_error:
                raise DataStoreError(
                    f"Can't connect to MongoDB at {self.location}. Check the provided configuration parameters."
                ) from e
            return False
        else:
            return True
