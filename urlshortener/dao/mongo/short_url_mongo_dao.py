"""Data Access Object (DAO) implementation for managing shortened URLs in MongoDB

This module provides a MongoDB-based implementation of ShortURLBaseDAO.

Collections (see MongoClientMixin):
    shorturls           one document per short URL, unique index on `code`
    shorturlanalytics   one document per resolved shortcode, unique index on `code`

Responsibilities:
    - Insert and retrieve short URLs from MongoDB;
    - Rely on the unique index for shortcode uniqueness;
    - Count resolutions with an upserting `$inc`.

Classes:
    ShortURLMongoDAO:
        DAO for storing and retrieving ShortURLModel in a MongoDB datastore.

Example:
    >>> from urlshortener.dao.mongo import ShortURLMongoDAO
    >>> dao = ShortURLMongoDAO(mongo_url='mongodb://mongo:27017')
    >>> dao.insert(ShortURLModel.create('abc12345', 'https://example.com/page'))
    <ShortURLMongoDAO>
    >>> dao.hit('abc12345', datetime.now(UTC))
    >>> dao.analytics('abc12345').total_resolutions
    1
"""

from datetime import datetime

from beartype import beartype
from pymongo import errors

from urlshortener.models import ShortURLModel, ShortURLAnalytics
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.documents import dump_short_url, load_short_url, load_analytics
from urlshortener.dao.mongo.mixins import MongoClientMixin
from urlshortener.dao.mongo.helpers import handle_mongo_errors
from urlshortener.dao.exceptions import ShortURLAlreadyExistsError
from urlshortener.utils.helpers import ensure_utc


# Never hand the driver-generated ObjectId back to the models
NO_OBJECT_ID = {'_id': False}


class ShortURLMongoDAO(MongoClientMixin, ShortURLBaseDAO):
    """MongoDB-based Data Access Object (DAO) for managing short URL mappings

    Attributes (see MongoClientMixin):
        mongo (pymongo.MongoClient):
            MongoDB client.
        short_urls (Collection):
            Short URL documents.
        analytics_collection (Collection):
            Analytics documents.

    NOTE:
        Datetimes are stored as BSON dates. The driver returns them naive,
        they're interpreted as UTC on load.
    """

    @handle_mongo_errors
    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        return self.short_urls.count_documents({'code': shortcode}, limit=1) > 0

    @handle_mongo_errors
    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLMongoDAO':
        """Insert a short URL document

        Raises:
            ShortURLAlreadyExistsError:
                If the unique index on `code` rejects the document.
            DataStoreError:
                If MongoDB is unreachable.
        """
        try:
            self.short_urls.insert_one(dump_short_url(short_url))
        except errors.DuplicateKeyError as e:
            raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.") from e
        return self

    @handle_mongo_errors
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel | None:
        document = self.short_urls.find_one({'code': shortcode}, NO_OBJECT_ID)
        return None if document is None else load_short_url(document)

    @handle_mongo_errors
    @beartype
    def hit(self, shortcode: str, resolved_at: datetime, **kwargs) -> None:
        """Record a resolution of a short URL

        `$inc` with `upsert=True` creates the analytics document on the first
        resolution. Two concurrent first upserts may both try to insert; the
        unique index rejects one of them, which is then retried as an update.
        """
        update = {
            '$inc': {'total_resolutions': 1},
            '$set': {'last_resolved_at_utc': ensure_utc(resolved_at)},
        }
        try:
            self.analytics_collection.update_one({'code': shortcode}, update, upsert=True)
        except errors.DuplicateKeyError:
            self.analytics_collection.update_one({'code': shortcode}, update, upsert=True)

    @handle_mongo_errors
    @beartype
    def analytics(self, shortcode: str, **kwargs) -> ShortURLAnalytics:
        return load_analytics(shortcode, self.analytics_collection.find_one({'code': shortcode}, NO_OBJECT_ID))

    @handle_mongo_errors
    def provision(self, **kwargs) -> None:
        self._ensure_indexes()
