from urlshortener.dao.mongo.short_url_mongo_dao import ShortURLMongoDAO
from urlshortener.dao.mongo.mixins import MongoClientMixin


__all__ = [
    'ShortURLMongoDAO',
    'MongoClientMixin',
]
