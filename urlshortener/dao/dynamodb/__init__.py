from urlshortener.dao.dynamodb.short_url_dynamodb_dao import ShortURLDynamoDBDAO
from urlshortener.dao.dynamodb.mixins import DynamoDBTableMixin


__all__ = [
    'ShortURLDynamoDBDAO',
    'DynamoDBTableMixin',
]
