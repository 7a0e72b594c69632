"""Data Access Object (DAO) implementation for managing shortened URLs in DynamoDB

Tables (see DynamoDBTableMixin), both with partition key `code` (S):
    urlshortener-short-urls             one item per short URL
    urlshortener-short-url-analytics    one item per resolved shortcode

Responsibilities:
    - Insert short URLs with a conditional PutItem (attribute_not_exists);
    - Retrieve short URLs with strongly consistent GetItem;
    - Count resolutions with an atomic UpdateItem ADD.

Classes:
    ShortURLDynamoDBDAO:
        DAO for storing and retrieving ShortURLModel in DynamoDB.

Example:
    >>> from urlshortener.dao.dynamodb import ShortURLDynamoDBDAO
    >>> dao = ShortURLDynamoDBDAO(dynamodb_region='eu-central-1')
    >>> dao.insert(ShortURLModel.create('abc12345', 'https://example.com/page'))
    <ShortURLDynamoDBDAO>
"""

from datetime import datetime

from beartype import beartype
from botocore.exceptions import ClientError

from urlshortener.models import ShortURLModel, ShortURLAnalytics
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.documents import dump_short_url, load_short_url, load_analytics
from urlshortener.dao.dynamodb.mixins import DynamoDBTableMixin
from urlshortener.dao.dynamodb.helpers import handle_dynamodb_errors, client_error_code
from urlshortener.dao.exceptions import ShortURLAlreadyExistsError
from urlshortener.utils.helpers import ensure_utc


class ShortURLDynamoDBDAO(DynamoDBTableMixin, ShortURLBaseDAO):
    """DynamoDB-based Data Access Object (DAO) for managing short URL mappings

    NOTE:
        Items store datetimes as ISO-8601 strings. Items carry no TTL
        attribute; expiry is logical.
    """

    @handle_dynamodb_errors
    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        response = self.table.get_item(Key={'code': shortcode}, ProjectionExpression='code', ConsistentRead=True)
        return 'Item' in response

    @handle_dynamodb_errors
    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLDynamoDBDAO':
        """Insert a short URL item

        The condition makes the existence check and the write one atomic
        operation.

        Raises:
            ShortURLAlreadyExistsError:
                If an item with the same shortcode already exists.
            DataStoreError:
                If DynamoDB is unreachable.
        """
        try:
            self.table.put_item(
                Item=dump_short_url(short_url, iso=True),
                ConditionExpression='attribute_not_exists(code)',
            )
        except ClientError as e:
            if client_error_code(e) == 'ConditionalCheckFailedException':
                raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.") from e
            raise
        return self

    @handle_dynamodb_errors
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel | None:
        item = self.table.get_item(Key={'code': shortcode}, ConsistentRead=True).get('Item')
        return None if item is None else load_short_url(item)

    @handle_dynamodb_errors
    @beartype
    def hit(self, shortcode: str, resolved_at: datetime, **kwargs) -> None:
        # ADD creates the item (and the attribute, starting from 0) on first use
        self.analytics_table.update_item(
            Key={'code': shortcode},
            UpdateExpression='ADD total_resolutions :one SET last_resolved_at_utc = :resolved_at',
            ExpressionAttributeValues={':one': 1, ':resolved_at': ensure_utc(resolved_at).isoformat()},
        )

    @handle_dynamodb_errors
    @beartype
    def analytics(self, shortcode: str, **kwargs) -> ShortURLAnalytics:
        item = self.analytics_table.get_item(Key={'code': shortcode}, ConsistentRead=True).get('Item')
        return load_analytics(shortcode, item)

    @handle_dynamodb_errors
    def provision(self, **kwargs) -> None:
        self._create_tables()
