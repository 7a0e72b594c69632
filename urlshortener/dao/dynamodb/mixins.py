"""DynamoDB mixin providing shared resource initialization and table provisioning.

Responsibilities:
    - Initialize boto3 DynamoDB resource and tables
    - Create the tables on demand (PAY_PER_REQUEST)
    - Healthcheck tables

Classes:
    - DynamoDBTableMixin: Base mixin to inject DynamoDB table setup & healthcheck.
"""

import logging
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from urlshortener.dao.exceptions import DataStoreError
from urlshortener.dao.dynamodb.helpers import client_error_code


logger = logging.getLogger(__name__)


class DynamoDBTableMixin:
    """Mixin DynamoDB table setup and health check for DynamoDB-backed DAOs.

    Attributes:
        dynamodb (boto3.resources.base.ServiceResource):
            DynamoDB service resource.

        table (Table):
            Table of short URL items, partition key `code`.

        analytics_table (Table):
            Table of analytics items, partition key `code`.
    """

    def __init__(
        self,
        dynamodb_table: Optional[str] = 'urlshortener-short-urls',
        dynamodb_analytics_table: Optional[str] = 'urlshortener-short-url-analytics',
        dynamodb_region: Optional[str] = None,
        dynamodb_endpoint_url: Optional[str] = None,
        dynamodb_timeout: Optional[float] = 5.0,
        dynamodb_resource: Optional[Any] = None,
    ):
        """Initialize a DynamoDB-based DAO

        Args:
            dynamodb_table (Optional[str]):
                Name of the short URLs table.

            dynamodb_analytics_table (Optional[str]):
                Name of the analytics table.

            dynamodb_region (Optional[str]):
                AWS region. Defaults to the boto3 session's region.

            dynamodb_endpoint_url (Optional[str]):
                Custom endpoint (e.g. DynamoDB Local at 'http://localhost:8000').

            dynamodb_timeout (Optional[float]):
                Connect and read timeout in seconds. Defaults to 5.0.

            dynamodb_resource (Optional[ServiceResource]):
                Pre-initialized resource. If None, a new one is created.

        Raises:
            DataStoreError:
                If the healthcheck fails.
        """
        if dynamodb_resource is None:
            dynamodb_resource = boto3.resource(
                'dynamodb',
                region_name=dynamodb_region,
                endpoint_url=dynamodb_endpoint_url,
                config=Config(connect_timeout=dynamodb_timeout, read_timeout=dynamodb_timeout, retries={'max_attempts': 2}),
            )

        self.dynamodb = dynamodb_resource
        self.table = self.dynamodb.Table(dynamodb_table)
        self.analytics_table = self.dynamodb.Table(dynamodb_analytics_table)

        self._healthcheck()

    def _create_tables(self) -> None:
        for table in (self.table, self.analytics_table):
            try:
                self.dynamodb.create_table(
                    TableName=table.name,
                    KeySchema=[{'AttributeName': 'code', 'KeyType': 'HASH'}],
                    AttributeDefinitions=[{'AttributeName': 'code', 'AttributeType': 'S'}],
                    BillingMode='PAY_PER_REQUEST',
                )
            except ClientError as e:
                if client_error_code(e) != 'ResourceInUseException':
                    raise
            table.wait_until_exists()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """Describe the short URLs table to healthcheck connectivity

        Args:
            raise_error (bool):
                If True, raises DataStoreError on failure. Defaults to True.

        Returns:
            bool:
                True if the table is reachable, False otherwise (only if raise_error=False).

        Raises:
            DataStoreError:
                If DynamoDB is unreachable and raise_error=True.
        """
        try:
            self.table.load()
        except (BotoCoreError, ClientError) as e:
            if isinstance(e, ClientError) and client_error_code(e) == 'ResourceNotFoundException':
                # Reachable, not provisioned yet (see provision())
                logger.warning("DynamoDB table doesn't exist yet.", extra={'table': self.table.name})
                return True
            if raise_error:
                raise DataStoreError(
                    f"Can't reach DynamoDB table '{self.table.name}'. Check the provided configuration parameters."
                ) from e
            return False
        else:
            return True
