import functools
from typing import Any
from collections.abc import Callable

from botocore.exceptions import BotoCoreError, ClientError

from urlshortener.dao.exceptions import DataStoreError


__all__ = ['handle_dynamodb_errors', 'client_error_code']


def client_error_code(error: ClientError) -> str:
    return error.response.get('Error', {}).get('Code', '')


def handle_dynamodb_errors[F: Callable[..., Any]](method: F) -> F:
    """Wrap DynamoDB-interacting DAO methods to handle boto3 errors

    Args:
        method (Callable[..., Any]):
            DAO method performing DynamoDB operations which may raise
            botocore BotoCoreError (connectivity, timeouts) or ClientError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError instead.

    NOTE:
        Conditional write failures (ConditionalCheckFailedException) are
        handled by insert() before they reach this wrapper.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except BotoCoreError as e:
            raise DataStoreError(f"Can't connect to DynamoDB table '{self.table.name}'.") from e
        except ClientError as e:
            if client_error_code(e) == 'ResourceNotFoundException':
                raise DataStoreError(f"DynamoDB table '{self.table.name}' doesn't exist.") from e
            raise DataStoreError(f"DynamoDB operation failed on table '{self.table.name}': {client_error_code(e)}") from e

    return wrapper
