import functools
from typing import Any
from collections.abc import Callable

from pymongo import errors

from urlshortener.dao.exceptions import DataStoreError


__all__ = ['handle_mongo_errors']


def handle_mongo_errors[F: Callable[..., Any]](method: F) -> F:
    """Wrap MongoDB-interacting DAO methods to handle driver errors

    Args:
        method (Callable[..., Any]):
            DAO method performing MongoDB operations which may raise
            pymongo.errors.PyMongoError subclasses.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError instead.

    NOTE:
        DuplicateKeyError is not translated here. insert() maps it to
        ShortURLAlreadyExistsError itself.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (errors.ConnectionFailure, errors.ExecutionTimeout, errors.WTimeoutError) as e:
            raise DataStoreError(f"Can't connect to MongoDB at {self.location}.") from e
        except errors.PyMongoError as e:
            raise DataStoreError(f'MongoDB operation failed at {self.location}: {e}') from e

    return wrapper
