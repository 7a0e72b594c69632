"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortURLAlreadyExistsError:
        Raised when attempting to insert a ShortURLModel whose shortcode is already taken.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, etc.).

NOTE:
    A missing short URL or a missing analytics row is never an exception.
    DAOs return None (or a zero-valued ShortURLAnalytics) instead.

Example:
    >>> from urlshortener.dao.exceptions import ShortURLAlreadyExistsError
    >>> raise ShortURLAlreadyExistsError("Short URL with code 'abc123' already exists.")
    Traceback (most recent call last):
        ...
    urlshortener.dao.exceptions.ShortURLAlreadyExistsError: Short URL with code 'abc123' already exists.
"""

from urlshortener.exceptions import URLShortenerError


class DAOError(URLShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ShortURLAlreadyExistsError(DAOError):
    """Exception raised when attempting to insert a ShortURLModel that already exists in the data store."""

    error_code = 'dao:short_url_already_exists_error'


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, etc.
    """

    error_code = 'dao:data_store_error'
