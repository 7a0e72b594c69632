import functools
from typing import Any
from collections.abc import Callable

import sqlalchemy
from sqlalchemy import exc

from urlshortener.dao.exceptions import DataStoreError


__all__ = ['handle_sql_errors', 'sql_location']


def sql_location(engine: sqlalchemy.Engine) -> str:
    """Return the database URL of an engine with the password masked"""
    return engine.url.render_as_string(hide_password=True)


def handle_sql_errors[F: Callable[..., Any]](method: F) -> F:
    """Wrap SQL-interacting DAO methods to handle database errors

    Args:
        method (Callable[..., Any]):
            DAO method performing SQL operations which may raise
            SQLAlchemy connectivity (OperationalError, InterfaceError, pool
            TimeoutError), schema (ProgrammingError, NoSuchTableError) or value
            (DataError, e.g. a string too long for its column) errors.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError instead.

    NOTE:
        IntegrityError is not translated here. Methods which expect
        constraint violations (e.g. insert()) handle it themselves.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (exc.OperationalError, exc.InterfaceError, exc.TimeoutError) as e:
            raise DataStoreError(f"Can't connect to database at {sql_location(self.engine)}.") from e
        except (exc.ProgrammingError, exc.NoSuchTableError) as e:
            raise DataStoreError(f'Short URL tables are missing or malformed at {sql_location(self.engine)}.') from e
        except exc.DataError as e:
            raise DataStoreError(f'Value rejected by database at {sql_location(self.engine)}: {e.orig}') from e

    return wrapper
