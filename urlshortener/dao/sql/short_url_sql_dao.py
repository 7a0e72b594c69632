"""Data Access Object (DAO) implementation for managing shortened URLs in relational databases

This module provides a SQLAlchemy Core implementation of ShortURLBaseDAO. One
class serves every supported dialect; only the analytics upsert differs:

    PostgreSQL, SQLite  -> INSERT ... ON CONFLICT (code) DO UPDATE
    MySQL, MariaDB      -> INSERT ... ON DUPLICATE KEY UPDATE
    anything else       -> UPDATE ... SET n = n + 1, INSERT when no row matched,
                           retried (bounded) when a concurrent INSERT won the race

Responsibilities:
    - Insert and retrieve short URLs (tables: see urlshortener.dao.sql.schema);
    - Rely on the unique index on `short_urls.code` for shortcode uniqueness;
    - Count resolutions atomically in `short_url_analytics`;
    - Keep working against schemas without the deep-link columns.

Classes:
    ShortURLSQLDAO:
        DAO for storing and retrieving ShortURLModel in a relational database.

Example:
    >>> from urlshortener.dao.sql import ShortURLSQLDAO
    >>> dao = ShortURLSQLDAO(sql_url='postgresql+psycopg://app:secret@db:5432/urlshortener')
    >>> dao.insert(ShortURLModel.create('abc12345', 'https://example.com/page'))
    <ShortURLSQLDAO>
    >>> dao.hit('abc12345', datetime.now(UTC))
    >>> dao.analytics('abc12345').total_resolutions
    1
"""

import logging
from datetime import datetime
from typing import Any

from beartype import beartype
from sqlalchemy import exc, insert, select, update
from sqlalchemy.dialects import mysql, postgresql, sqlite

from urlshortener.models import DeepLinkTargets, ShortURLModel, ShortURLAnalytics
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.sql.mixins import SQLEngineMixin
from urlshortener.dao.sql.helpers import handle_sql_errors
from urlshortener.dao.sql.schema import create_tables, short_urls, short_url_analytics
from urlshortener.dao.exceptions import DataStoreError, ShortURLAlreadyExistsError
from urlshortener.utils.helpers import ensure_utc


logger = logging.getLogger(__name__)

# Dialects whose DATETIME columns don't store an offset get naive UTC values
TZ_AWARE_DIALECTS = frozenset({'postgresql', 'mssql'})

# Bounded retries of the UPDATE-then-INSERT analytics fallback
MAX_UPSERT_ATTEMPTS = 3


class ShortURLSQLDAO(SQLEngineMixin, ShortURLBaseDAO):
    """SQL-based Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface on top of a SQLAlchemy engine.

    Attributes (see SQLEngineMixin):
        engine (sqlalchemy.Engine):
            Engine used to communicate with the database.
        deep_links_supported (bool):
            Cached result of the deep-link column probe.

    NOTE:
        - When the deep-link columns are missing, insert() silently drops the
          deep links and get() returns models with deep_links=None.
        - Every operation runs in its own short transaction. No transaction
          spans two DAO calls.
    """

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    def _db_datetime(self, value: datetime | None) -> datetime | None:
        value = ensure_utc(value)
        if value is None or self.dialect in TZ_AWARE_DIALECTS:
            return value
        return value.replace(tzinfo=None)

    @handle_sql_errors
    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        with self.engine.connect() as conn:
            row = conn.execute(select(short_urls.c.id).where(short_urls.c.code == shortcode).limit(1)).first()
        return row is not None

    @handle_sql_errors
    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLSQLDAO':
        """Insert a short URL row

        Args:
            short_url (ShortURLModel):
                ShortURLModel instance representing the shortened URL mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLSQLDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If the unique index on `code` rejects the row.
            DataStoreError:
                If the database is unreachable.
        """
        values: dict[str, Any] = {
            'id': short_url.id,
            'code': short_url.shortcode,
            'original_url': short_url.original_url,
            'created_at_utc': self._db_datetime(short_url.created_at),
            'expires_at_utc': self._db_datetime(short_url.expires_at),
        }
        if short_url.deep_links is not None and self.deep_links_supported:
            links = short_url.deep_links
            # fmt: off
            values.update(
                deep_link_ios=links.ios_url,
                deep_link_android=links.android_url,
                deep_link_desktop=links.desktop_url,
                deep_link_fallback=links.fallback_url,
            )
            # fmt: on
        elif short_url.deep_links is not None:
            logger.debug('Dropping deep links of short URL (schema not migrated).', extra={'shortcode': short_url.shortcode})

        try:
            with self.engine.begin() as conn:
                conn.execute(insert(short_urls).values(**values))
        except exc.IntegrityError as e:
            raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.") from e
        return self

    @handle_sql_errors
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel | None:
        columns = [
            short_urls.c.id,
            short_urls.c.code,
            short_urls.c.original_url,
            short_urls.c.created_at_utc,
            short_urls.c.expires_at_utc,
        ]
        if self.deep_links_supported:
            # fmt: off
            columns += [
                short_urls.c.deep_link_ios,
                short_urls.c.deep_link_android,
                short_urls.c.deep_link_desktop,
                short_urls.c.deep_link_fallback,
            ]
            # fmt: on

        with self.engine.connect() as conn:
            row = conn.execute(select(*columns).where(short_urls.c.code == shortcode).limit(1)).mappings().first()
        if row is None:
            return None

        deep_links = None
        if self.deep_links_supported:
            deep_links = DeepLinkTargets.from_fields(
                row['deep_link_ios'],
                row['deep_link_android'],
                row['deep_link_desktop'],
                row['deep_link_fallback'],
            )

        return ShortURLModel.create(
            shortcode=row['code'],
            original_url=row['original_url'],
            expires_at=row['expires_at_utc'],
            deep_links=deep_links,
            created_at=row['created_at_utc'],
            id=str(row['id']),
        )

    @handle_sql_errors
    @beartype
    def hit(self, shortcode: str, resolved_at: datetime, **kwargs) -> None:
        """Record a resolution of a short URL with a single atomic upsert

        Args:
            shortcode (str):
                The short code that was resolved.
            resolved_at (datetime):
                UTC timestamp of the resolution.
            **kwargs:
                Optional keyword arguments (for future use).

        Raises:
            DataStoreError:
                If the database is unreachable.
        """
        resolved_at = self._db_datetime(resolved_at)
        values = {'code': shortcode, 'total_resolutions': 1, 'last_resolved_at_utc': resolved_at}

        if self.dialect in ('postgresql', 'sqlite'):
            dialect_insert = postgresql.insert if self.dialect == 'postgresql' else sqlite.insert
            statement = dialect_insert(short_url_analytics).values(**values)
            statement = statement.on_conflict_do_update(
                index_elements=[short_url_analytics.c.code],
                set_={
                    'total_resolutions': short_url_analytics.c.total_resolutions + 1,
                    'last_resolved_at_utc': statement.excluded.last_resolved_at_utc,
                },
            )
        elif self.dialect in ('mysql', 'mariadb'):
            statement = mysql.insert(short_url_analytics).values(**values)
            statement = statement.on_duplicate_key_update(
                total_resolutions=short_url_analytics.c.total_resolutions + 1,
                last_resolved_at_utc=statement.inserted.last_resolved_at_utc,
            )
        else:
            return self._increment_or_insert(shortcode, resolved_at)

        with self.engine.begin() as conn:
            conn.execute(statement)

    def _increment_or_insert(self, shortcode: str, resolved_at: datetime | None) -> None:
        """Upsert for dialects without a native insert-or-update statement

        The UPDATE increments in place (atomic for a single row). When no row
        matched, the INSERT may lose a race against a concurrent first hit; the
        unique key rejects it and the loop goes back to the UPDATE.
        """
        increment = (
            update(short_url_analytics)
            .where(short_url_analytics.c.code == shortcode)
            .values(total_resolutions=short_url_analytics.c.total_resolutions + 1, last_resolved_at_utc=resolved_at)
        )
        first = insert(short_url_analytics).values(code=shortcode, total_resolutions=1, last_resolved_at_utc=resolved_at)

        for _ in range(MAX_UPSERT_ATTEMPTS):
            with self.engine.begin() as conn:
                if conn.execute(increment).rowcount:
                    return
            try:
                with self.engine.begin() as conn:
                    conn.execute(first)
                return
            except exc.IntegrityError:
                continue

        raise DataStoreError(f"Unable to record resolution of '{shortcode}' after {MAX_UPSERT_ATTEMPTS} attempts.")

    @handle_sql_errors
    def provision(self, **kwargs) -> None:
        create_tables(self.engine)
        # Tables may have been created with the deep-link columns just now
        self._deep_links_supported = None

    @handle_sql_errors
    @beartype
    def analytics(self, shortcode: str, **kwargs) -> ShortURLAnalytics:
        query = select(short_url_analytics.c.total_resolutions, short_url_analytics.c.last_resolved_at_utc).where(
            short_url_analytics.c.code == shortcode
        )
        with self.engine.connect() as conn:
            row = conn.execute(query).first()
        if row is None:
            return ShortURLAnalytics.empty(shortcode)
        return ShortURLAnalytics(
            shortcode=shortcode,
            total_resolutions=int(row.total_resolutions),
            last_resolved_at=ensure_utc(row.last_resolved_at_utc),
        )
