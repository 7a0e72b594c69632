"""Relational schema of the short URL store (SQLAlchemy Core).

Tables:
    short_urls
        id, code (unique), original_url, created_at_utc, expires_at_utc,
        deep_link_ios, deep_link_android, deep_link_desktop, deep_link_fallback

    short_url_analytics
        code (primary key), total_resolutions, last_resolved_at_utc

The four deep-link columns were added by a later migration. Deployments may
still run against a `short_urls` table without them; ShortURLSQLDAO detects
this at runtime (see SQLEngineMixin.deep_links_supported).

Example:
    >>> from sqlalchemy import create_engine
    >>> from urlshortener.dao.sql.schema import create_tables
    >>> engine = create_engine('sqlite:///urlshortener.db')
    >>> create_tables(engine)
"""

from sqlalchemy import BigInteger, Column, DateTime, Engine, MetaData, String, Table, Text
from sqlalchemy.dialects import mysql


SHORT_URLS_TABLE = 'short_urls'
ANALYTICS_TABLE = 'short_url_analytics'
DEEP_LINK_COLUMNS = ('deep_link_ios', 'deep_link_android', 'deep_link_desktop', 'deep_link_fallback')

# MySQL/MariaDB DATETIME defaults to whole seconds
UTC_DATETIME = DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), 'mysql', 'mariadb')


def build_metadata(include_deep_links: bool = True) -> tuple[MetaData, Table, Table]:
    """Build the table definitions

    Args:
        include_deep_links (bool):
            Include the deep-link columns in `short_urls`. False describes
            a schema that has not been migrated yet.

    Returns:
        tuple[MetaData, Table, Table]: metadata, short_urls table, short_url_analytics table.
    """
    metadata = MetaData()

    deep_link_columns = [Column(name, Text, nullable=True) for name in DEEP_LINK_COLUMNS] if include_deep_links else []
    # fmt: off
    short_urls = Table(
        SHORT_URLS_TABLE, metadata,
        Column('id', String(36), primary_key=True),
        Column('code', String(32), nullable=False, unique=True),
        Column('original_url', Text, nullable=False),
        Column('created_at_utc', UTC_DATETIME, nullable=False),
        Column('expires_at_utc', UTC_DATETIME, nullable=True),
        *deep_link_columns,
    )
    analytics = Table(
        ANALYTICS_TABLE, metadata,
        Column('code', String(32), primary_key=True),
        Column('total_resolutions', BigInteger, nullable=False, default=0),
        Column('last_resolved_at_utc', UTC_DATETIME, nullable=True),
    )
    # fmt: on
    return metadata, short_urls, analytics


metadata, short_urls, short_url_analytics = build_metadata()


def create_tables(engine: Engine, include_deep_links: bool = True) -> None:
    """Create the short URL tables if they don't exist yet"""
    build_metadata(include_deep_links)[0].create_all(engine)
