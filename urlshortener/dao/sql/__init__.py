from urlshortener.dao.sql.schema import create_tables, build_metadata, short_urls, short_url_analytics
from urlshortener.dao.sql.short_url_sql_dao import ShortURLSQLDAO
from urlshortener.dao.sql.mixins import SQLEngineMixin


__all__ = [
    'create_tables',
    'build_metadata',
    'short_urls',
    'short_url_analytics',
    'ShortURLSQLDAO',
    'SQLEngineMixin',
]
