import logging

from urlshortener.models import ShortURLAnalytics
from urlshortener.dao.base import ShortURLBaseDAO


logger = logging.getLogger(__name__)


def get_analytics(dao: ShortURLBaseDAO, shortcode: str) -> ShortURLAnalytics:
    """Return the resolution statistics of a shortcode

    Shortcodes that were never resolved (or don't exist) get a zero-valued record.

    Example:
        >>> get_analytics(dao, 'q7XrJmNa').total_resolutions
        3
    """
    analytics = dao.analytics(shortcode)
    logger.debug('Fetched short URL analytics.', extra={'shortcode': shortcode, 'total_resolutions': analytics.total_resolutions})
    return analytics
