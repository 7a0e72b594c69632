"""Resolution engine: map a shortcode (and a client platform hint) to a destination URL.

Functions:
    resolve_short_url(dao, shortcode, client_signature=None, *, now=None, sleep=time.sleep)
        Return the destination URL, or None if the short URL doesn't exist or expired.
"""

import time
import random
import logging
from datetime import datetime
from typing import Optional

from urlshortener.constants import ResolutionDelay, SHORT_URL_NOT_FOUND, SHORT_URL_EXPIRED, SHORT_URL_RESOLVED
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.types import Sleeper
from urlshortener.utils.helpers import ensure_utc, utc_now


logger = logging.getLogger(__name__)


def unresolvable_delay(sleep: Sleeper = time.sleep) -> None:
    """Sleep a uniformly random 15-45 ms

    Missing and expired shortcodes take the same (randomized) time to answer,
    so response timing doesn't tell them apart.
    """
    sleep(random.uniform(ResolutionDelay.MIN, ResolutionDelay.MAX))


def resolve_short_url(
    dao: ShortURLBaseDAO,
    shortcode: str,
    client_signature: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
    sleep: Sleeper = time.sleep,
) -> Optional[str]:
    """Resolve a shortcode to its destination URL

    This function follows this procedure to resolve short URLs:
    - Step 1: Get the short URL record from the data store
    - Step 2: Treat expired records as missing
    - Step 3: Record the resolution (completes before returning)
    - Step 4: Pick the destination for the client's platform

    Args:
        dao (ShortURLBaseDAO):
            Data store of the active backend.
        shortcode (str):
            Shortcode to resolve.
        client_signature (Optional[str]):
            Raw client platform hint, usually the User-Agent header.
        now (Optional[datetime]):
            Resolution timestamp. Defaults to the current UTC time.
        sleep (Callable[[float], None]):
            Sleep function used for the not-found delay. Defaults to time.sleep.

    Returns:
        Optional[str]: destination URL, or None if not found or expired.

    Raises:
        DataStoreError:
            If the data store is unreachable (not retried).

    Example:
        >>> resolve_short_url(dao, 'q7XrJmNa', 'Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X)')
        'myapp://item/42'
        >>> resolve_short_url(dao, 'missing') is None
        True
    """
    now = ensure_utc(now) if now is not None else utc_now()

    # 1- Get the short URL record
    short_url = dao.get(shortcode)
    if short_url is None:
        logger.info('Short URL not found.', extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND})
        unresolvable_delay(sleep)
        return None

    # 2- Expired records are logically deleted
    if short_url.is_expired(now):
        logger.info(
            'Short URL expired.',
            extra={'shortcode': shortcode, 'expires_at': short_url.expires_at, 'event': SHORT_URL_EXPIRED},
        )
        unresolvable_delay(sleep)
        return None

    # 3- Record the resolution
    dao.hit(shortcode, now)

    # 4- Pick the destination
    target = short_url.resolve_target(client_signature)
    logger.info('Short URL resolved.', extra={'shortcode': shortcode, 'event': SHORT_URL_RESOLVED})
    return target
