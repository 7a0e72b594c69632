from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.exceptions import DAOError, ShortURLAlreadyExistsError, DataStoreError
from urlshortener.dao.factory import get_short_url_dao


__all__ = [
    'ShortURLBaseDAO',
    'DAOError',
    'ShortURLAlreadyExistsError',
    'DataStoreError',
    'get_short_url_dao',
]
