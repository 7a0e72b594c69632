import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return key if self.prefix is None else f'{self.prefix}:{key}'

    return wrapper


class RedisKeySchema:
    """Key names of the short URL documents and their analytics hashes.

    Layout (without prefix):
        links:<shortcode>              short URL document (JSON string)
        links:<shortcode>:analytics    resolution counters (hash)

    A prefix such as "urlshortener:prod" namespaces every key, so several
    environments can share one Redis database.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix or None

    @prefix_key
    def link_key(self, shortcode: str) -> str:
        return f'links:{shortcode}'

    @prefix_key
    def link_analytics_key(self, shortcode: str) -> str:
        return f'links:{shortcode}:analytics'
