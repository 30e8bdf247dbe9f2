import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing data models.

    Links are keyed by their numeric id, never by shortcode, since the
    shortcode is derived from the id on every read.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "linkshortener:prod" or "linkshortener:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_url_key(self, link_id: int) -> str:
        return f'links:{link_id}:url'

    @prefix_key
    def link_owner_key(self, link_id: int) -> str:
        return f'links:{link_id}:owner'

    @prefix_key
    def counter_key(self) -> str:
        return 'links:counter'

    @prefix_key
    def user_links_key(self, owner: str) -> str:
        return f'users:{owner}:links'
