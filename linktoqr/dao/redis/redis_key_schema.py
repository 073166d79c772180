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

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "linktoqr:prod" or "linktoqr:dev".

    Keys:
        links:<code>                   hash: the ShortCodeRecord (never expires)
        users:<owner>:links            zset: every code ever owned, scored by creation time
        users:<owner>:links:active     zset: active codes owned, scored by creation time
        accounts:<id>                  hash: the Account
        accounts:email:<email>         string: account id owning the email
        accounts:counter               string: last allocated account id
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_key(self, code: str) -> str:
        return f'links:{code}'

    @prefix_key
    def owner_links_key(self, owner_id: str) -> str:
        return f'users:{owner_id}:links'

    @prefix_key
    def owner_active_links_key(self, owner_id: str) -> str:
        return f'users:{owner_id}:links:active'

    @prefix_key
    def account_key(self, account_id: str) -> str:
        return f'accounts:{account_id}'

    @prefix_key
    def account_email_key(self, email: str) -> str:
        return f'accounts:email:{email.lower()}'

    @prefix_key
    def account_counter_key(self) -> str:
        return 'accounts:counter'
