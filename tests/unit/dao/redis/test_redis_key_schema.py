"""Unit tests for the RedisKeySchema class in redis_key_schema.py.

Test coverage includes:

1. Key generation without a prefix
2. Custom prefix behavior
3. Email keys are case-insensitive
4. Invalid prefix types
"""

import pytest

from linktoqr.dao.redis.redis_key_schema import RedisKeySchema


# -------------------------------
# 1. Key generation without a prefix
# -------------------------------


@pytest.mark.parametrize(
    'method, args, expected',
    [
        ('link_key', ('aB3_x9Qz',), 'links:aB3_x9Qz'),
        ('owner_links_key', ('42',), 'users:42:links'),
        ('owner_active_links_key', ('42',), 'users:42:links:active'),
        ('account_key', ('42',), 'accounts:42'),
        ('account_email_key', ('jane@example.com',), 'accounts:email:jane@example.com'),
        ('account_counter_key', (), 'accounts:counter'),
    ],
)
def test_keys_without_prefix(method, args, expected):
    assert getattr(RedisKeySchema(), method)(*args) == expected


# -------------------------------
# 2. Custom prefix behavior
# -------------------------------


def test_keys_with_prefix():
    keys = RedisKeySchema(prefix='linktoqr:prod')

    assert keys.link_key('aB3_x9Qz') == 'linktoqr:prod:links:aB3_x9Qz'
    assert keys.owner_active_links_key('42') == 'linktoqr:prod:users:42:links:active'
    assert keys.account_counter_key() == 'linktoqr:prod:accounts:counter'


# -------------------------------
# 3. Email keys
# -------------------------------


def test_email_key_is_case_insensitive():
    keys = RedisKeySchema()
    assert keys.account_email_key('Jane@Example.COM') == keys.account_email_key('jane@example.com')


# -------------------------------
# 4. Invalid prefix types
# -------------------------------


@pytest.mark.parametrize('prefix', [123, ['linktoqr'], {'app': 'linktoqr'}])
def test_invalid_prefix_type(prefix):
    with pytest.raises(TypeError):
        RedisKeySchema(prefix=prefix)
