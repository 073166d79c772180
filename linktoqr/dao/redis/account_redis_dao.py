import logging
from datetime import datetime, UTC

import redis
from beartype import beartype

from linktoqr.constants import Plan
from linktoqr.models import Account
from linktoqr.dao.base import AccountBaseDAO
from linktoqr.dao.redis.mixins import RedisClientMixin
from linktoqr.dao.redis.helpers import handle_redis_connection_error
from linktoqr.dao.exceptions import AccountAlreadyExistsError, AccountNotFoundError
from linktoqr.utils.helpers import parse_datetime
from linktoqr.utils.quota import resolve_plan


logger = logging.getLogger(__name__)


class AccountRedisDAO(RedisClientMixin, AccountBaseDAO):
    """Redis-based DAO for accounts

    Storage layout (see RedisKeySchema):
        <prefix>:accounts:<id>            HASH    account_id, email, password_hash, plan, created_at
        <prefix>:accounts:email:<email>   STRING  account id (uniqueness index, lowercase email)
        <prefix>:accounts:counter         STRING  last allocated account id
    """

    @handle_redis_connection_error
    @beartype
    def create(self, email: str, password_hash: str, plan: Plan = Plan.FREE, **kwargs) -> Account:
        email = email.strip().lower()
        email_key = self.keys.account_email_key(email)

        # Ids are allocated before the transaction; an id burnt by a losing
        # signup race is simply never used.
        account_id = str(self.redis.incr(self.keys.account_counter_key()))
        account = Account(
            account_id=account_id,
            email=email,
            password_hash=password_hash,
            plan=plan,
            created_at=datetime.now(UTC),
        )

        def _create(pipe: redis.client.Pipeline) -> None:
            if pipe.exists(email_key):
                raise AccountAlreadyExistsError(f"Account with email '{email}' already exists.")
            pipe.multi()
            pipe.set(email_key, account_id)
            pipe.hset(
                self.keys.account_key(account_id),
                mapping={
                    'account_id': account_id,
                    'email': email,
                    'password_hash': password_hash,
                    'plan': str(plan),
                    'created_at': account.created_at.isoformat(),
                },
            )

        self.redis.transaction(_create, email_key)
        logger.info('Account created.', extra={'account_id': account_id, 'plan': str(plan)})
        return account

    @handle_redis_connection_error
    @beartype
    def get(self, account_id: str, **kwargs) -> Account:
        data = self.redis.hgetall(self.keys.account_key(account_id))
        if not data:
            raise AccountNotFoundError(f"Account with ID '{account_id}' does not exist.")
        return Account(
            account_id=data['account_id'],
            email=data['email'],
            password_hash=data['password_hash'],
            plan=resolve_plan(data.get('plan')),
            created_at=parse_datetime(data.get('created_at')),
        )

    @handle_redis_connection_error
    @beartype
    def find_by_email(self, email: str, **kwargs) -> Account:
        account_id = self.redis.get(self.keys.account_email_key(email.strip().lower()))
        if account_id is None:
            raise AccountNotFoundError(f"Account with email '{email}' does not exist.")
        return self.get(account_id)
