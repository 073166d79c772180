"""Abstract base class for account data access objects (DAOs).

Accounts hold the plan tier used by the quota policy and the hashed password
checked at login. Accounts are created at signup and never deleted here.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from linktoqr.dao.redis import AccountRedisDAO
        >>> dao = AccountRedisDAO(...)

        >>> account = dao.create('jane@example.com', password_hash)
        >>> account.plan
        <Plan.FREE: 'free'>

        >>> dao.find_by_email('JANE@example.com').account_id == account.account_id
        True
"""

from abc import ABC, abstractmethod

from linktoqr.constants import Plan
from linktoqr.models import Account


class AccountBaseDAO(ABC):
    """Interface for account data access objects (DAOs)

    Methods:
        create(email: str, password_hash: str, plan: Plan = Plan.FREE, **kwargs) -> Account:
            Create an account with a freshly allocated id.
            Raises AccountAlreadyExistsError if the email is taken.
            Raises DataStoreError on write failure.

        get(account_id: str, **kwargs) -> Account:
            Retrieve an account by id.
            Raises AccountNotFoundError if the account does not exist.

        find_by_email(email: str, **kwargs) -> Account:
            Retrieve an account by (case-insensitive) email.
            Raises AccountNotFoundError if the account does not exist.

    NOTE:
        - Email uniqueness must be enforced atomically with account creation.
    """

    @abstractmethod
    def create(self, email: str, password_hash: str, plan: Plan = Plan.FREE, **kwargs) -> Account:
        pass

    @abstractmethod
    def get(self, account_id: str, **kwargs) -> Account:
        pass

    @abstractmethod
    def find_by_email(self, email: str, **kwargs) -> Account:
        pass
