from linktoqr.dao.base.short_code_base_dao import ShortCodeBaseDAO
from linktoqr.dao.base.account_base_dao import AccountBaseDAO


__all__ = [
    'ShortCodeBaseDAO',
    'AccountBaseDAO',
]
