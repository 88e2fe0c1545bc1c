"""Account registry: the single owner of every Account instance."""

import threading

from .config import RISK_MAX, RISK_MIN
from .models import Account


def clamp(value, lo=RISK_MIN, hi=RISK_MAX):
    return max(lo, min(hi, value))


class AccountRegistry:
    """
    Maps account id → canonical Account.

    get_or_create and adjust_risk both run under one lock, so concurrent
    first references to an id yield one instance and concurrent risk updates
    are never lost.
    """

    def __init__(self):
        self._accounts = {}
        self._lock     = threading.Lock()

    def get_or_create(self, account_id):
        account = self._accounts.get(account_id)
        if account is not None:
            return account
        with self._lock:
            account = self._accounts.get(account_id)
            if account is None:
                account = Account(account_id)
                self._accounts[account_id] = account
            return account

    def get(self, account_id):
        """Return the account for `account_id`, or None if never seen."""
        return self._accounts.get(account_id)

    def adjust_risk(self, account_id, delta):
        """Apply clamp(current + delta, 0, 1). Unknown ids are created first."""
        account = self.get_or_create(account_id)
        with self._lock:
            account._risk = clamp(account._risk + delta)
            return account._risk

    def accounts(self):
        """Snapshot list of accounts in first-seen order."""
        with self._lock:
            return list(self._accounts.values())

    def __contains__(self, account_id):
        return account_id in self._accounts

    def __len__(self):
        return len(self._accounts)
