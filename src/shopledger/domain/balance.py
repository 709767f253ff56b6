"""Balance computation.

Every balance uses one type-agnostic formula:

    balance(A) = opening_balance(A) + sum(debits to A) - sum(credits to A)

Liability and Income accounts therefore carry negative balances when they
grow; re-signing for display is left to the caller.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from shopledger.database.base import Database
from shopledger.domain.entities import Account, AccountType, Entry
from shopledger.domain.errors import NotFoundError, account_not_found

logger = logging.getLogger(__name__)


def calculate_all_account_balances(
    accounts: Iterable[Account], entries: Iterable[Entry]
) -> dict[int, Decimal]:
    """Compute every account's balance in a single pass over the entries.

    Slots are seeded from opening balances; each entry then adjusts exactly
    two slots. Entries referencing an account not in ``accounts`` leave that
    side untouched. Inputs are not mutated.

    Args:
        accounts: Full account list of a shop
        entries: Full entry list of the same shop

    Returns:
        Mapping of account ID to raw balance
    """
    balances = {account.id: account.opening_balance for account in accounts}

    for entry in entries:
        if entry.debit_account_id in balances:
            balances[entry.debit_account_id] += entry.amount
        if entry.credit_account_id in balances:
            balances[entry.credit_account_id] -= entry.amount

    return balances


def calculate_account_movements(
    accounts: Iterable[Account], entries: Iterable[Entry]
) -> dict[int, Decimal]:
    """Like calculate_all_account_balances, but ignoring opening balances."""
    movements = {account.id: Decimal("0") for account in accounts}

    for entry in entries:
        if entry.debit_account_id in movements:
            movements[entry.debit_account_id] += entry.amount
        if entry.credit_account_id in movements:
            movements[entry.credit_account_id] -= entry.amount

    return movements


def fold_account_balance(account: Account, entries: Iterable[Entry]) -> Decimal:
    """Fold one account's balance from its opening balance and the entries."""
    balance = account.opening_balance
    for entry in entries:
        if entry.debit_account_id == account.id:
            balance += entry.amount
        if entry.credit_account_id == account.id:
            balance -= entry.amount
    return balance


def totals_by_type(
    accounts: Iterable[Account], balances: dict[int, Decimal]
) -> dict[AccountType, Decimal]:
    """Sum raw balances per account type without re-signing."""
    totals = {account_type: Decimal("0") for account_type in AccountType}
    for account in accounts:
        totals[account.account_type] += balances.get(account.id, Decimal("0"))
    return totals


class BalanceService:
    """Service for reading account balances from the store."""

    def __init__(self, db: Database):
        """Initialize balance service.

        Args:
            db: Database instance
        """
        self.db = db

    def calculate_account_balance(
        self,
        account_id: int,
        shop_id: str,
        entries: Optional[Sequence[Entry]] = None,
    ) -> Decimal:
        """Calculate one account's balance.

        Args:
            account_id: Account to compute
            shop_id: Shop whose entries are folded
            entries: Pre-fetched entries of the shop; fetched when omitted

        Returns:
            Raw balance of the account

        Raises:
            NotFoundError: If the account does not exist in the shop
        """
        account = self.db.get_account(account_id)
        if account is None or account.shop_id != shop_id:
            raise NotFoundError(account_not_found(account_id))
        if entries is None:
            entries = self.db.list_entries(shop_id)
        return fold_account_balance(account, entries)

    def calculate_shop_balances(self, shop_id: str) -> dict[int, Decimal]:
        """Fetch a shop's accounts and entries once and compute all balances."""
        accounts = self.db.list_accounts(shop_id)
        entries = self.db.list_entries(shop_id)
        return calculate_all_account_balances(accounts, entries)


class BalanceCache:
    """Caller-owned cache of per-shop balance maps.

    Nothing invalidates entries automatically: callers must call
    ``invalidate`` after any write to the shop's accounts or entries.
    """

    def __init__(self, balance_service: BalanceService):
        self.balance_service = balance_service
        self._balances: dict[str, dict[int, Decimal]] = {}

    def get(self, shop_id: str) -> dict[int, Decimal]:
        """Return cached balances for a shop, computing them on first use."""
        if shop_id not in self._balances:
            self._balances[shop_id] = self.balance_service.calculate_shop_balances(
                shop_id
            )
        return dict(self._balances[shop_id])

    def invalidate(self, shop_id: str) -> None:
        """Drop cached balances for one shop."""
        self._balances.pop(shop_id, None)

    def clear(self) -> None:
        """Drop all cached balances."""
        self._balances.clear()

    def verify(self, shop_id: str) -> bool:
        """Recompute from the store and report whether the cache is current."""
        fresh = self.balance_service.calculate_shop_balances(shop_id)
        cached = self._balances.get(shop_id)
        if cached is None:
            self._balances[shop_id] = fresh
            return True
        if cached != fresh:
            logger.warning("Cached balances for shop %s are stale", shop_id)
            return False
        return True
