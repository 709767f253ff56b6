"""Account domain service."""

import logging
from decimal import Decimal
from typing import Any, Optional

from shopledger.database.base import Database
from shopledger.domain.entities import Account as AccountEntity, AccountType
from shopledger.domain.errors import (
    NotFoundError,
    ReferentialIntegrityError,
    account_in_use,
    account_not_found,
)
from shopledger.domain.validation import (
    coerce_account_type,
    coerce_opening_balance,
    require_text,
)

logger = logging.getLogger(__name__)


# Starter chart of accounts: (name, type, description)
DEFAULT_ACCOUNTS = [
    # Assets
    ("Cash", AccountType.ASSET, "Cash in hand"),
    ("Bank Account", AccountType.ASSET, "Bank account balance"),
    ("Accounts Receivable", AccountType.ASSET, "Money owed by customers"),
    ("Inventory", AccountType.ASSET, "Stock inventory value"),
    # Liabilities
    ("Accounts Payable", AccountType.LIABILITY, "Money owed to suppliers"),
    ("Loans Payable", AccountType.LIABILITY, "Outstanding loans"),
    # Income
    ("Sales Revenue", AccountType.INCOME, "Revenue from sales"),
    ("Other Income", AccountType.INCOME, "Miscellaneous income"),
    # Expenses
    ("Operating Expenses", AccountType.EXPENSE, "General operating expenses"),
    ("Salaries", AccountType.EXPENSE, "Employee salaries"),
    ("Rent", AccountType.EXPENSE, "Rent expenses"),
    ("Utilities", AccountType.EXPENSE, "Utility bills"),
]


class AccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_account(
        self,
        shop_id: str,
        account_name: str,
        account_type: AccountType | str,
        opening_balance: Any = None,
        description: Optional[str] = None,
    ) -> int:
        """Create a new account.

        Args:
            shop_id: Owning shop
            account_name: Display name
            account_type: One of Asset, Liability, Income, Expense
            opening_balance: Balance at ledger inception; absent or
                unparseable values default to 0
            description: Optional free text

        Returns:
            Account ID

        Raises:
            ValidationError: If name is empty or type is not recognized
            PersistenceError: If the store write fails
        """
        name = require_text(account_name, "Account name")
        kind = coerce_account_type(account_type)
        balance = coerce_opening_balance(opening_balance)

        account_id = self.db.create_account(
            shop_id=shop_id,
            account_name=name,
            account_type=kind,
            opening_balance=balance,
            description=description,
        )
        logger.info(
            "Created %s account '%s' (ID %s) for shop %s",
            kind.value, name, account_id, shop_id,
        )
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self, shop_id: str) -> list[AccountEntity]:
        """List a shop's accounts ordered by type, then name.

        Args:
            shop_id: Shop to list

        Returns:
            List of account entities
        """
        accounts = self.db.list_accounts(shop_id)
        return sorted(
            accounts, key=lambda acc: (acc.account_type.value, acc.account_name)
        )

    def update_account(
        self,
        account_id: int,
        account_name: str,
        account_type: AccountType | str,
        opening_balance: Any = None,
        description: Optional[str] = None,
    ) -> None:
        """Replace all editable fields of an account.

        Raises:
            ValidationError: If name is empty or type is not recognized
            NotFoundError: If the account does not exist
        """
        name = require_text(account_name, "Account name")
        kind = coerce_account_type(account_type)
        balance = coerce_opening_balance(opening_balance)

        self.require_account(account_id)
        self.db.update_account(
            account_id=account_id,
            account_name=name,
            account_type=kind,
            opening_balance=balance,
            description=description,
        )
        logger.info("Updated account %s", account_id)

    def count_account_entries(self, account_id: int, shop_id: str) -> int:
        """Count entries in a shop that debit or credit the account."""
        return sum(
            1
            for entry in self.db.list_entries(shop_id)
            if entry.debit_account_id == account_id
            or entry.credit_account_id == account_id
        )

    def delete_account(self, account_id: int, shop_id: str) -> None:
        """Delete an account that no entry references.

        The usage check and the delete are two separate store calls; an entry
        created by another session in between is not detected.

        Args:
            account_id: Account ID to delete
            shop_id: Shop whose entries are checked for references

        Raises:
            NotFoundError: If the account does not exist
            ReferentialIntegrityError: If any entry still uses the account
        """
        account = self.require_account(account_id)
        if account.shop_id != shop_id:
            # Accounts of other shops are invisible to this one
            raise NotFoundError(account_not_found(account_id))

        entry_count = self.count_account_entries(account_id, shop_id)
        if entry_count > 0:
            logger.warning(
                "Refused to delete account %s: %s entries reference it",
                account_id, entry_count,
            )
            raise ReferentialIntegrityError(
                account_in_use(account_id, entry_count),
                account_id=account_id,
                entry_count=entry_count,
            )

        self.db.delete_account(account_id)
        logger.info("Deleted account %s", account_id)

    def initialize_default_accounts(self, shop_id: str) -> bool:
        """Create the starter chart of accounts for a shop with no accounts.

        Emptiness is checked with a plain read before writing, so two sessions
        bootstrapping the same shop at once can both create the chart.

        Returns:
            True if accounts were created, False if the shop already had some
        """
        if self.db.list_accounts(shop_id):
            logger.debug("Shop %s already has accounts, skipping defaults", shop_id)
            return False

        for name, kind, description in DEFAULT_ACCOUNTS:
            self.db.create_account(
                shop_id=shop_id,
                account_name=name,
                account_type=kind,
                opening_balance=Decimal("0"),
                description=description,
            )
        logger.info(
            "Initialized %d default accounts for shop %s",
            len(DEFAULT_ACCOUNTS), shop_id,
        )
        return True
