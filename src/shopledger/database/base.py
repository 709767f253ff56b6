"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from shopledger.domain.entities import (
    Account,
    AccountType,
    Entry,
    TransactionType,
)


class Database(ABC):
    """Abstract document store interface for shopledger.

    List operations only filter by equality on ``shop_id``; any further
    filtering and ordering is done by the caller.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        shop_id: str,
        account_name: str,
        account_type: AccountType,
        opening_balance: Decimal,
        description: Optional[str] = None,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, shop_id: str) -> list[Account]:
        """List all accounts of a shop, in store order."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        account_name: str,
        account_type: AccountType,
        opening_balance: Decimal,
        description: Optional[str] = None,
    ) -> None:
        """Replace all editable fields of an account."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account by ID. No reference checks are performed."""
        pass

    # Entry operations
    @abstractmethod
    def create_entry(
        self,
        shop_id: str,
        entry_date: date,
        description: str,
        debit_account_id: int,
        credit_account_id: int,
        amount: Decimal,
        reference: Optional[str] = None,
        payment_method: Optional[str] = None,
        transaction_type: TransactionType = TransactionType.MANUAL,
        receipt_id: Optional[str] = None,
    ) -> int:
        """Create a journal entry. Returns entry ID."""
        pass

    @abstractmethod
    def get_entry(self, entry_id: int) -> Optional[Entry]:
        """Get entry by ID."""
        pass

    @abstractmethod
    def list_entries(self, shop_id: str) -> list[Entry]:
        """List all entries of a shop, in store order."""
        pass

    @abstractmethod
    def update_entry(
        self,
        entry_id: int,
        entry_date: date,
        description: str,
        debit_account_id: int,
        credit_account_id: int,
        amount: Decimal,
        reference: Optional[str] = None,
        payment_method: Optional[str] = None,
    ) -> None:
        """Replace the editable fields of an entry."""
        pass

    @abstractmethod
    def delete_entry(self, entry_id: int) -> None:
        """Delete an entry by ID."""
        pass
