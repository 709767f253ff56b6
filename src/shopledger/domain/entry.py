"""Journal entry domain service."""

import logging
from datetime import date
from typing import Any, Optional

from shopledger.database.base import Database
from shopledger.domain.entities import Entry as EntryEntity, TransactionType
from shopledger.domain.errors import NotFoundError, ValidationError, entry_not_found
from shopledger.domain.validation import (
    require_accounts_in_shop,
    validate_entry_fields,
)

logger = logging.getLogger(__name__)


def _clean_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def sort_entries(entries: list[EntryEntity]) -> list[EntryEntity]:
    """Order entries newest first, ties broken by newest ID."""
    return sorted(entries, key=lambda e: (e.entry_date, e.id), reverse=True)


def filter_entries(
    entries: list[EntryEntity],
    account_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[EntryEntity]:
    """Filter entries client-side by account use and inclusive date range."""
    result = []
    for entry in entries:
        if account_id is not None and account_id not in (
            entry.debit_account_id,
            entry.credit_account_id,
        ):
            continue
        if start_date is not None and entry.entry_date < start_date:
            continue
        if end_date is not None and entry.entry_date > end_date:
            continue
        result.append(entry)
    return result


class EntryService:
    """Service for managing journal entries."""

    def __init__(self, db: Database):
        """Initialize entry service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_entry(
        self,
        shop_id: str,
        entry_date: date | str,
        description: str,
        debit_account_id: int,
        credit_account_id: int,
        amount: Any,
        reference: Optional[str] = None,
        payment_method: Optional[str] = None,
        transaction_type: TransactionType = TransactionType.MANUAL,
        receipt_id: Optional[str] = None,
    ) -> int:
        """Create a journal entry.

        Args:
            shop_id: Owning shop
            entry_date: Effective date (date or ISO 'YYYY-MM-DD' string)
            description: Non-empty free text
            debit_account_id: Account whose balance increases by amount
            credit_account_id: Account whose balance decreases by amount
            amount: Strictly positive amount
            reference: Optional invoice/receipt number
            payment_method: Optional payment method tag (e.g. 'Cash', 'Card')
            transaction_type: Origin tag, Manual for user-entered entries
            receipt_id: Optional source receipt ID

        Returns:
            Entry ID

        Raises:
            ValidationError: If any field is invalid; nothing is written
            PersistenceError: If the store write fails
        """
        try:
            clean_date, clean_description, clean_amount = validate_entry_fields(
                entry_date, description, debit_account_id, credit_account_id, amount
            )
            require_accounts_in_shop(
                self.db, shop_id, debit_account_id, credit_account_id
            )
        except ValidationError as exc:
            logger.warning("Rejected entry for shop %s: %s", shop_id, exc)
            raise

        entry_id = self.db.create_entry(
            shop_id=shop_id,
            entry_date=clean_date,
            description=clean_description,
            debit_account_id=debit_account_id,
            credit_account_id=credit_account_id,
            amount=clean_amount,
            reference=_clean_optional(reference),
            payment_method=_clean_optional(payment_method),
            transaction_type=TransactionType(transaction_type),
            receipt_id=receipt_id,
        )
        logger.info(
            "Created entry %s for shop %s: %s Dr %s / Cr %s",
            entry_id, shop_id, clean_amount, debit_account_id, credit_account_id,
        )
        return entry_id

    def get_entry(self, entry_id: int) -> Optional[EntryEntity]:
        """Get entry by ID.

        Args:
            entry_id: Entry ID

        Returns:
            Entry entity or None if not found
        """
        return self.db.get_entry(entry_id)

    def require_entry(self, entry_id: int, shop_id: str) -> EntryEntity:
        """Get an entry of the given shop or raise NotFoundError."""
        entry = self.db.get_entry(entry_id)
        if entry is None or entry.shop_id != shop_id:
            # Entries of other shops are invisible to this one
            raise NotFoundError(entry_not_found(entry_id))
        return entry

    def update_entry(
        self,
        entry_id: int,
        shop_id: str,
        entry_date: date | str,
        description: str,
        debit_account_id: int,
        credit_account_id: int,
        amount: Any,
        reference: Optional[str] = None,
        payment_method: Optional[str] = None,
    ) -> None:
        """Replace the date, description, accounts, amount and reference of an entry.

        The same validation as add_entry applies to the new values. Previously
        computed balances are stale afterwards and must be recomputed.

        Args:
            entry_id: Entry to update
            shop_id: Shop the caller acts for; entries of other shops are not found

        Raises:
            ValidationError: If any new value is invalid
            NotFoundError: If the entry does not exist in the shop
        """
        clean_date, clean_description, clean_amount = validate_entry_fields(
            entry_date, description, debit_account_id, credit_account_id, amount
        )

        self.require_entry(entry_id, shop_id)
        require_accounts_in_shop(self.db, shop_id, debit_account_id, credit_account_id)

        self.db.update_entry(
            entry_id=entry_id,
            entry_date=clean_date,
            description=clean_description,
            debit_account_id=debit_account_id,
            credit_account_id=credit_account_id,
            amount=clean_amount,
            reference=_clean_optional(reference),
            payment_method=_clean_optional(payment_method),
        )
        logger.info("Updated entry %s", entry_id)

    def delete_entry(self, entry_id: int, shop_id: str) -> None:
        """Delete an entry of a shop. Entries have no dependents.

        Raises:
            NotFoundError: If the entry does not exist in the shop
        """
        self.require_entry(entry_id, shop_id)
        self.db.delete_entry(entry_id)
        logger.info("Deleted entry %s", entry_id)

    def list_entries(
        self,
        shop_id: str,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[EntryEntity]:
        """List a shop's entries, newest first.

        The store is only queried by shop; account and date filters are
        applied here.

        Args:
            shop_id: Shop to list
            account_id: Optional account filter (matches debit or credit side)
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date

        Returns:
            List of entry entities
        """
        entries = filter_entries(
            self.db.list_entries(shop_id),
            account_id=account_id,
            start_date=start_date,
            end_date=end_date,
        )
        return sort_entries(entries)
