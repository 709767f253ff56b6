"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the storage schema can change
without touching the ledger services.
"""

from decimal import Decimal

from shopledger.domain import entities as domain
from shopledger.database.models import (
    LedgerAccount as ORMAccount,
    LedgerEntry as ORMEntry,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy LedgerAccount model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        shop_id=orm_account.shop_id,
        account_name=orm_account.account_name,
        account_type=domain.AccountType(orm_account.account_type),
        opening_balance=Decimal(orm_account.opening_balance or 0),
        description=orm_account.description,
        created_at=orm_account.created_at,
        updated_at=orm_account.updated_at,
    )


def entry_to_domain(orm_entry: ORMEntry) -> domain.Entry:
    """Convert SQLAlchemy LedgerEntry model to domain Entry entity."""
    return domain.Entry(
        id=orm_entry.id,
        shop_id=orm_entry.shop_id,
        entry_date=orm_entry.entry_date,
        description=orm_entry.description,
        debit_account_id=orm_entry.debit_account_id,
        credit_account_id=orm_entry.credit_account_id,
        amount=Decimal(orm_entry.amount),
        reference=orm_entry.reference,
        payment_method=orm_entry.payment_method,
        transaction_type=domain.TransactionType(orm_entry.transaction_type),
        receipt_id=orm_entry.receipt_id,
        created_at=orm_entry.created_at,
        updated_at=orm_entry.updated_at,
    )
