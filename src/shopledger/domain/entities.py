"""Domain model entities for shopledger.

These are pure data classes representing ledger concepts, independent of
the storage schema. Balances are never stored on an entity; they are always
derived from opening balances and the full entry list.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Closed set of account types in the chart of accounts."""

    ASSET = "Asset"
    LIABILITY = "Liability"
    INCOME = "Income"
    EXPENSE = "Expense"


class TransactionType(str, Enum):
    """Origin tag carried by an entry."""

    MANUAL = "Manual"
    SALE = "Sale"
    DISCOUNT = "Discount"
    COGS = "COGS"
    REFUND = "Refund"
    VOID = "Void"


@dataclass(frozen=True)
class Account:
    """Ledger account domain entity."""

    id: int
    shop_id: str
    account_name: str
    account_type: AccountType
    opening_balance: Decimal
    description: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Entry:
    """Journal entry debiting one account and crediting another."""

    id: int
    shop_id: str
    entry_date: date
    description: str
    debit_account_id: int
    credit_account_id: int
    amount: Decimal
    reference: Optional[str]
    payment_method: Optional[str]
    transaction_type: TransactionType
    receipt_id: Optional[str]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class PaymentMethodSummary:
    """Entry count and sales total for one payment method."""

    count: int = 0
    total: Decimal = Decimal("0")


@dataclass(frozen=True)
class TransactionTypeSummary:
    """Entry count and signed total for one transaction type."""

    count: int = 0
    total: Decimal = Decimal("0")


def _zero_totals() -> dict[AccountType, Decimal]:
    return {account_type: Decimal("0") for account_type in AccountType}


def _empty_buckets() -> dict[AccountType, tuple[Account, ...]]:
    return {account_type: () for account_type in AccountType}


@dataclass(frozen=True)
class AccountingReport:
    """Date-ranged accounting report.

    ``totals_by_type`` holds the raw in-range movement per account type, while
    ``account_balances`` holds closing balances as of ``end_date``.
    """

    start_date: Optional[date]
    end_date: Optional[date]
    total_entries: int = 0
    accounts_by_type: dict[AccountType, tuple[Account, ...]] = field(
        default_factory=_empty_buckets
    )
    totals_by_type: dict[AccountType, Decimal] = field(default_factory=_zero_totals)
    account_balances: dict[int, Decimal] = field(default_factory=dict)
    gross_profit: Decimal = Decimal("0")
    net_income: Decimal = Decimal("0")
    total_equity: Decimal = Decimal("0")
    payment_method_breakdown: dict[str, PaymentMethodSummary] = field(
        default_factory=dict
    )


@dataclass(frozen=True)
class DailyClosing:
    """Single-day closing summary. Zero-activity days yield all-zero fields."""

    closing_date: date
    total_entries: int = 0
    sales_count: int = 0
    sales_total: Decimal = Decimal("0")
    refunds_count: int = 0
    refunds_total: Decimal = Decimal("0")
    voids_count: int = 0
    voids_total: Decimal = Decimal("0")
    discounts_total: Decimal = Decimal("0")
    net_sales: Decimal = Decimal("0")
    payment_method_totals: dict[str, Decimal] = field(default_factory=dict)
    transaction_type_totals: dict[TransactionType, TransactionTypeSummary] = field(
        default_factory=dict
    )


@dataclass(frozen=True)
class LedgerStatistics:
    """Whole-ledger overview built from closing balances."""

    total_accounts: int = 0
    total_entries: int = 0
    accounts_by_type: dict[AccountType, tuple[Account, ...]] = field(
        default_factory=_empty_buckets
    )
    totals_by_type: dict[AccountType, Decimal] = field(default_factory=_zero_totals)
    account_balances: dict[int, Decimal] = field(default_factory=dict)
    net_income: Decimal = Decimal("0")
    total_equity: Decimal = Decimal("0")
