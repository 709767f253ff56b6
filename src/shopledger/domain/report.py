"""Reporting aggregations over a shop's accounts and entries."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from shopledger.database.base import Database
from shopledger.domain.balance import (
    calculate_account_movements,
    calculate_all_account_balances,
    totals_by_type,
)
from shopledger.domain.entities import (
    Account,
    AccountType,
    AccountingReport,
    DailyClosing,
    Entry,
    LedgerStatistics,
    PaymentMethodSummary,
    TransactionType,
    TransactionTypeSummary,
)
from shopledger.domain.entry import filter_entries
from shopledger.domain.posting import DEFAULT_PAYMENT_METHOD, payment_account_name

ZERO = Decimal("0")


def group_accounts_by_type(
    accounts: Sequence[Account],
) -> dict[AccountType, tuple[Account, ...]]:
    """Bucket accounts by type, every type present even when empty."""
    grouped: dict[AccountType, list[Account]] = {t: [] for t in AccountType}
    for account in accounts:
        grouped[account.account_type].append(account)
    return {account_type: tuple(items) for account_type, items in grouped.items()}


def build_payment_method_breakdown(
    entries: Sequence[Entry],
) -> dict[str, PaymentMethodSummary]:
    """Count entries per payment method and total the sale entries."""
    counts: dict[str, int] = defaultdict(int)
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for entry in entries:
        method = entry.payment_method or DEFAULT_PAYMENT_METHOD
        counts[method] += 1
        if entry.transaction_type == TransactionType.SALE:
            totals[method] += entry.amount
    return {
        method: PaymentMethodSummary(count=count, total=totals[method])
        for method, count in counts.items()
    }


def build_accounting_report(
    accounts: Sequence[Account],
    entries: Sequence[Entry],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> AccountingReport:
    """Build an accounting report from already-fetched accounts and entries.

    Type totals, profit and equity describe the movement inside the range.
    Account balances are closing balances as of ``end_date``.
    """
    in_range = filter_entries(entries, start_date=start_date, end_date=end_date)
    up_to_end = filter_entries(entries, end_date=end_date)

    movements = calculate_account_movements(accounts, in_range)
    totals = totals_by_type(accounts, movements)
    net_income = totals[AccountType.INCOME] - totals[AccountType.EXPENSE]

    return AccountingReport(
        start_date=start_date,
        end_date=end_date,
        total_entries=len(in_range),
        accounts_by_type=group_accounts_by_type(accounts),
        totals_by_type=totals,
        account_balances=calculate_all_account_balances(accounts, up_to_end),
        gross_profit=net_income,
        net_income=net_income,
        total_equity=totals[AccountType.ASSET] - totals[AccountType.LIABILITY],
        payment_method_breakdown=build_payment_method_breakdown(in_range),
    )


def build_daily_closing(
    accounts: Sequence[Account],
    entries: Sequence[Entry],
    closing_date: date,
) -> DailyClosing:
    """Build the closing summary of one calendar day."""
    day_entries = [entry for entry in entries if entry.entry_date == closing_date]
    accounts_by_name = {
        account.account_name: account
        for account in accounts
        if account.account_type == AccountType.ASSET
    }

    type_counts: dict[TransactionType, int] = defaultdict(int)
    type_totals: dict[TransactionType, Decimal] = defaultdict(lambda: ZERO)
    payment_totals: dict[str, Decimal] = {}

    for entry in day_entries:
        method = entry.payment_method or DEFAULT_PAYMENT_METHOD
        payment_totals.setdefault(method, ZERO)
        payment_account = accounts_by_name.get(payment_account_name(method) or "")
        if payment_account is not None:
            if entry.debit_account_id == payment_account.id:
                payment_totals[method] += entry.amount
            if entry.credit_account_id == payment_account.id:
                payment_totals[method] -= entry.amount

        kind = entry.transaction_type
        type_counts[kind] += 1
        if kind in (TransactionType.REFUND, TransactionType.VOID):
            type_totals[kind] -= entry.amount
        else:
            type_totals[kind] += entry.amount

    sales_total = type_totals[TransactionType.SALE]
    refunds_total = abs(type_totals[TransactionType.REFUND])
    voids_total = abs(type_totals[TransactionType.VOID])
    discounts_total = type_totals[TransactionType.DISCOUNT]

    return DailyClosing(
        closing_date=closing_date,
        total_entries=len(day_entries),
        sales_count=type_counts[TransactionType.SALE],
        sales_total=sales_total,
        refunds_count=type_counts[TransactionType.REFUND],
        refunds_total=refunds_total,
        voids_count=type_counts[TransactionType.VOID],
        voids_total=voids_total,
        discounts_total=discounts_total,
        net_sales=sales_total - refunds_total - voids_total - discounts_total,
        payment_method_totals=payment_totals,
        transaction_type_totals={
            kind: TransactionTypeSummary(count=count, total=type_totals[kind])
            for kind, count in type_counts.items()
        },
    )


def build_ledger_statistics(
    accounts: Sequence[Account], entries: Sequence[Entry]
) -> LedgerStatistics:
    """Build whole-ledger statistics from closing balances."""
    balances = calculate_all_account_balances(accounts, entries)
    totals = totals_by_type(accounts, balances)
    return LedgerStatistics(
        total_accounts=len(accounts),
        total_entries=len(entries),
        accounts_by_type=group_accounts_by_type(accounts),
        totals_by_type=totals,
        account_balances=balances,
        net_income=totals[AccountType.INCOME] - totals[AccountType.EXPENSE],
        total_equity=totals[AccountType.ASSET] - totals[AccountType.LIABILITY],
    )


class ReportService:
    """Service for building ledger reports."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def _fetch(self, shop_id: str) -> tuple[list[Account], list[Entry]]:
        """Fetch a shop's full account and entry lists once."""
        return self.db.list_accounts(shop_id), self.db.list_entries(shop_id)

    def get_accounting_report(
        self,
        shop_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> AccountingReport:
        """Get the accounting report for an inclusive date range.

        Args:
            shop_id: Shop to report on
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date

        Returns:
            AccountingReport; a range without entries yields zero totals
        """
        accounts, entries = self._fetch(shop_id)
        return build_accounting_report(accounts, entries, start_date, end_date)

    def get_daily_closing(
        self, shop_id: str, closing_date: Optional[date] = None
    ) -> DailyClosing:
        """Get the closing summary of one day (today when omitted)."""
        accounts, entries = self._fetch(shop_id)
        return build_daily_closing(accounts, entries, closing_date or date.today())

    def get_ledger_statistics(self, shop_id: str) -> LedgerStatistics:
        """Get whole-ledger statistics for a shop."""
        accounts, entries = self._fetch(shop_id)
        return build_ledger_statistics(accounts, entries)
