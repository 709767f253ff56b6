"""Automatic ledger postings for point-of-sale events.

Sales, refunds and voids are translated into ordinary journal entries and go
through the same validation as manual entries. A posting writes one document
per entry; if a later write fails, earlier entries of the same posting stay
persisted and the error propagates to the caller.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from shopledger.database.base import Database
from shopledger.domain.account import AccountService
from shopledger.domain.entities import Account, AccountType, TransactionType
from shopledger.domain.entry import EntryService
from shopledger.domain.errors import (
    ValidationError,
    ValidationKind,
    discount_exceeds_total,
)
from shopledger.domain.validation import coerce_amount, coerce_optional_amount

logger = logging.getLogger(__name__)

SALES_REVENUE = ("Sales Revenue", AccountType.INCOME)
DISCOUNTS_GIVEN = ("Discounts Given", AccountType.EXPENSE)
COST_OF_GOODS_SOLD = ("Cost of Goods Sold", AccountType.EXPENSE)
INVENTORY = ("Inventory", AccountType.ASSET)
ACCOUNTS_RECEIVABLE = ("Accounts Receivable", AccountType.ASSET)

DEFAULT_PAYMENT_METHOD = "Cash"

# Checked in order; first keyword contained in the method wins
PAYMENT_ACCOUNT_KEYWORDS = [
    (("cash",), "Cash"),
    (("card", "credit", "debit"), "Card Payments"),
    (("upi",), "UPI Payments"),
    (("wallet",), "Wallet Payments"),
    (("bank", "transfer"), "Bank Account"),
]


def payment_account_name(payment_method: Optional[str]) -> Optional[str]:
    """Map a free-form payment method to its Asset account name.

    Returns None when no keyword matches.
    """
    method = (payment_method or DEFAULT_PAYMENT_METHOD).lower()
    for keywords, account_name in PAYMENT_ACCOUNT_KEYWORDS:
        if any(keyword in method for keyword in keywords):
            return account_name
    return None


class AccountLookup:
    """Per-call cache of a shop's accounts, keyed by (name, type).

    Missing accounts are created on first request. The cache is owned by the
    caller and discarded after the posting.
    """

    def __init__(self, account_service: AccountService, shop_id: str):
        self.account_service = account_service
        self.shop_id = shop_id
        self._accounts: dict[tuple[str, AccountType], Account] = {
            (acc.account_name, acc.account_type): acc
            for acc in account_service.list_accounts(shop_id)
        }

    def get_or_create(self, account_name: str, account_type: AccountType) -> Account:
        """Return the named account, creating it with a zero opening balance."""
        key = (account_name, account_type)
        account = self._accounts.get(key)
        if account is None:
            account_id = self.account_service.add_account(
                shop_id=self.shop_id,
                account_name=account_name,
                account_type=account_type,
                opening_balance=Decimal("0"),
                description=f"Auto-created for {account_type.value} tracking",
            )
            account = self.account_service.require_account(account_id)
            self._accounts[key] = account
        return account

    def payment_account(self, payment_method: Optional[str], is_loan: bool = False) -> Account:
        """Resolve the Asset account receiving or paying out a payment."""
        name = payment_account_name(payment_method)
        if name is None:
            name = ACCOUNTS_RECEIVABLE[0] if is_loan else "Cash"
        return self.get_or_create(name, AccountType.ASSET)


class PostingService:
    """Service turning sales, refunds and voids into journal entries."""

    def __init__(self, db: Database):
        """Initialize posting service.

        Args:
            db: Database instance
        """
        self.db = db
        self.account_service = AccountService(db)
        self.entry_service = EntryService(db)

    def post_sale(
        self,
        shop_id: str,
        total_amount: Any,
        discount: Any = 0,
        payment_method: Optional[str] = None,
        transaction_id: Optional[str] = None,
        cost_of_goods: Any = 0,
        entry_date: Optional[date | str] = None,
        receipt_id: Optional[str] = None,
        is_loan: bool = False,
    ) -> list[int]:
        """Post a completed sale.

        Creates up to three entries:
        - payment account Dr / Sales Revenue Cr for total minus discount
        - Discounts Given Dr / Sales Revenue Cr for the discount
        - Cost of Goods Sold Dr / Inventory Cr for the cost of goods

        Args:
            shop_id: Owning shop
            total_amount: Gross sale amount before discount
            discount: Discount granted on the sale
            payment_method: Free-form payment method, defaults to Cash
            transaction_id: Receipt transaction number, used as reference
            cost_of_goods: Total cost price of the items sold
            entry_date: Effective date, defaults to today
            receipt_id: Source receipt ID
            is_loan: Sale on credit; unmatched methods post to Accounts Receivable

        Returns:
            IDs of the created entries, main sale entry first

        Raises:
            ValidationError: If the total amount is not positive, the discount
                or cost of goods is negative or not a number, or the discount
                exceeds the total; nothing is posted
        """
        total = coerce_amount(total_amount)
        discount_amount = coerce_optional_amount(discount, "Discount")
        cost = coerce_optional_amount(cost_of_goods, "Cost of goods")
        if discount_amount > total:
            raise ValidationError(
                ValidationKind.INVALID_AMOUNT, discount_exceeds_total(discount_amount, total)
            )
        method = payment_method or DEFAULT_PAYMENT_METHOD
        when = entry_date or date.today()
        label = transaction_id or "N/A"

        accounts = AccountLookup(self.account_service, shop_id)
        sales = accounts.get_or_create(*SALES_REVENUE)
        payment = accounts.payment_account(method, is_loan=is_loan)

        entry_ids = []
        net_sale = total - discount_amount
        if net_sale > 0:
            entry_ids.append(
                self.entry_service.add_entry(
                    shop_id=shop_id,
                    entry_date=when,
                    description=f"Sale - Transaction {label}",
                    debit_account_id=payment.id,
                    credit_account_id=sales.id,
                    amount=net_sale,
                    reference=transaction_id,
                    payment_method=method,
                    transaction_type=TransactionType.SALE,
                    receipt_id=receipt_id,
                )
            )

        if discount_amount > 0:
            discounts = accounts.get_or_create(*DISCOUNTS_GIVEN)
            entry_ids.append(
                self.entry_service.add_entry(
                    shop_id=shop_id,
                    entry_date=when,
                    description=f"Discount - Transaction {label}",
                    debit_account_id=discounts.id,
                    credit_account_id=sales.id,
                    amount=discount_amount,
                    reference=transaction_id,
                    payment_method=method,
                    transaction_type=TransactionType.DISCOUNT,
                    receipt_id=receipt_id,
                )
            )

        if cost > 0:
            cogs = accounts.get_or_create(*COST_OF_GOODS_SOLD)
            inventory = accounts.get_or_create(*INVENTORY)
            entry_ids.append(
                self.entry_service.add_entry(
                    shop_id=shop_id,
                    entry_date=when,
                    description=f"COGS - Transaction {label}",
                    debit_account_id=cogs.id,
                    credit_account_id=inventory.id,
                    amount=cost,
                    reference=transaction_id,
                    transaction_type=TransactionType.COGS,
                    receipt_id=receipt_id,
                )
            )

        logger.info(
            "Posted sale %s for shop %s as %d entries", label, shop_id, len(entry_ids)
        )
        return entry_ids

    def _post_reversal(
        self,
        shop_id: str,
        amount: Any,
        transaction_type: TransactionType,
        payment_method: Optional[str],
        transaction_id: Optional[str],
        reason: Optional[str],
        entry_date: Optional[date | str],
        receipt_id: Optional[str],
    ) -> list[int]:
        """Post Sales Revenue Dr / payment account Cr for a refund or void."""
        value = coerce_amount(amount)
        method = payment_method or DEFAULT_PAYMENT_METHOD
        label = transaction_id or "N/A"
        description = f"{transaction_type.value} - Transaction {label}"
        if reason:
            description = f"{description} - {reason}"

        accounts = AccountLookup(self.account_service, shop_id)
        sales = accounts.get_or_create(*SALES_REVENUE)
        payment = accounts.payment_account(method)

        entry_id = self.entry_service.add_entry(
            shop_id=shop_id,
            entry_date=entry_date or date.today(),
            description=description,
            debit_account_id=sales.id,
            credit_account_id=payment.id,
            amount=value,
            reference=transaction_id,
            payment_method=method,
            transaction_type=transaction_type,
            receipt_id=receipt_id,
        )
        logger.info(
            "Posted %s %s for shop %s", transaction_type.value.lower(), label, shop_id
        )
        return [entry_id]

    def post_refund(
        self,
        shop_id: str,
        refund_amount: Any,
        payment_method: Optional[str] = None,
        transaction_id: Optional[str] = None,
        reason: Optional[str] = None,
        entry_date: Optional[date | str] = None,
        receipt_id: Optional[str] = None,
    ) -> list[int]:
        """Post a refund of part or all of a sale.

        Returns:
            IDs of the created entries
        """
        return self._post_reversal(
            shop_id, refund_amount, TransactionType.REFUND, payment_method,
            transaction_id, reason, entry_date, receipt_id,
        )

    def post_void(
        self,
        shop_id: str,
        void_amount: Any,
        payment_method: Optional[str] = None,
        transaction_id: Optional[str] = None,
        reason: Optional[str] = None,
        entry_date: Optional[date | str] = None,
        receipt_id: Optional[str] = None,
    ) -> list[int]:
        """Post a voided sale.

        Returns:
            IDs of the created entries
        """
        return self._post_reversal(
            shop_id, void_amount, TransactionType.VOID, payment_method,
            transaction_id, reason, entry_date, receipt_id,
        )
