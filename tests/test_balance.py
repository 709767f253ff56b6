"""Tests for balance computation."""

import random
from datetime import date, datetime
from decimal import Decimal

import pytest

from shopledger.domain.balance import (
    BalanceCache,
    calculate_account_movements,
    calculate_all_account_balances,
    fold_account_balance,
    totals_by_type,
)
from shopledger.domain.entities import Account, AccountType, Entry, TransactionType
from shopledger.domain.errors import NotFoundError

SHOP_ID = "shop-1"
OTHER_SHOP_ID = "shop-2"
NOW = datetime(2024, 1, 1, 12, 0)


def make_account(account_id, account_type=AccountType.ASSET, opening="0"):
    return Account(
        id=account_id,
        shop_id=SHOP_ID,
        account_name=f"Account {account_id}",
        account_type=account_type,
        opening_balance=Decimal(opening),
        description=None,
        created_at=NOW,
        updated_at=NOW,
    )


def make_entry(entry_id, debit, credit, amount):
    return Entry(
        id=entry_id,
        shop_id=SHOP_ID,
        entry_date=date(2024, 1, 15),
        description=f"Entry {entry_id}",
        debit_account_id=debit,
        credit_account_id=credit,
        amount=Decimal(amount),
        reference=None,
        payment_method=None,
        transaction_type=TransactionType.MANUAL,
        receipt_id=None,
        created_at=NOW,
        updated_at=NOW,
    )


class TestCalculateAllAccountBalances:
    """Tests for the single-pass balance calculation."""

    def test_no_entries_yields_opening_balances(self):
        accounts = [make_account(1, opening="1000"), make_account(2, AccountType.INCOME)]
        assert calculate_all_account_balances(accounts, []) == {
            1: Decimal("1000"),
            2: Decimal("0"),
        }

    def test_debit_increases_credit_decreases(self):
        accounts = [make_account(1, opening="1000"), make_account(2, AccountType.INCOME)]
        entries = [make_entry(1, 1, 2, "500")]

        balances = calculate_all_account_balances(accounts, entries)
        assert balances[1] == Decimal("1500")
        assert balances[2] == Decimal("-500")

    def test_expense_paid_from_cash(self):
        accounts = [make_account(1, opening="1000"), make_account(2, AccountType.EXPENSE)]
        entries = [make_entry(1, 2, 1, "500")]

        balances = calculate_all_account_balances(accounts, entries)
        assert balances[2] == Decimal("500")
        assert balances[1] == Decimal("500")

    def test_entries_net_to_zero_across_accounts(self):
        accounts = [make_account(i, opening=str(i * 10)) for i in range(1, 6)]
        entries = [
            make_entry(1, 1, 2, "3.50"),
            make_entry(2, 3, 4, "10"),
            make_entry(3, 5, 1, "0.01"),
            make_entry(4, 2, 5, "99.99"),
        ]

        balances = calculate_all_account_balances(accounts, entries)
        total_opening = sum(acc.opening_balance for acc in accounts)
        assert sum(balances.values()) == total_opening

    def test_order_independent(self):
        accounts = [make_account(i) for i in range(1, 5)]
        entries = [
            make_entry(i, i % 4 + 1, (i + 1) % 4 + 1, f"{i}.25") for i in range(1, 20)
        ]
        shuffled = list(entries)
        random.Random(7).shuffle(shuffled)

        assert calculate_all_account_balances(accounts, entries) == (
            calculate_all_account_balances(accounts, shuffled)
        )

    def test_matches_per_account_fold(self):
        accounts = [make_account(i, opening=str(i)) for i in range(1, 5)]
        entries = [
            make_entry(1, 1, 2, "5"),
            make_entry(2, 2, 3, "7"),
            make_entry(3, 4, 1, "11"),
        ]

        batch = calculate_all_account_balances(accounts, entries)
        for account in accounts:
            assert batch[account.id] == fold_account_balance(account, entries)

    def test_unknown_account_side_ignored(self):
        accounts = [make_account(1, opening="100")]
        entries = [make_entry(1, 1, 99, "40"), make_entry(2, 98, 1, "10")]

        balances = calculate_all_account_balances(accounts, entries)
        assert balances == {1: Decimal("130")}

    def test_inputs_not_mutated(self):
        accounts = [make_account(1, opening="100"), make_account(2)]
        entries = [make_entry(1, 1, 2, "40")]
        accounts_before = list(accounts)
        entries_before = list(entries)

        calculate_all_account_balances(accounts, entries)

        assert accounts == accounts_before
        assert entries == entries_before
        assert accounts[0].opening_balance == Decimal("100")

    def test_movements_ignore_opening_balance(self):
        accounts = [make_account(1, opening="1000"), make_account(2)]
        entries = [make_entry(1, 1, 2, "25")]

        assert calculate_account_movements(accounts, entries) == {
            1: Decimal("25"),
            2: Decimal("-25"),
        }

    def test_totals_by_type_cover_every_type(self):
        accounts = [
            make_account(1, AccountType.ASSET, "10"),
            make_account(2, AccountType.ASSET, "5"),
            make_account(3, AccountType.INCOME),
        ]
        balances = calculate_all_account_balances(accounts, [make_entry(1, 1, 3, "2")])

        totals = totals_by_type(accounts, balances)
        assert totals == {
            AccountType.ASSET: Decimal("17"),
            AccountType.LIABILITY: Decimal("0"),
            AccountType.INCOME: Decimal("-2"),
            AccountType.EXPENSE: Decimal("0"),
        }


class TestBalanceService:
    """Tests for store-backed balance reads."""

    def test_sale_scenario(self, balance_service, shop_accounts, add_entry):
        add_entry("Cash", "Sales", "500")

        assert balance_service.calculate_account_balance(
            shop_accounts["Cash"], SHOP_ID
        ) == Decimal("1500")
        assert balance_service.calculate_account_balance(
            shop_accounts["Sales"], SHOP_ID
        ) == Decimal("-500")

    def test_expense_scenario(self, balance_service, shop_accounts, add_entry):
        add_entry("Rent", "Cash", "500")

        balances = balance_service.calculate_shop_balances(SHOP_ID)
        assert balances[shop_accounts["Rent"]] == Decimal("500")
        assert balances[shop_accounts["Cash"]] == Decimal("500")

    def test_single_and_batch_agree(self, balance_service, shop_accounts, add_entry):
        add_entry("Cash", "Sales", "120")
        add_entry("Rent", "Bank Account", "30")
        add_entry("Bank Account", "Loans Payable", "1000")

        batch = balance_service.calculate_shop_balances(SHOP_ID)
        for account_id in shop_accounts.values():
            assert batch[account_id] == balance_service.calculate_account_balance(
                account_id, SHOP_ID
            )

    def test_prefetched_entries_used(self, balance_service, shop_accounts):
        entries = [make_entry(1, shop_accounts["Cash"], shop_accounts["Sales"], "1")]
        assert balance_service.calculate_account_balance(
            shop_accounts["Cash"], SHOP_ID, entries=entries
        ) == Decimal("1001")

    def test_missing_account(self, balance_service):
        with pytest.raises(NotFoundError):
            balance_service.calculate_account_balance(999, SHOP_ID)

    def test_account_of_other_shop(self, balance_service, shop_accounts):
        with pytest.raises(NotFoundError):
            balance_service.calculate_account_balance(shop_accounts["Cash"], OTHER_SHOP_ID)

    def test_empty_shop(self, balance_service):
        assert balance_service.calculate_shop_balances(OTHER_SHOP_ID) == {}


class TestBalanceCache:
    """Tests for the caller-owned balance cache."""

    def test_cached_until_invalidated(self, balance_service, shop_accounts, add_entry):
        cache = BalanceCache(balance_service)
        cash = shop_accounts["Cash"]
        assert cache.get(SHOP_ID)[cash] == Decimal("1000")

        add_entry("Cash", "Sales", "50")
        assert cache.get(SHOP_ID)[cash] == Decimal("1000")
        assert cache.verify(SHOP_ID) is False

        cache.invalidate(SHOP_ID)
        assert cache.get(SHOP_ID)[cash] == Decimal("1050")
        assert cache.verify(SHOP_ID) is True

    def test_returned_map_is_a_copy(self, balance_service, shop_accounts):
        cache = BalanceCache(balance_service)
        balances = cache.get(SHOP_ID)
        balances[shop_accounts["Cash"]] = Decimal("0")

        assert cache.get(SHOP_ID)[shop_accounts["Cash"]] == Decimal("1000")

    def test_clear(self, balance_service, shop_accounts, add_entry):
        cache = BalanceCache(balance_service)
        cache.get(SHOP_ID)
        add_entry("Rent", "Cash", "10")

        cache.clear()
        assert cache.get(SHOP_ID)[shop_accounts["Cash"]] == Decimal("990")
