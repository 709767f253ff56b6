"""Shared pytest fixtures for shopledger tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from shopledger.database.factories import create_sqlite_database
from shopledger.domain.account import AccountService
from shopledger.domain.balance import BalanceService
from shopledger.domain.entities import AccountType
from shopledger.domain.entry import EntryService
from shopledger.domain.posting import PostingService
from shopledger.domain.report import ReportService

SHOP_ID = "shop-1"
OTHER_SHOP_ID = "shop-2"


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def entry_service(temp_db):
    """Create an EntryService with a temporary database."""
    return EntryService(temp_db)


@pytest.fixture
def balance_service(temp_db):
    """Create a BalanceService with a temporary database."""
    return BalanceService(temp_db)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def posting_service(temp_db):
    """Create a PostingService with a temporary database."""
    return PostingService(temp_db)


@pytest.fixture
def shop_accounts(account_service):
    """Create a small chart of accounts and return IDs keyed by name."""
    chart = [
        ("Cash", AccountType.ASSET, Decimal("1000")),
        ("Bank Account", AccountType.ASSET, Decimal("0")),
        ("Loans Payable", AccountType.LIABILITY, Decimal("0")),
        ("Sales", AccountType.INCOME, Decimal("0")),
        ("Rent", AccountType.EXPENSE, Decimal("0")),
    ]
    return {
        name: account_service.add_account(
            shop_id=SHOP_ID,
            account_name=name,
            account_type=kind,
            opening_balance=opening,
        )
        for name, kind, opening in chart
    }


@pytest.fixture
def add_entry(entry_service, shop_accounts):
    """Return a helper posting an entry between two named accounts."""

    def _add(debit, credit, amount, entry_date=date(2024, 1, 15), **kwargs):
        return entry_service.add_entry(
            shop_id=SHOP_ID,
            entry_date=entry_date,
            description=kwargs.pop("description", f"{debit} / {credit}"),
            debit_account_id=shop_accounts[debit],
            credit_account_id=shop_accounts[credit],
            amount=amount,
            **kwargs,
        )

    return _add


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
