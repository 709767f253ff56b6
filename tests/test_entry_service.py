"""Tests for the journal entry domain service."""

from datetime import date
from decimal import Decimal

import pytest

from shopledger.domain.entities import AccountType, TransactionType
from shopledger.domain.errors import NotFoundError, ValidationError, ValidationKind

SHOP_ID = "shop-1"
OTHER_SHOP_ID = "shop-2"


def _valid_fields(shop_accounts, **overrides):
    fields = {
        "shop_id": SHOP_ID,
        "entry_date": date(2024, 1, 15),
        "description": "Cash sale",
        "debit_account_id": shop_accounts["Cash"],
        "credit_account_id": shop_accounts["Sales"],
        "amount": Decimal("10"),
    }
    fields.update(overrides)
    return fields


class TestAddEntry:
    """Tests for creating entries."""

    def test_add_entry(self, entry_service, shop_accounts):
        entry_id = entry_service.add_entry(
            **_valid_fields(shop_accounts, reference=" INV-1 ", payment_method="Card")
        )

        entry = entry_service.get_entry(entry_id)
        assert entry.shop_id == SHOP_ID
        assert entry.entry_date == date(2024, 1, 15)
        assert entry.description == "Cash sale"
        assert entry.amount == Decimal("10")
        assert entry.reference == "INV-1"
        assert entry.payment_method == "Card"
        assert entry.transaction_type == TransactionType.MANUAL

    def test_iso_string_date_accepted(self, entry_service, shop_accounts):
        entry_id = entry_service.add_entry(**_valid_fields(shop_accounts, entry_date="2024-02-29"))
        assert entry_service.get_entry(entry_id).entry_date == date(2024, 2, 29)

    def test_smallest_unit_accepted(self, entry_service, shop_accounts):
        entry_id = entry_service.add_entry(**_valid_fields(shop_accounts, amount=0.01))
        assert entry_service.get_entry(entry_id).amount == Decimal("0.01")

    @pytest.mark.parametrize("amount", [0, -1, "0", "-0.01", Decimal("-5"), "abc", None, "NaN", "Infinity", float("inf"), True])
    def test_non_positive_or_non_numeric_amount_rejected(self, entry_service, shop_accounts, amount):
        with pytest.raises(ValidationError) as excinfo:
            entry_service.add_entry(**_valid_fields(shop_accounts, amount=amount))
        assert excinfo.value.kind == ValidationKind.INVALID_AMOUNT
        assert entry_service.list_entries(SHOP_ID) == []

    @pytest.mark.parametrize("account", ["Cash", "Sales", "Rent", "Loans Payable"])
    def test_same_account_rejected(self, entry_service, shop_accounts, account):
        with pytest.raises(ValidationError) as excinfo:
            entry_service.add_entry(
                **_valid_fields(
                    shop_accounts,
                    debit_account_id=shop_accounts[account],
                    credit_account_id=shop_accounts[account],
                )
            )
        assert excinfo.value.kind == ValidationKind.SAME_ACCOUNT

    def test_same_unknown_account_rejected_as_same_account(self, entry_service, shop_accounts):
        with pytest.raises(ValidationError) as excinfo:
            entry_service.add_entry(
                **_valid_fields(shop_accounts, debit_account_id=999, credit_account_id=999)
            )
        assert excinfo.value.kind == ValidationKind.SAME_ACCOUNT

    @pytest.mark.parametrize(
        "field",
        ["description", "debit_account_id", "credit_account_id", "entry_date"],
    )
    def test_missing_field_rejected(self, entry_service, shop_accounts, field):
        with pytest.raises(ValidationError) as excinfo:
            entry_service.add_entry(**_valid_fields(shop_accounts, **{field: None}))
        assert excinfo.value.kind == ValidationKind.MISSING_FIELD

    def test_blank_description_rejected(self, entry_service, shop_accounts):
        with pytest.raises(ValidationError) as excinfo:
            entry_service.add_entry(**_valid_fields(shop_accounts, description="   "))
        assert excinfo.value.kind == ValidationKind.MISSING_FIELD

    @pytest.mark.parametrize("amount", ["0.001", "10.005", Decimal("1.999"), 0.125])
    def test_sub_cent_amount_rejected(self, entry_service, shop_accounts, amount):
        with pytest.raises(ValidationError) as excinfo:
            entry_service.add_entry(**_valid_fields(shop_accounts, amount=amount))
        assert excinfo.value.kind == ValidationKind.INVALID_AMOUNT
        assert entry_service.list_entries(SHOP_ID) == []

    def test_trailing_zero_places_accepted(self, entry_service, shop_accounts):
        entry_id = entry_service.add_entry(**_valid_fields(shop_accounts, amount="10.500"))
        assert entry_service.get_entry(entry_id).amount == Decimal("10.50")

    @pytest.mark.parametrize(
        "entry_date",
        ["15/01/2024", "2024-13-01", "yesterday", 20240115, "20240115", "2024-W03-1", "2024-1-5"],
    )
    def test_malformed_date_rejected(self, entry_service, shop_accounts, entry_date):
        with pytest.raises(ValidationError) as excinfo:
            entry_service.add_entry(**_valid_fields(shop_accounts, entry_date=entry_date))
        assert excinfo.value.kind == ValidationKind.MALFORMED_DATE

    def test_unknown_account_rejected(self, entry_service, shop_accounts):
        with pytest.raises(ValidationError) as excinfo:
            entry_service.add_entry(**_valid_fields(shop_accounts, credit_account_id=999))
        assert excinfo.value.kind == ValidationKind.ACCOUNT_NOT_FOUND

    def test_account_of_other_shop_rejected(self, entry_service, account_service, shop_accounts):
        foreign_id = account_service.add_account(OTHER_SHOP_ID, "Cash", AccountType.ASSET)

        with pytest.raises(ValidationError) as excinfo:
            entry_service.add_entry(**_valid_fields(shop_accounts, debit_account_id=foreign_id))
        assert excinfo.value.kind == ValidationKind.ACCOUNT_NOT_FOUND

    def test_validation_error_is_value_error(self, entry_service, shop_accounts):
        with pytest.raises(ValueError):
            entry_service.add_entry(**_valid_fields(shop_accounts, amount=0))


class TestUpdateEntry:
    """Tests for replacing entry fields."""

    def test_update_replaces_fields(self, entry_service, shop_accounts, add_entry):
        entry_id = add_entry("Cash", "Sales", "10", transaction_type=TransactionType.SALE)

        entry_service.update_entry(
            entry_id,
            SHOP_ID,
            entry_date="2024-03-01",
            description="Corrected",
            debit_account_id=shop_accounts["Bank Account"],
            credit_account_id=shop_accounts["Sales"],
            amount="12.50",
            reference="R-9",
        )

        entry = entry_service.get_entry(entry_id)
        assert entry.entry_date == date(2024, 3, 1)
        assert entry.description == "Corrected"
        assert entry.debit_account_id == shop_accounts["Bank Account"]
        assert entry.amount == Decimal("12.50")
        assert entry.reference == "R-9"
        assert entry.transaction_type == TransactionType.SALE

    def test_update_applies_same_validation(self, entry_service, shop_accounts, add_entry):
        entry_id = add_entry("Cash", "Sales", "10")

        with pytest.raises(ValidationError) as excinfo:
            entry_service.update_entry(
                entry_id,
                SHOP_ID,
                entry_date="2024-01-15",
                description="Bad",
                debit_account_id=shop_accounts["Cash"],
                credit_account_id=shop_accounts["Cash"],
                amount="10",
            )
        assert excinfo.value.kind == ValidationKind.SAME_ACCOUNT
        assert entry_service.get_entry(entry_id).description == "Cash / Sales"

    def test_update_missing_entry(self, entry_service, shop_accounts):
        with pytest.raises(NotFoundError):
            entry_service.update_entry(
                999,
                SHOP_ID,
                entry_date="2024-01-15",
                description="Ghost",
                debit_account_id=shop_accounts["Cash"],
                credit_account_id=shop_accounts["Sales"],
                amount="1",
            )

    def test_update_from_other_shop_not_found(self, entry_service, shop_accounts, add_entry):
        entry_id = add_entry("Cash", "Sales", "10")

        with pytest.raises(NotFoundError):
            entry_service.update_entry(
                entry_id,
                OTHER_SHOP_ID,
                entry_date="2024-01-15",
                description="Rewritten",
                debit_account_id=shop_accounts["Cash"],
                credit_account_id=shop_accounts["Sales"],
                amount="999",
            )

        entry = entry_service.get_entry(entry_id)
        assert entry.amount == Decimal("10")
        assert entry.description == "Cash / Sales"

    def test_update_rejects_sub_cent_amount(self, entry_service, shop_accounts, add_entry):
        entry_id = add_entry("Cash", "Sales", "10")

        with pytest.raises(ValidationError) as excinfo:
            entry_service.update_entry(
                entry_id,
                SHOP_ID,
                entry_date="2024-01-15",
                description="Cash / Sales",
                debit_account_id=shop_accounts["Cash"],
                credit_account_id=shop_accounts["Sales"],
                amount="0.001",
            )
        assert excinfo.value.kind == ValidationKind.INVALID_AMOUNT
        assert entry_service.get_entry(entry_id).amount == Decimal("10")


class TestDeleteAndListEntries:
    """Tests for deleting and listing entries."""

    def test_delete_entry(self, entry_service, add_entry):
        entry_id = add_entry("Cash", "Sales", "10")
        entry_service.delete_entry(entry_id, SHOP_ID)
        assert entry_service.get_entry(entry_id) is None

    def test_delete_missing_entry(self, entry_service):
        with pytest.raises(NotFoundError):
            entry_service.delete_entry(999, SHOP_ID)

    def test_delete_from_other_shop_not_found(self, entry_service, add_entry):
        entry_id = add_entry("Cash", "Sales", "10")

        with pytest.raises(NotFoundError):
            entry_service.delete_entry(entry_id, OTHER_SHOP_ID)
        assert entry_service.get_entry(entry_id) is not None

    def test_list_newest_first(self, entry_service, add_entry):
        first = add_entry("Cash", "Sales", "1", entry_date=date(2024, 1, 1))
        second = add_entry("Cash", "Sales", "2", entry_date=date(2024, 1, 3))
        third = add_entry("Cash", "Sales", "3", entry_date=date(2024, 1, 3))

        ids = [entry.id for entry in entry_service.list_entries(SHOP_ID)]
        assert ids == [third, second, first]

    def test_list_filters_by_account_on_either_side(self, entry_service, shop_accounts, add_entry):
        rent = add_entry("Rent", "Cash", "5")
        sale = add_entry("Cash", "Sales", "7")
        add_entry("Bank Account", "Loans Payable", "9")

        ids = {e.id for e in entry_service.list_entries(SHOP_ID, account_id=shop_accounts["Cash"])}
        assert ids == {rent, sale}

    def test_list_filters_by_inclusive_date_range(self, entry_service, add_entry):
        add_entry("Cash", "Sales", "1", entry_date=date(2024, 1, 1))
        inside_start = add_entry("Cash", "Sales", "2", entry_date=date(2024, 1, 10))
        inside_end = add_entry("Cash", "Sales", "3", entry_date=date(2024, 1, 20))
        add_entry("Cash", "Sales", "4", entry_date=date(2024, 1, 21))

        entries = entry_service.list_entries(
            SHOP_ID, start_date=date(2024, 1, 10), end_date=date(2024, 1, 20)
        )
        assert {e.id for e in entries} == {inside_start, inside_end}

    def test_list_scoped_to_shop(self, entry_service, add_entry):
        add_entry("Cash", "Sales", "10")
        assert entry_service.list_entries(OTHER_SHOP_ID) == []
