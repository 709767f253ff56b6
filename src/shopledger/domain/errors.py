"""Shared domain error messages and error types."""

from enum import Enum
from typing import Optional


class ValidationKind(str, Enum):
    """Categories of local validation failure."""

    MISSING_FIELD = "missing-field"
    INVALID_AMOUNT = "invalid-amount"
    SAME_ACCOUNT = "same-account"
    ACCOUNT_NOT_FOUND = "account-not-found"
    MALFORMED_DATE = "malformed-date"
    INVALID_ACCOUNT_TYPE = "invalid-account-type"


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input detected before any write reaches the store."""

    def __init__(self, kind: ValidationKind, message: str):
        super().__init__(message)
        self.kind = kind


class NotFoundError(DomainError):
    """Requested account or entry does not exist."""


class ReferentialIntegrityError(DomainError):
    """Operation blocked because other documents still reference the target."""

    kind = "account-in-use"

    def __init__(self, message: str, account_id: Optional[int] = None, entry_count: int = 0):
        super().__init__(message)
        self.account_id = account_id
        self.entry_count = entry_count


class PersistenceError(DomainError):
    """The underlying store call failed. The original error is chained."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def entry_not_found(entry_id: int) -> str:
    """Return message for missing entry."""
    return f"Entry {entry_id} not found"


def missing_field(field_name: str) -> str:
    """Return message for an empty required field."""
    return f"{field_name} is required"


def invalid_amount(amount: object) -> str:
    """Return message for a non-positive or non-numeric amount."""
    return f"Amount must be a number greater than zero (got {amount!r})"


def amount_too_precise(amount: object) -> str:
    """Return message for an amount finer than one cent."""
    return f"Amount must have at most 2 decimal places (got {amount!r})"


def negative_amount(field_name: str, amount: object) -> str:
    """Return message for an optional amount that must not be negative."""
    return f"{field_name} must be a number of zero or more (got {amount!r})"


def same_account() -> str:
    """Return message for an entry debiting and crediting one account."""
    return "Debit and credit accounts cannot be the same"


def malformed_date(value: object) -> str:
    """Return message for an entry date that is not an ISO calendar date."""
    return f"Invalid entry date {value!r}: expected YYYY-MM-DD"


def invalid_account_type(value: object) -> str:
    """Return message for an account type outside the chart's enum."""
    return (
        f"Invalid account type {value!r}: expected one of "
        "Asset, Liability, Income, Expense"
    )


def account_in_use(account_id: int, entry_count: int) -> str:
    """Return message when an account still has entries posted to it."""
    return (
        f"Cannot delete account {account_id}: it is used by {entry_count} "
        f"entr{'ies' if entry_count != 1 else 'y'}. "
        "Please delete or reassign them first."
    )


def discount_exceeds_total(discount: object, total: object) -> str:
    """Return message for a sale discounted below zero."""
    return f"Discount {discount} cannot exceed the sale total {total}"
