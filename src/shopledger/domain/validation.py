"""Input validation for accounts and journal entries.

Every check here runs before the store is written to. Only
``require_accounts_in_shop`` reads from the store.
"""

import logging
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from shopledger.database.base import Database
from shopledger.domain.entities import AccountType
from shopledger.domain.errors import (
    ValidationError,
    ValidationKind,
    account_not_found,
    amount_too_precise,
    invalid_account_type,
    invalid_amount,
    malformed_date,
    missing_field,
    negative_amount,
    same_account,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def require_text(value: Optional[str], field_name: str) -> str:
    """Return the stripped value, or raise if it is empty."""
    if _is_blank(value):
        raise ValidationError(ValidationKind.MISSING_FIELD, missing_field(field_name))
    return str(value).strip()


def coerce_entry_date(value: Any) -> date:
    """Normalize an entry date given as a date or a 'YYYY-MM-DD' string."""
    if _is_blank(value):
        raise ValidationError(
            ValidationKind.MISSING_FIELD, missing_field("Entry date")
        )
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # fromisoformat also takes basic and week dates, which are not accepted here
    if isinstance(value, str) and _ISO_DATE.fullmatch(value.strip()):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValidationError(ValidationKind.MALFORMED_DATE, malformed_date(value))


def _to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a number or numeric string to a finite Decimal, else None."""
    # bool is an int subclass but never a meaningful amount
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, float):
            number = Decimal(str(value))
        elif isinstance(value, str):
            number = Decimal(value.strip())
        else:
            number = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def _has_sub_cent_digits(number: Decimal) -> bool:
    try:
        return number != number.quantize(CENT)
    except InvalidOperation:
        return True


def coerce_amount(value: Any) -> Decimal:
    """Normalize an entry amount to a strictly positive Decimal in whole cents.

    The store keeps two decimal places, so finer amounts are rejected.
    """
    amount = _to_decimal(value)
    if amount is None or amount <= 0:
        raise ValidationError(ValidationKind.INVALID_AMOUNT, invalid_amount(value))
    if _has_sub_cent_digits(amount):
        raise ValidationError(ValidationKind.INVALID_AMOUNT, amount_too_precise(value))
    return amount


def coerce_optional_amount(value: Any, field_name: str) -> Decimal:
    """Normalize an optional amount such as a discount; absent means zero.

    Raises:
        ValidationError: If the value is not a number, is negative or has
            more than two decimal places
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return Decimal("0")
    amount = _to_decimal(value)
    if amount is None or amount < 0:
        raise ValidationError(
            ValidationKind.INVALID_AMOUNT, negative_amount(field_name, value)
        )
    if _has_sub_cent_digits(amount):
        raise ValidationError(ValidationKind.INVALID_AMOUNT, amount_too_precise(value))
    return amount


def coerce_opening_balance(value: Any) -> Decimal:
    """Parse an opening balance, falling back to zero when absent or unparseable.

    Values are rounded half-up to whole cents, the precision the store keeps.
    """
    balance = _to_decimal(value)
    if balance is None:
        if value is not None:
            logger.debug("Opening balance %r is not numeric, using 0", value)
        return Decimal("0")
    try:
        return balance.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        logger.debug("Opening balance %r is out of range, using 0", value)
        return Decimal("0")


def coerce_account_type(value: Any) -> AccountType:
    """Resolve an account type from the enum or its string value."""
    if isinstance(value, AccountType):
        return value
    if isinstance(value, str):
        for account_type in AccountType:
            if value.strip().lower() == account_type.value.lower():
                return account_type
    raise ValidationError(
        ValidationKind.INVALID_ACCOUNT_TYPE, invalid_account_type(value)
    )


def validate_entry_fields(
    entry_date: Any,
    description: Optional[str],
    debit_account_id: Optional[int],
    credit_account_id: Optional[int],
    amount: Any,
) -> tuple[date, str, Decimal]:
    """Run the local entry checks in order; the first failure wins.

    Returns:
        Tuple of (entry_date, stripped description, amount)
    """
    clean_description = require_text(description, "Description")
    if _is_blank(debit_account_id):
        raise ValidationError(
            ValidationKind.MISSING_FIELD, missing_field("Debit account")
        )
    if _is_blank(credit_account_id):
        raise ValidationError(
            ValidationKind.MISSING_FIELD, missing_field("Credit account")
        )
    clean_date = coerce_entry_date(entry_date)
    clean_amount = coerce_amount(amount)
    if debit_account_id == credit_account_id:
        raise ValidationError(ValidationKind.SAME_ACCOUNT, same_account())
    return clean_date, clean_description, clean_amount


def require_accounts_in_shop(db: Database, shop_id: str, *account_ids: int) -> None:
    """Raise if any account is missing or belongs to another shop."""
    for account_id in account_ids:
        account = db.get_account(account_id)
        if account is None or account.shop_id != shop_id:
            raise ValidationError(
                ValidationKind.ACCOUNT_NOT_FOUND, account_not_found(account_id)
            )
