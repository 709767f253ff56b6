"""Utility for resolving account names to IDs within a shop."""

from shopledger.domain.account import AccountService


def resolve_account(account_service: AccountService, shop_id: str, account: str | int) -> int:
    """Resolve account name or ID to account ID.

    Numeric input is treated as an ID; anything else is matched against
    account names (case-sensitive first, then case-insensitive). Accounts
    of other shops never match.

    Args:
        account_service: AccountService instance
        shop_id: Shop the account must belong to
        account: Account name or ID

    Returns:
        Account ID

    Raises:
        ValueError: If account is not found or the name is ambiguous
    """
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None

    if account_id is not None:
        account_obj = account_service.get_account(account_id)
        if account_obj is None or account_obj.shop_id != shop_id:
            raise ValueError(f"Account ID {account_id} not found")
        return account_id

    accounts = account_service.list_accounts(shop_id)
    for acc in accounts:
        if acc.account_name == account:
            return acc.id

    matches = [acc for acc in accounts if acc.account_name.lower() == str(account).lower()]
    if len(matches) > 1:
        raise ValueError(f"Account name '{account}' is ambiguous; use the account ID")
    if matches:
        return matches[0].id

    raise ValueError(f"Account '{account}' not found")
