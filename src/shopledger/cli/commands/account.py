"""Account management commands."""

import click
from shopledger.cli.account_resolution import resolve_account_or_exit
from shopledger.cli.error_handling import format_money, handle_domain_error
from shopledger.domain.account import AccountService
from shopledger.domain.balance import BalanceService, calculate_all_account_balances
from shopledger.domain.entities import AccountType
from shopledger.domain.errors import DomainError

ACCOUNT_TYPES = click.Choice([t.value for t in AccountType], case_sensitive=False)


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--type", "account_type", required=True, type=ACCOUNT_TYPES, help="Account type")
@click.option("--opening-balance", default="0", show_default=True, help="Balance at ledger inception")
@click.option("--description", help="Account description")
@click.pass_context
def create_account(ctx, name: str, account_type: str, opening_balance: str, description: str | None):
    """Create a new account.

    Examples:
        shopledger account create "Petty Cash" --type Asset --opening-balance 500
        shopledger account create "Supplier Loan" --type Liability
    """
    service = AccountService(ctx.obj["db"])

    try:
        account_id = service.add_account(
            shop_id=ctx.obj["shop_id"],
            account_name=name,
            account_type=account_type,
            opening_balance=opening_balance,
            description=description,
        )
        click.echo(f"Created account '{name}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts with their current balances."""
    db = ctx.obj["db"]
    shop_id = ctx.obj["shop_id"]
    service = AccountService(db)

    try:
        accounts = service.list_accounts(shop_id)
        entries = db.list_entries(shop_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not accounts:
        click.echo("No accounts found. Run 'shopledger account init-defaults' to create a starter chart.")
        return

    balances = calculate_all_account_balances(accounts, entries)

    click.echo("\nAccounts:")
    click.echo("-" * 72)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.account_name:24s} | {acc.account_type.value:9s} | "
            f"{format_money(balances[acc.id]):>14s}"
        )


@account_group.command("balance")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_balance(ctx, account: str):
    """Show the balance of one account.

    ACCOUNT can be an account name or ID.
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    try:
        balance = BalanceService(db).calculate_account_balance(account_id, ctx.obj["shop_id"])
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Balance: {format_money(balance)}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--type", "account_type", type=ACCOUNT_TYPES, help="New account type")
@click.option("--opening-balance", help="New opening balance")
@click.option("--description", help="New description")
@click.pass_context
def update_account(
    ctx,
    account: str,
    name: str | None,
    account_type: str | None,
    opening_balance: str | None,
    description: str | None,
) -> None:
    """Update an account.

    ACCOUNT can be an account name or ID. Options that are not given keep
    their current value.

    Examples:
        shopledger account update "Cash" --opening-balance 1000
        shopledger account update 3 --name "Main Bank" --description "Checking"
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        current = service.require_account(account_id)
        service.update_account(
            account_id=account_id,
            account_name=name if name is not None else current.account_name,
            account_type=account_type if account_type is not None else current.account_type,
            opening_balance=(
                opening_balance if opening_balance is not None else current.opening_balance
            ),
            description=description if description is not None else current.description,
        )
        click.echo(f"Updated account {account_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    The account can only be deleted if no entry debits or credits it.
    Use 'entry delete' to remove those entries first.

    Examples:
        shopledger account delete "Petty Cash"
        shopledger account delete 4 --yes
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.account_name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id, ctx.obj["shop_id"])
        click.echo(f"Deleted account '{account_obj.account_name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("init-defaults")
@click.pass_context
def init_defaults(ctx):
    """Create the starter chart of accounts for a shop without accounts."""
    try:
        created = AccountService(ctx.obj["db"]).initialize_default_accounts(ctx.obj["shop_id"])
    except DomainError as e:
        handle_domain_error(ctx, e)

    if created:
        click.echo("Created default chart of accounts.")
    else:
        click.echo("Accounts already exist. Nothing to do.")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
