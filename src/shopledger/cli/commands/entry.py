"""Journal entry commands."""

import click
from shopledger.cli.account_resolution import resolve_account_or_exit
from shopledger.cli.date_filters import resolve_cli_date_range
from shopledger.cli.error_handling import format_money, handle_domain_error
from shopledger.domain.account import AccountService
from shopledger.domain.entry import EntryService
from shopledger.domain.errors import DomainError
from shopledger.utils.amount_parser import parse_amount
from shopledger.utils.date_parser import parse_date


@click.group()
def entry_group():
    """Manage journal entries."""
    pass


def _parse_entry_inputs(ctx, date: str, amount: str):
    """Parse CLI date and amount strings, exiting on bad input."""
    try:
        entry_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        entry_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    return entry_date, entry_amount


@entry_group.command("add")
@click.option("--date", required=True, help="Entry date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--description", required=True, help="Entry description")
@click.option("--debit", required=True, help="Debit account name or ID")
@click.option("--credit", required=True, help="Credit account name or ID")
@click.option("--amount", required=True, help="Amount (must be greater than zero)")
@click.option("--reference", help="Invoice or receipt number")
@click.option("--payment-method", help="Payment method tag (e.g. Cash, Card, UPI)")
@click.pass_context
def add_entry(
    ctx,
    date: str,
    description: str,
    debit: str,
    credit: str,
    amount: str,
    reference: str | None,
    payment_method: str | None,
):
    """Add a journal entry.

    Examples:
        shopledger entry add --date today --description "Owner deposit" --debit Cash --credit "Loans Payable" --amount 1000
        shopledger entry add --date 2024-01-31 --description "January rent" --debit Rent --credit "Bank Account" --amount 750 --reference INV-12
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    entry_service = EntryService(db)

    debit_id = resolve_account_or_exit(ctx, account_service, debit)
    credit_id = resolve_account_or_exit(ctx, account_service, credit)
    entry_date, entry_amount = _parse_entry_inputs(ctx, date, amount)

    try:
        entry_id = entry_service.add_entry(
            shop_id=ctx.obj["shop_id"],
            entry_date=entry_date,
            description=description,
            debit_account_id=debit_id,
            credit_account_id=credit_id,
            amount=entry_amount,
            reference=reference,
            payment_method=payment_method,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created entry {entry_id}")
    click.echo(f"  Date: {entry_date}")
    click.echo(f"  Debit: {debit}")
    click.echo(f"  Credit: {credit}")
    click.echo(f"  Amount: {format_money(entry_amount)}")


@entry_group.command("list")
@click.option("--account", help="Only entries debiting or crediting this account (name or ID)")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--this-month", is_flag=True, help="Only entries from this month")
@click.option("--last-month", is_flag=True, help="Only entries from last month")
@click.pass_context
def list_entries(
    ctx,
    account: str | None,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    last_month: bool,
):
    """List journal entries, newest first."""
    db = ctx.obj["db"]
    entry_service = EntryService(db)
    account_service = AccountService(db)
    shop_id = ctx.obj["shop_id"]

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, account_service, account)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={"this-month": this_month, "last-month": last_month},
    )

    try:
        entries = entry_service.list_entries(
            shop_id, account_id=account_id, start_date=start, end_date=end
        )
        names = {acc.id: acc.account_name for acc in account_service.list_accounts(shop_id)}
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not entries:
        click.echo("No entries found.")
        return

    click.echo(f"\n{'ID':>4s}  {'Date':10s}  {'Debit':20s}  {'Credit':20s}  {'Amount':>12s}  Description")
    click.echo("-" * 100)
    for entry in entries:
        debit_name = names.get(entry.debit_account_id, f"#{entry.debit_account_id}")
        credit_name = names.get(entry.credit_account_id, f"#{entry.credit_account_id}")
        click.echo(
            f"{entry.id:4d}  {entry.entry_date.isoformat():10s}  {debit_name[:20]:20s}  "
            f"{credit_name[:20]:20s}  {format_money(entry.amount):>12s}  {entry.description}"
        )
    click.echo(f"\nTotal: {len(entries)} entries")


@entry_group.command("update")
@click.argument("entry_id", type=int)
@click.option("--date", help="New entry date")
@click.option("--description", help="New description")
@click.option("--debit", help="New debit account name or ID")
@click.option("--credit", help="New credit account name or ID")
@click.option("--amount", help="New amount")
@click.option("--reference", help="New reference")
@click.option("--payment-method", help="New payment method tag")
@click.pass_context
def update_entry(
    ctx,
    entry_id: int,
    date: str | None,
    description: str | None,
    debit: str | None,
    credit: str | None,
    amount: str | None,
    reference: str | None,
    payment_method: str | None,
) -> None:
    """Update a journal entry.

    Options that are not given keep their current value; the resulting
    entry is validated as a whole.

    Examples:
        shopledger entry update 12 --amount 80.00
        shopledger entry update 12 --debit Utilities --description "Power bill"
    """
    db = ctx.obj["db"]
    entry_service = EntryService(db)
    account_service = AccountService(db)

    shop_id = ctx.obj["shop_id"]
    try:
        current = entry_service.require_entry(entry_id, shop_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    debit_id = current.debit_account_id
    if debit is not None:
        debit_id = resolve_account_or_exit(ctx, account_service, debit)
    credit_id = current.credit_account_id
    if credit is not None:
        credit_id = resolve_account_or_exit(ctx, account_service, credit)

    entry_date, entry_amount = _parse_entry_inputs(
        ctx,
        date if date is not None else current.entry_date.isoformat(),
        amount if amount is not None else str(current.amount),
    )

    try:
        entry_service.update_entry(
            entry_id=entry_id,
            shop_id=shop_id,
            entry_date=entry_date,
            description=description if description is not None else current.description,
            debit_account_id=debit_id,
            credit_account_id=credit_id,
            amount=entry_amount,
            reference=reference if reference is not None else current.reference,
            payment_method=(
                payment_method if payment_method is not None else current.payment_method
            ),
        )
        click.echo(f"Updated entry {entry_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@entry_group.command("delete")
@click.argument("entry_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_entry(ctx, entry_id: int, yes: bool) -> None:
    """Delete a journal entry.

    All balances that included the entry change immediately.
    """
    entry_service = EntryService(ctx.obj["db"])
    shop_id = ctx.obj["shop_id"]

    try:
        entry = entry_service.require_entry(entry_id, shop_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Are you sure you want to delete entry {entry_id} ({entry.description})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        entry_service.delete_entry(entry_id, shop_id)
        click.echo(f"Deleted entry {entry_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
