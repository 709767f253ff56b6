"""Commands posting sales, refunds and voids to the ledger."""

import click
from shopledger.cli.error_handling import handle_domain_error
from shopledger.domain.errors import DomainError
from shopledger.domain.posting import PostingService
from shopledger.utils.amount_parser import parse_amount
from shopledger.utils.date_parser import parse_date


@click.group()
def post_group():
    """Post point-of-sale events as journal entries."""
    pass


def _parse_optional_date(ctx, value: str | None):
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


def _parse_amount_or_exit(ctx, value: str):
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


def _report_created(entry_ids: list[int]) -> None:
    ids = ", ".join(str(entry_id) for entry_id in entry_ids)
    click.echo(f"Posted {len(entry_ids)} entr{'ies' if len(entry_ids) != 1 else 'y'} ({ids})")


@post_group.command("sale")
@click.option("--amount", required=True, help="Gross sale amount before discount")
@click.option("--discount", default="0", show_default=True, help="Discount granted")
@click.option("--cost", default="0", show_default=True, help="Cost price of the goods sold")
@click.option("--payment-method", default="Cash", show_default=True, help="Payment method")
@click.option("--transaction-id", help="Receipt transaction number")
@click.option("--date", help="Sale date (defaults to today)")
@click.option("--loan", is_flag=True, help="Sale on credit")
@click.pass_context
def post_sale(ctx, amount, discount, cost, payment_method, transaction_id, date, loan):
    """Post a sale.

    Examples:
        shopledger post sale --amount 120 --discount 20 --payment-method UPI --transaction-id T-1001
    """
    service = PostingService(ctx.obj["db"])
    try:
        entry_ids = service.post_sale(
            shop_id=ctx.obj["shop_id"],
            total_amount=_parse_amount_or_exit(ctx, amount),
            discount=_parse_amount_or_exit(ctx, discount),
            payment_method=payment_method,
            transaction_id=transaction_id,
            cost_of_goods=_parse_amount_or_exit(ctx, cost),
            entry_date=_parse_optional_date(ctx, date),
            is_loan=loan,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    _report_created(entry_ids)


@post_group.command("refund")
@click.option("--amount", required=True, help="Refunded amount")
@click.option("--payment-method", default="Cash", show_default=True, help="Payment method refunded to")
@click.option("--transaction-id", help="Original receipt transaction number")
@click.option("--reason", help="Refund reason")
@click.option("--date", help="Refund date (defaults to today)")
@click.pass_context
def post_refund(ctx, amount, payment_method, transaction_id, reason, date):
    """Post a refund."""
    service = PostingService(ctx.obj["db"])
    try:
        entry_ids = service.post_refund(
            shop_id=ctx.obj["shop_id"],
            refund_amount=_parse_amount_or_exit(ctx, amount),
            payment_method=payment_method,
            transaction_id=transaction_id,
            reason=reason,
            entry_date=_parse_optional_date(ctx, date),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    _report_created(entry_ids)


@post_group.command("void")
@click.option("--amount", required=True, help="Voided amount")
@click.option("--payment-method", default="Cash", show_default=True, help="Payment method of the voided sale")
@click.option("--transaction-id", help="Voided receipt transaction number")
@click.option("--reason", help="Void reason")
@click.option("--date", help="Void date (defaults to today)")
@click.pass_context
def post_void(ctx, amount, payment_method, transaction_id, reason, date):
    """Post a voided sale."""
    service = PostingService(ctx.obj["db"])
    try:
        entry_ids = service.post_void(
            shop_id=ctx.obj["shop_id"],
            void_amount=_parse_amount_or_exit(ctx, amount),
            payment_method=payment_method,
            transaction_id=transaction_id,
            reason=reason,
            entry_date=_parse_optional_date(ctx, date),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    _report_created(entry_ids)


def register_commands(cli):
    """Register posting commands with main CLI."""
    cli.add_command(post_group, name="post")
