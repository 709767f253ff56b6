"""Reporting commands."""

import click
from shopledger.cli.date_filters import resolve_cli_date_range
from shopledger.cli.error_handling import format_money, handle_domain_error
from shopledger.domain.entities import AccountType
from shopledger.domain.errors import DomainError
from shopledger.domain.report import ReportService
from shopledger.utils.date_parser import parse_date


@click.group()
def report_group():
    """Print accounting reports."""
    pass


def _echo_type_totals(totals, label: str) -> None:
    click.echo(f"\n{label}:")
    for account_type in AccountType:
        click.echo(f"  {account_type.value:10s} {format_money(totals[account_type]):>14s}")


@report_group.command("accounting")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--this-week", is_flag=True, help="Report on this week")
@click.option("--this-month", is_flag=True, help="Report on this month")
@click.option("--this-year", is_flag=True, help="Report on this year")
@click.option("--last-week", is_flag=True, help="Report on last week")
@click.option("--last-month", is_flag=True, help="Report on last month")
@click.option("--last-year", is_flag=True, help="Report on last year")
@click.pass_context
def accounting_report(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_week: bool,
    this_month: bool,
    this_year: bool,
    last_week: bool,
    last_month: bool,
    last_year: bool,
):
    """Show activity by account type and payment method for a period.

    Without dates the report covers the whole ledger.
    """
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-week": this_week,
            "this-month": this_month,
            "this-year": this_year,
            "last-week": last_week,
            "last-month": last_month,
            "last-year": last_year,
        },
    )

    try:
        report = ReportService(ctx.obj["db"]).get_accounting_report(
            ctx.obj["shop_id"], start_date=start, end_date=end
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Period: {start or 'beginning'} to {end or 'today'}")
    click.echo(f"Entries: {report.total_entries}")
    _echo_type_totals(report.totals_by_type, "Movement by account type")
    click.echo(f"\nNet income:   {format_money(report.net_income):>14s}")
    click.echo(f"Total equity: {format_money(report.total_equity):>14s}")

    if report.payment_method_breakdown:
        click.echo("\nPayment methods:")
        for method, summary in sorted(report.payment_method_breakdown.items()):
            click.echo(f"  {method:16s} {summary.count:5d} entries  {format_money(summary.total):>14s}")


@report_group.command("closing")
@click.option("--date", help="Closing date (defaults to today)")
@click.pass_context
def daily_closing(ctx, date: str | None):
    """Show the daily closing summary."""
    closing_date = None
    if date is not None:
        try:
            closing_date = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        closing = ReportService(ctx.obj["db"]).get_daily_closing(
            ctx.obj["shop_id"], closing_date
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Daily closing for {closing.closing_date}")
    click.echo("-" * 40)
    click.echo(f"Entries:   {closing.total_entries}")
    click.echo(f"Sales:     {closing.sales_count:4d}  {format_money(closing.sales_total):>14s}")
    click.echo(f"Refunds:   {closing.refunds_count:4d}  {format_money(closing.refunds_total):>14s}")
    click.echo(f"Voids:     {closing.voids_count:4d}  {format_money(closing.voids_total):>14s}")
    click.echo(f"Discounts:       {format_money(closing.discounts_total):>14s}")
    click.echo(f"Net sales:       {format_money(closing.net_sales):>14s}")

    if closing.payment_method_totals:
        click.echo("\nNet by payment method:")
        for method, total in sorted(closing.payment_method_totals.items()):
            click.echo(f"  {method:16s} {format_money(total):>14s}")


@report_group.command("stats")
@click.pass_context
def ledger_stats(ctx):
    """Show whole-ledger statistics."""
    try:
        stats = ReportService(ctx.obj["db"]).get_ledger_statistics(ctx.obj["shop_id"])
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Accounts: {stats.total_accounts}")
    click.echo(f"Entries:  {stats.total_entries}")
    _echo_type_totals(stats.totals_by_type, "Balances by account type")
    click.echo(f"\nNet income:   {format_money(stats.net_income):>14s}")
    click.echo(f"Total equity: {format_money(stats.total_equity):>14s}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
