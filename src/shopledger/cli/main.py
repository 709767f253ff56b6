"""Main CLI entry point."""

import logging

import click
from shopledger.database.factories import create_sqlite_database
from shopledger.logging_config import setup_logging

# Import and register all commands at module level
from shopledger.cli.commands import account, entry, post, report


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides SHOPLEDGER_DB_PATH environment variable)",
    envvar="SHOPLEDGER_DB_PATH",
)
@click.option(
    "--shop",
    "shop_id",
    default="default",
    show_default=True,
    help="Shop whose ledger to use (overrides SHOPLEDGER_SHOP_ID environment variable)",
    envvar="SHOPLEDGER_SHOP_ID",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, shop_id: str, verbose: bool):
    """Shopledger - double-entry ledger for retail shops.

    Keep a chart of accounts and a journal of debit/credit entries per shop,
    post sales, refunds and voids, and print balances and closing reports.
    """
    ctx.ensure_object(dict)
    setup_logging(logging.DEBUG if verbose else logging.WARNING)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["shop_id"] = shop_id
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
entry.register_commands(cli)
post.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
