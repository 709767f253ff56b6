"""Domain layer for shopledger application."""

# Services are imported lazily: the database layer imports domain.entities,
# and eager service imports here would import the database layer back.
_EXPORTS = {
    "AccountService": "shopledger.domain.account",
    "EntryService": "shopledger.domain.entry",
    "BalanceService": "shopledger.domain.balance",
    "BalanceCache": "shopledger.domain.balance",
    "calculate_all_account_balances": "shopledger.domain.balance",
    "ReportService": "shopledger.domain.report",
    "PostingService": "shopledger.domain.posting",
}

__all__ = list(_EXPORTS)


def __getattr__(name):
    if name in _EXPORTS:
        from importlib import import_module

        return getattr(import_module(_EXPORTS[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
