"""Double-entry ledger and balance engine for retail shops."""

__version__ = "0.1.0"


# The CLI pulls in click and the database layer; load it on first access only
def __getattr__(name):
    if name == "main":
        from shopledger.cli.main import main

        return main
    raise AttributeError(f"module 'shopledger' has no attribute '{name}'")
