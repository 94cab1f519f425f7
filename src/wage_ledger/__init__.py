"""Site wage ledger: attendance to approved wages and project ledgers."""

__version__ = "0.1.0"
