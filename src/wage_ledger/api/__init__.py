"""HTTP API for the wage ledger."""
