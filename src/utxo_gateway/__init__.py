"""Read-only query gateway over an indexed UTXO ledger."""

__version__ = "0.1.0"
