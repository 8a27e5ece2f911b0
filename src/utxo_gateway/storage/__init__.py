# File: src/utxo_gateway/storage/__init__.py
from .database import Database
from .ledger import LedgerBackend, LedgerStore

__all__ = ['Database', 'LedgerBackend', 'LedgerStore']
