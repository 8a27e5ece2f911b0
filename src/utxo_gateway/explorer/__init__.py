# File: src/utxo_gateway/explorer/__init__.py
from .models import (
    BestBlock,
    BlockReference,
    HistoryCursor,
    HistoryEntry,
    HistoryQuery,
    LedgerTransaction,
    ResolvedBounds,
    TransactionReference,
    Utxo,
    UtxoSum,
)

__all__ = [
    'BestBlock',
    'BlockReference',
    'HistoryCursor',
    'HistoryEntry',
    'HistoryQuery',
    'LedgerTransaction',
    'ResolvedBounds',
    'TransactionReference',
    'Utxo',
    'UtxoSum',
]
