# File: src/utxo_gateway/explorer/history.py
from typing import List, Optional, Sequence

from .models import HistoryEntry, LedgerTransaction, ResolvedBounds
from ..storage.ledger import LedgerBackend

# the ledger index only holds confirmed transactions
SETTLED_TX_STATE = "Successful"


class TransactionHistoryAssembler:
    def __init__(self, ledger: LedgerBackend, max_results: int):
        self.ledger = ledger
        self.max_results = max_results

    def effective_limit(self, requested: Optional[int]) -> int:
        if requested is None:
            return self.max_results
        return min(requested, self.max_results)

    async def assemble(
        self,
        addresses: Sequence[str],
        bounds: ResolvedBounds,
        requested_limit: Optional[int] = None
    ) -> List[HistoryEntry]:
        """Fetch one history page for the given addresses within the resolved bounds."""
        limit = self.effective_limit(requested_limit)
        txs = await self.ledger.transaction_history(addresses, bounds, limit)
        txs = sorted(txs, key=lambda tx: (tx.block.number, tx.tx_index))[:limit]
        return [self._summarize(tx) for tx in txs]

    @staticmethod
    def _summarize(tx: LedgerTransaction) -> HistoryEntry:
        return HistoryEntry(
            hash=tx.hash,
            tx_ordinal=tx.tx_index,
            tx_state=SETTLED_TX_STATE,
            last_update=tx.included_at,
            block_num=tx.block.number,
            block_hash=tx.block.hash,
            time=tx.included_at,
            epoch=tx.block.epoch,
            slot=tx.block.slot,
            inputs=tx.inputs,
            outputs=tx.outputs
        )
