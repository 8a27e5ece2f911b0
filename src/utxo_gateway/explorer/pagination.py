# File: src/utxo_gateway/explorer/pagination.py
import asyncio
import logging
from typing import Optional

from .models import BlockReference, HistoryQuery, ResolvedBounds, TransactionReference
from ..exceptions import ReferenceConsistencyError
from ..storage.ledger import LedgerBackend
from ..utils.result import Found, LookupFailed, LookupResult, NoValue, assert_never

logger = logging.getLogger(__name__)


async def _no_reference() -> NoValue:
    return NoValue()


class PaginationCursorResolver:
    """Resolves the history cursor and upper bound against the current chain.

    A cursor is accepted only while its transaction still sits in the block the
    client last saw it in; anything else means the chain reorganized between
    pages and the client has to restart pagination.
    """

    def __init__(self, ledger: LedgerBackend):
        self.ledger = ledger

    async def resolve(self, query: HistoryQuery) -> ResolvedBounds:
        if query.after is not None:
            after_lookup = self.ledger.transaction_by_hash(query.after.tx)
        else:
            after_lookup = _no_reference()
        until_result, after_result = await asyncio.gather(
            self.ledger.block_by_hash(query.until_block),
            after_lookup
        )

        # a moved cursor transaction is reported even when untilBlock also fails
        self._check_cursor_block(after_result, query)
        until_block = self._until_block(until_result)
        after_ref = self._after_reference(after_result)

        if after_ref is None:
            return ResolvedBounds(
                until_block_number=until_block.number if until_block else None
            )
        return ResolvedBounds(
            after_block_number=after_ref.block.number,
            after_tx_index=after_ref.tx_index,
            after_block_reference=after_ref.block,
            until_block_number=until_block.number if until_block else None
        )

    def _until_block(self, result: LookupResult[BlockReference]) -> Optional[BlockReference]:
        if isinstance(result, Found):
            return result.value
        if isinstance(result, NoValue):
            return None
        if isinstance(result, LookupFailed):
            logger.info(f"untilBlock could not be resolved: {result.message}")
            raise ReferenceConsistencyError(ReferenceConsistencyError.BEST_BLOCK_MISMATCH)
        assert_never(result)

    def _check_cursor_block(self, result: LookupResult[TransactionReference], query: HistoryQuery):
        if isinstance(result, Found) and result.value.block.hash != query.after.block:
            logger.info(
                f"Cursor tx {result.value.hash} is now in block "
                f"{result.value.block.hash}, client expected {query.after.block}"
            )
            raise ReferenceConsistencyError(ReferenceConsistencyError.BLOCK_MISMATCH)

    def _after_reference(self, result: LookupResult[TransactionReference]) -> Optional[TransactionReference]:
        if isinstance(result, Found):
            return result.value
        if isinstance(result, NoValue):
            return None
        if isinstance(result, LookupFailed):
            logger.info(f"after.tx could not be resolved: {result.message}")
            raise ReferenceConsistencyError(ReferenceConsistencyError.TX_NOT_FOUND)
        assert_never(result)
