# src/utxo_gateway/storage/ledger.py
"""Read queries against the ledger index (cardano-db-sync schema).

Reference lookups return a ``LookupResult`` so callers can tell an absent
reference (``NoValue``) apart from one that cannot be located or a failing
backend (``LookupFailed``). Every other query raises ``UpstreamError``.
"""
import logging
from typing import Dict, List, Optional, Protocol, Sequence

from ..exceptions import DatabaseError, UpstreamError
from ..explorer.models import (
    BlockReference,
    LedgerTransaction,
    ResolvedBounds,
    TransactionReference,
    Utxo,
)
from ..utils.result import Found, LookupFailed, LookupResult, NoValue
from .database import Database

logger = logging.getLogger(__name__)

BEST_BLOCK_QUERY = """
    SELECT encode(block.hash, 'hex') AS hash,
           block.block_no,
           block.epoch_no,
           block.epoch_slot_no
    FROM block
    WHERE block.block_no IS NOT NULL
    ORDER BY block.block_no DESC
    LIMIT 1
"""

BLOCK_BY_HASH_QUERY = """
    SELECT encode(block.hash, 'hex') AS hash,
           block.block_no,
           block.epoch_no,
           block.epoch_slot_no
    FROM block
    WHERE block.hash = decode($1, 'hex')
      AND block.block_no IS NOT NULL
"""

TX_BY_HASH_QUERY = """
    SELECT encode(tx.hash, 'hex') AS hash,
           tx.block_index,
           encode(block.hash, 'hex') AS block_hash,
           block.block_no,
           block.epoch_no,
           block.epoch_slot_no,
           block.time
    FROM tx
    JOIN block ON block.id = tx.block_id
    WHERE tx.hash = decode($1, 'hex')
"""

HISTORY_QUERY = """
    SELECT encode(tx.hash, 'hex') AS hash,
           tx.block_index,
           encode(block.hash, 'hex') AS block_hash,
           block.block_no,
           block.epoch_no,
           block.epoch_slot_no,
           block.time,
           COALESCE((
               SELECT json_agg(json_build_object(
                          'address', src.address,
                          'amount', src.value::text,
                          'txHash', encode(src_tx.hash, 'hex'),
                          'index', tx_in.tx_out_index
                      ) ORDER BY tx_in.id)
               FROM tx_in
               JOIN tx_out src ON src.tx_id = tx_in.tx_out_id
                              AND src.index = tx_in.tx_out_index
               JOIN tx src_tx ON src_tx.id = src.tx_id
               WHERE tx_in.tx_in_id = tx.id
           ), '[]'::json) AS inputs,
           COALESCE((
               SELECT json_agg(json_build_object(
                          'address', tx_out.address,
                          'amount', tx_out.value::text
                      ) ORDER BY tx_out.index)
               FROM tx_out
               WHERE tx_out.tx_id = tx.id
           ), '[]'::json) AS outputs
    FROM tx
    JOIN block ON block.id = tx.block_id
    WHERE tx.id IN (
        SELECT tx_out.tx_id
        FROM tx_out
        WHERE tx_out.address = ANY($1::text[])
        UNION
        SELECT tx_in.tx_in_id
        FROM tx_in
        JOIN tx_out src ON src.tx_id = tx_in.tx_out_id
                       AND src.index = tx_in.tx_out_index
        WHERE src.address = ANY($1::text[])
    )
      AND ($2::bigint IS NULL
           OR block.block_no > $2::bigint
           OR (block.block_no = $2::bigint AND tx.block_index > $3::bigint))
      AND ($4::bigint IS NULL OR block.block_no <= $4::bigint)
    ORDER BY block.block_no ASC, tx.block_index ASC
    LIMIT $5
"""

UNSPENT_OUTPUTS = """
    FROM tx_out
    JOIN tx ON tx.id = tx_out.tx_id
    JOIN block ON block.id = tx.block_id
    LEFT JOIN tx_in ON tx_in.tx_out_id = tx_out.tx_id
                   AND tx_in.tx_out_index = tx_out.index
    WHERE tx_in.id IS NULL
      AND tx_out.address = ANY($1::text[])
"""

UTXO_QUERY = """
    SELECT encode(tx.hash, 'hex') AS tx_hash,
           tx_out.index AS tx_index,
           tx_out.address AS receiver,
           tx_out.value::text AS amount,
           block.block_no AS block_num
""" + UNSPENT_OUTPUTS + """
    ORDER BY block.block_no, tx.block_index, tx_out.index
"""

UTXO_SUM_QUERY = "SELECT COALESCE(SUM(tx_out.value), 0) AS total" + UNSPENT_OUTPUTS

USED_ADDRESSES_QUERY = """
    SELECT DISTINCT tx_out.address
    FROM tx_out
    WHERE tx_out.address = ANY($1::text[])
"""

TX_BODIES_QUERY = """
    SELECT encode(tx.hash, 'hex') AS hash,
           encode(tx_cbor.bytes, 'hex') AS body
    FROM tx
    JOIN tx_cbor ON tx_cbor.tx_id = tx.id
    WHERE tx.hash = ANY($1::bytea[])
"""


class LedgerBackend(Protocol):
    """What the gateway needs from the ledger index."""

    async def best_block(self) -> BlockReference: ...

    async def block_by_hash(self, block_hash: Optional[str]) -> LookupResult[BlockReference]: ...

    async def transaction_by_hash(self, tx_hash: Optional[str]) -> LookupResult[TransactionReference]: ...

    async def transaction_history(
        self, addresses: Sequence[str], bounds: ResolvedBounds, limit: int
    ) -> List[LedgerTransaction]: ...

    async def utxos_for_addresses(self, addresses: Sequence[str]) -> List[Utxo]: ...

    async def utxo_sum_for_addresses(self, addresses: Sequence[str]) -> int: ...

    async def used_addresses(self, addresses: Sequence[str]) -> List[str]: ...

    async def tx_bodies(self, tx_hashes: Sequence[str]) -> Dict[str, str]: ...


def _block_from_row(row, hash_column: str = "hash") -> BlockReference:
    return BlockReference(
        hash=row[hash_column],
        number=row["block_no"],
        epoch=row["epoch_no"],
        slot=row["epoch_slot_no"]
    )


class LedgerStore:
    """LedgerBackend over a Postgres ledger index"""

    def __init__(self, db: Database):
        self.db = db

    async def best_block(self) -> BlockReference:
        try:
            row = await self.db.fetchrow(BEST_BLOCK_QUERY)
        except DatabaseError as e:
            raise UpstreamError(str(e))
        if row is None:
            raise UpstreamError("Ledger index has no blocks")
        return _block_from_row(row)

    async def block_by_hash(self, block_hash: Optional[str]) -> LookupResult[BlockReference]:
        if not block_hash:
            return NoValue()
        try:
            row = await self.db.fetchrow(BLOCK_BY_HASH_QUERY, block_hash)
        except DatabaseError as e:
            logger.warning(f"Block lookup for {block_hash} failed: {str(e)}")
            return LookupFailed(str(e))
        if row is None:
            return LookupFailed(f"Block {block_hash} not found")
        return Found(_block_from_row(row))

    async def transaction_by_hash(self, tx_hash: Optional[str]) -> LookupResult[TransactionReference]:
        if not tx_hash:
            return NoValue()
        try:
            row = await self.db.fetchrow(TX_BY_HASH_QUERY, tx_hash)
        except DatabaseError as e:
            logger.warning(f"Transaction lookup for {tx_hash} failed: {str(e)}")
            return LookupFailed(str(e))
        if row is None:
            return LookupFailed(f"Transaction {tx_hash} not found")
        return Found(TransactionReference(
            hash=row["hash"],
            block=_block_from_row(row, "block_hash"),
            tx_index=row["block_index"],
            included_at=row["time"]
        ))

    async def transaction_history(
        self, addresses: Sequence[str], bounds: ResolvedBounds, limit: int
    ) -> List[LedgerTransaction]:
        try:
            rows = await self.db.fetch(
                HISTORY_QUERY,
                list(addresses),
                bounds.after_block_number,
                bounds.after_tx_index,
                bounds.until_block_number,
                limit
            )
        except DatabaseError as e:
            raise UpstreamError(str(e))
        return [
            LedgerTransaction(
                hash=row["hash"],
                block=_block_from_row(row, "block_hash"),
                tx_index=row["block_index"],
                included_at=row["time"],
                inputs=row["inputs"],
                outputs=row["outputs"]
            )
            for row in rows
        ]

    async def utxos_for_addresses(self, addresses: Sequence[str]) -> List[Utxo]:
        try:
            rows = await self.db.fetch(UTXO_QUERY, list(addresses))
        except DatabaseError as e:
            raise UpstreamError(str(e))
        return [
            Utxo(
                utxo_id=f"{row['tx_hash']}:{row['tx_index']}",
                tx_hash=row["tx_hash"],
                tx_index=row["tx_index"],
                receiver=row["receiver"],
                amount=row["amount"],
                block_num=row["block_num"]
            )
            for row in rows
        ]

    async def utxo_sum_for_addresses(self, addresses: Sequence[str]) -> int:
        try:
            total = await self.db.fetchval(UTXO_SUM_QUERY, list(addresses))
        except DatabaseError as e:
            raise UpstreamError(str(e))
        return int(total or 0)

    async def used_addresses(self, addresses: Sequence[str]) -> List[str]:
        try:
            rows = await self.db.fetch(USED_ADDRESSES_QUERY, list(addresses))
        except DatabaseError as e:
            raise UpstreamError(str(e))
        return [row["address"] for row in rows]

    async def tx_bodies(self, tx_hashes: Sequence[str]) -> Dict[str, str]:
        try:
            rows = await self.db.fetch(
                TX_BODIES_QUERY,
                [bytes.fromhex(tx_hash) for tx_hash in tx_hashes]
            )
        except DatabaseError as e:
            raise UpstreamError(str(e))
        return {row["hash"]: row["body"] for row in rows}
