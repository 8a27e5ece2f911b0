# tests/conftest.py
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest

from utxo_gateway.config import GatewaySettings
from utxo_gateway.exceptions import UpstreamError
from utxo_gateway.explorer.models import (
    BlockReference,
    LedgerTransaction,
    ResolvedBounds,
    TransactionReference,
    Utxo,
)
from utxo_gateway.utils.result import Found, LookupFailed, NoValue


def make_block(number: int, hash: Optional[str] = None, epoch: int = 200, slot: int = None) -> BlockReference:
    return BlockReference(
        hash=hash or f"{number:064x}",
        number=number,
        epoch=epoch,
        slot=number * 20 if slot is None else slot
    )


def make_tx(hash: str, block: BlockReference, tx_index: int = 0, address: str = "addr1") -> LedgerTransaction:
    return LedgerTransaction(
        hash=hash,
        block=block,
        tx_index=tx_index,
        included_at=datetime(2021, 3, 1, tzinfo=timezone.utc),
        inputs=[{"address": "addr_src", "amount": "1000000", "txHash": "00" * 32, "index": 0}],
        outputs=[{"address": address, "amount": "1000000"}]
    )


class FakeLedger:
    """In-memory LedgerBackend"""

    def __init__(self):
        self.tip = make_block(100)
        self.blocks: Dict[str, BlockReference] = {}
        self.txs: Dict[str, TransactionReference] = {}
        self.history: List[LedgerTransaction] = []
        self.utxos: List[Utxo] = []
        self.used: List[str] = []
        self.bodies: Dict[str, str] = {}
        self.broken_lookups = set()
        self.fail_queries = False
        self.calls = []

    def add_block(self, block: BlockReference) -> BlockReference:
        self.blocks[block.hash] = block
        return block

    def add_tx(self, tx_hash: str, block: BlockReference, tx_index: int = 0) -> TransactionReference:
        tx = TransactionReference(hash=tx_hash, block=block, tx_index=tx_index)
        self.txs[tx_hash] = tx
        return tx

    async def best_block(self) -> BlockReference:
        self.calls.append(("best_block",))
        if self.fail_queries:
            raise UpstreamError("connection refused")
        return self.tip

    async def block_by_hash(self, block_hash):
        self.calls.append(("block_by_hash", block_hash))
        if not block_hash:
            return NoValue()
        if block_hash in self.broken_lookups or block_hash not in self.blocks:
            return LookupFailed(f"Block {block_hash} not found")
        return Found(self.blocks[block_hash])

    async def transaction_by_hash(self, tx_hash):
        self.calls.append(("transaction_by_hash", tx_hash))
        if not tx_hash:
            return NoValue()
        if tx_hash in self.broken_lookups or tx_hash not in self.txs:
            return LookupFailed(f"Transaction {tx_hash} not found")
        return Found(self.txs[tx_hash])

    async def transaction_history(self, addresses, bounds: ResolvedBounds, limit: int):
        self.calls.append(("transaction_history", list(addresses), bounds, limit))
        if self.fail_queries:
            raise UpstreamError("statement timeout")
        return list(self.history)

    async def utxos_for_addresses(self, addresses):
        self.calls.append(("utxos_for_addresses", list(addresses)))
        if self.fail_queries:
            raise UpstreamError("statement timeout")
        return [u for u in self.utxos if u.receiver in addresses]

    async def utxo_sum_for_addresses(self, addresses):
        self.calls.append(("utxo_sum_for_addresses", list(addresses)))
        return sum(int(u.amount) for u in self.utxos if u.receiver in addresses)

    async def used_addresses(self, addresses):
        self.calls.append(("used_addresses", list(addresses)))
        return [a for a in self.used if a in addresses]

    async def tx_bodies(self, tx_hashes):
        self.calls.append(("tx_bodies", list(tx_hashes)))
        return {h: self.bodies[h] for h in tx_hashes if h in self.bodies}

    def backend_calls(self):
        return [call for call in self.calls if call[0] != "best_block"]


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return GatewaySettings.defaults(
        address_request_limit=50,
        api_response_limit=50,
        txs_hashes_request_limit=5,
        stale_after_seconds=120,
        poll_interval_seconds=3600
    )
