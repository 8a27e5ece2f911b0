# tests/test_ledger_store.py
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import asyncpg
import pytest

from utxo_gateway.exceptions import DatabaseError, UpstreamError
from utxo_gateway.explorer.models import ResolvedBounds
from utxo_gateway.storage.database import Database
from utxo_gateway.storage.ledger import (
    BLOCK_BY_HASH_QUERY,
    HISTORY_QUERY,
    TX_BODIES_QUERY,
    LedgerStore,
)
from utxo_gateway.utils.result import Found, LookupFailed, NoValue

BLOCK_ROW = {"hash": "cafe01", "block_no": 90, "epoch_no": 210, "epoch_slot_no": 1234}


class FakeDatabase:
    """Answers every query with canned rows and records what was asked"""

    def __init__(self, rows=None, row=None, value=None, error=None):
        self.rows = rows or []
        self.row = row
        self.value = value
        self.error = error
        self.queries = []

    async def fetch(self, query, *args):
        self.queries.append((query, args))
        if self.error:
            raise self.error
        return self.rows

    async def fetchrow(self, query, *args):
        self.queries.append((query, args))
        if self.error:
            raise self.error
        return self.row

    async def fetchval(self, query, *args):
        self.queries.append((query, args))
        if self.error:
            raise self.error
        return self.value


class TestLookups:
    @pytest.mark.asyncio
    async def test_best_block(self):
        store = LedgerStore(FakeDatabase(row=BLOCK_ROW))
        tip = await store.best_block()
        assert (tip.hash, tip.number, tip.epoch, tip.slot) == ("cafe01", 90, 210, 1234)

    @pytest.mark.asyncio
    async def test_best_block_on_empty_index(self):
        with pytest.raises(UpstreamError):
            await LedgerStore(FakeDatabase(row=None)).best_block()

    @pytest.mark.asyncio
    async def test_best_block_database_failure(self):
        with pytest.raises(UpstreamError):
            await LedgerStore(FakeDatabase(error=DatabaseError("down"))).best_block()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("block_hash", [None, ""])
    async def test_block_lookup_without_hash(self, block_hash):
        db = FakeDatabase(row=BLOCK_ROW)
        assert await LedgerStore(db).block_by_hash(block_hash) == NoValue()
        assert db.queries == []

    @pytest.mark.asyncio
    async def test_block_found(self):
        db = FakeDatabase(row=BLOCK_ROW)
        result = await LedgerStore(db).block_by_hash("cafe01")
        assert isinstance(result, Found)
        assert result.value.number == 90
        assert db.queries == [(BLOCK_BY_HASH_QUERY, ("cafe01",))]

    @pytest.mark.asyncio
    async def test_block_missing(self):
        result = await LedgerStore(FakeDatabase(row=None)).block_by_hash("cafe01")
        assert isinstance(result, LookupFailed)

    @pytest.mark.asyncio
    async def test_lookup_database_failure_is_lookup_failed(self):
        store = LedgerStore(FakeDatabase(error=DatabaseError("timeout")))
        assert isinstance(await store.block_by_hash("cafe01"), LookupFailed)
        assert isinstance(await store.transaction_by_hash("deadbeef"), LookupFailed)

    @pytest.mark.asyncio
    async def test_transaction_found(self):
        row = {
            "hash": "deadbeef",
            "block_index": 3,
            "block_hash": "feedface",
            "block_no": 42,
            "epoch_no": 210,
            "epoch_slot_no": 77,
            "time": datetime(2021, 3, 1, tzinfo=timezone.utc),
        }
        result = await LedgerStore(FakeDatabase(row=row)).transaction_by_hash("deadbeef")
        assert isinstance(result, Found)
        assert result.value.block.hash == "feedface"
        assert result.value.block.number == 42
        assert result.value.tx_index == 3

    @pytest.mark.asyncio
    async def test_transaction_without_hash(self):
        assert await LedgerStore(FakeDatabase()).transaction_by_hash(None) == NoValue()


class TestQueries:
    @pytest.mark.asyncio
    async def test_history_passes_bounds(self):
        db = FakeDatabase(rows=[{
            "hash": "deadbeef",
            "block_index": 0,
            "block_hash": "feedface",
            "block_no": 42,
            "epoch_no": 210,
            "epoch_slot_no": 77,
            "time": None,
            "inputs": [],
            "outputs": [{"address": "addr1", "amount": "5"}],
        }])
        bounds = ResolvedBounds(after_block_number=40, after_tx_index=1, until_block_number=90)

        txs = await LedgerStore(db).transaction_history(("addr1",), bounds, 20)

        assert db.queries == [(HISTORY_QUERY, (["addr1"], 40, 1, 90, 20))]
        assert txs[0].outputs == [{"address": "addr1", "amount": "5"}]

    @pytest.mark.asyncio
    async def test_history_failure(self):
        store = LedgerStore(FakeDatabase(error=DatabaseError("timeout")))
        with pytest.raises(UpstreamError):
            await store.transaction_history(["addr1"], ResolvedBounds(), 20)

    @pytest.mark.asyncio
    async def test_utxos(self):
        db = FakeDatabase(rows=[{
            "tx_hash": "ab" * 32,
            "tx_index": 1,
            "receiver": "addr1",
            "amount": "1500000",
            "block_num": 42,
        }])
        [utxo] = await LedgerStore(db).utxos_for_addresses(["addr1"])
        assert utxo.utxo_id == f"{'ab' * 32}:1"
        assert utxo.amount == "1500000"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value,expected", [(None, 0), (0, 0), (1500000, 1500000)])
    async def test_utxo_sum(self, value, expected):
        assert await LedgerStore(FakeDatabase(value=value)).utxo_sum_for_addresses(["addr1"]) == expected

    @pytest.mark.asyncio
    async def test_used_addresses(self):
        db = FakeDatabase(rows=[{"address": "addr2"}])
        assert await LedgerStore(db).used_addresses(["addr1", "addr2"]) == ["addr2"]

    @pytest.mark.asyncio
    async def test_tx_bodies_sends_binary_hashes(self):
        db = FakeDatabase(rows=[{"hash": "abcd", "body": "84a4"}])

        bodies = await LedgerStore(db).tx_bodies(["abcd"])

        assert bodies == {"abcd": "84a4"}
        assert db.queries == [(TX_BODIES_QUERY, ([b"\xab\xcd"],))]


class FakeConnection:
    def __init__(self, error=None):
        self.error = error

    async def fetch(self, query, *args):
        if self.error:
            raise self.error
        return [{"address": "addr1"}]

    async def fetchval(self, query, *args):
        return 7


class FakePool:
    def __init__(self, connection):
        self.connection = connection
        self.closed = False

    @asynccontextmanager
    async def acquire(self):
        yield self.connection

    async def close(self):
        self.closed = True


class TestDatabase:
    @pytest.mark.asyncio
    async def test_not_connected(self, settings):
        with pytest.raises(DatabaseError):
            await Database(settings).fetch("SELECT 1")

    @pytest.mark.asyncio
    async def test_queries_go_through_pool(self, settings):
        db = Database(settings)
        db._pool = FakePool(FakeConnection())

        assert await db.fetch("SELECT address FROM tx_out") == [{"address": "addr1"}]
        assert await db.fetchval("SELECT 7") == 7

    @pytest.mark.asyncio
    async def test_driver_errors_are_wrapped(self, settings):
        db = Database(settings)
        db._pool = FakePool(FakeConnection(error=asyncpg.InterfaceError("connection is closed")))

        with pytest.raises(DatabaseError) as exc_info:
            await db.fetch("SELECT 1")

        assert "connection is closed" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_close_releases_pool(self, settings):
        db = Database(settings)
        pool = FakePool(FakeConnection())
        db._pool = pool

        await db.close()

        assert pool.closed
        with pytest.raises(DatabaseError):
            _ = db.pool
