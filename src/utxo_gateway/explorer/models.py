# File: src/utxo_gateway/explorer/models.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Any, Dict, List, Optional

class BlockReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    hash: str
    number: int
    epoch: Optional[int] = None
    slot: Optional[int] = None

class TransactionReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    hash: str
    block: BlockReference
    tx_index: int
    included_at: Optional[datetime] = None

class LedgerTransaction(TransactionReference):
    """A transaction row as read from the ledger index."""
    inputs: List[Dict[str, Any]] = Field(default_factory=list)
    outputs: List[Dict[str, Any]] = Field(default_factory=list)

class HistoryCursor(BaseModel):
    tx: str
    block: str

class HistoryQuery(BaseModel):
    addresses: List[str]
    after: Optional[HistoryCursor] = None
    until_block: str
    limit: Optional[int] = None

class ResolvedBounds(BaseModel):
    after_block_number: Optional[int] = None
    after_tx_index: Optional[int] = None
    after_block_reference: Optional[BlockReference] = None
    until_block_number: Optional[int] = None

class Utxo(BaseModel):
    utxo_id: str
    tx_hash: str
    tx_index: int
    receiver: str
    amount: str
    block_num: int

class BestBlock(BaseModel):
    epoch: int
    slot: int
    hash: str
    height: int

class UtxoSum(BaseModel):
    sum: int

class HistoryEntry(BaseModel):
    hash: str
    tx_ordinal: int
    tx_state: str = "Successful"
    last_update: Optional[datetime] = None
    block_num: int
    block_hash: str
    time: Optional[datetime] = None
    epoch: Optional[int] = None
    slot: Optional[int] = None
    inputs: List[Dict[str, Any]]
    outputs: List[Dict[str, Any]]

class ImporterHealth(BaseModel):
    code: int
    message: str

class ServerStatus(BaseModel):
    isServerOk: bool
    isMaintenance: bool
