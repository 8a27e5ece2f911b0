# File: src/utxo_gateway/api/routes/explorer.py
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from ...explorer.api import GatewayAPI
from ...explorer.models import BestBlock, HistoryEntry, Utxo, UtxoSum
from ..dependencies import get_gateway, json_body

router = APIRouter()

@router.get("/v2/bestblock", response_model=BestBlock)
async def best_block(gateway: GatewayAPI = Depends(get_gateway)):
    return await gateway.best_block()

@router.post("/v2/addresses/filterUsed", response_model=List[str])
async def filter_used_addresses(body: Any = Depends(json_body), gateway: GatewayAPI = Depends(get_gateway)):
    return await gateway.filter_used_addresses(body)

@router.post("/txs/utxoForAddresses", response_model=List[Utxo])
async def utxo_for_addresses(body: Any = Depends(json_body), gateway: GatewayAPI = Depends(get_gateway)):
    return await gateway.utxo_for_addresses(body)

@router.post("/txs/utxoSumForAddresses", response_model=UtxoSum)
async def utxo_sum_for_addresses(body: Any = Depends(json_body), gateway: GatewayAPI = Depends(get_gateway)):
    return await gateway.utxo_sum_for_addresses(body)

@router.post("/v2/txs/history", response_model=List[HistoryEntry])
async def tx_history(body: Any = Depends(json_body), gateway: GatewayAPI = Depends(get_gateway)):
    return await gateway.tx_history(body)

@router.post("/txs/txBodies", response_model=Dict[str, str])
async def tx_bodies(body: Any = Depends(json_body), gateway: GatewayAPI = Depends(get_gateway)):
    return await gateway.tx_bodies(body)
