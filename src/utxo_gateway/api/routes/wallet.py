# File: src/utxo_gateway/api/routes/wallet.py
from typing import Any, Optional

from fastapi import APIRouter, Depends, Header

from ...explorer.api import GatewayAPI
from ...explorer.models import ServerStatus
from ..dependencies import get_gateway, json_body

router = APIRouter()

@router.post("/txs/signed")
async def submit_signed_tx(body: Any = Depends(json_body), gateway: GatewayAPI = Depends(get_gateway)):
    return await gateway.submit_signed_tx(body)

@router.get("/status", response_model=ServerStatus)
async def server_status(
    client_version: Optional[str] = Header(None, alias="client-version"),
    gateway: GatewayAPI = Depends(get_gateway)
):
    return gateway.server_status(client_version)
