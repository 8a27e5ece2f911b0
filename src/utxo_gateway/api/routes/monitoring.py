# File: src/utxo_gateway/api/routes/monitoring.py
from fastapi import APIRouter, Depends
from fastapi.responses import Response

from ...explorer.api import GatewayAPI
from ...explorer.models import ImporterHealth
from ...monitoring.metrics import GatewayMetrics
from ..dependencies import get_gateway, get_metrics

router = APIRouter()

@router.get("/v2/importerhealthcheck", response_model=ImporterHealth)
async def importer_health(gateway: GatewayAPI = Depends(get_gateway)):
    return gateway.importer_health()

@router.get("/metrics")
async def metrics(collector: GatewayMetrics = Depends(get_metrics)):
    return Response(content=collector.render(), media_type=GatewayMetrics.CONTENT_TYPE)
