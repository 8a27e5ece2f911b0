# File: src/utxo_gateway/api/dependencies.py
import json
from typing import Any

from fastapi import Request

from ..exceptions import ValidationError
from ..explorer.api import GatewayAPI
from ..monitoring.metrics import GatewayMetrics


def get_gateway(request: Request) -> GatewayAPI:
    return request.app.state.gateway


def get_metrics(request: Request) -> GatewayMetrics:
    return request.app.state.metrics


async def json_body(request: Request) -> Any:
    """Raw JSON body, or None when the request has no body."""
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError:
        raise ValidationError("Request body is not valid JSON", "INVALID_BODY")
