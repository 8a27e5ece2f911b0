# File: src/utxo_gateway/api/errors.py
"""The single fault boundary for every route."""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..exceptions import (
    GatewayError,
    HealthError,
    ReferenceConsistencyError,
    UpstreamError,
    ValidationError,
)

logger = logging.getLogger(__name__)

GENERIC_MESSAGES = {
    ValidationError: "Invalid request",
    ReferenceConsistencyError: "Pagination reference no longer matches the chain, restart pagination",
    UpstreamError: "Upstream service unavailable",
    HealthError: "Importer is not healthy",
}


def public_message(exc: GatewayError, expose_details: bool) -> str:
    if expose_details:
        return exc.message
    for error_type, message in GENERIC_MESSAGES.items():
        if isinstance(exc, error_type):
            return message
    return "Internal server error"


def error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


def install_error_handlers(app: FastAPI, expose_details: bool):
    @app.exception_handler(GatewayError)
    async def handle_gateway_error(request: Request, exc: GatewayError):
        logger.error(f"{request.method} {request.url.path} failed [{exc.code}]: {exc.message}")
        app.state.metrics.record_failure(exc.code)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.code, public_message(exc, expose_details))
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"{request.method} {request.url.path} failed unexpectedly")
        app.state.metrics.record_failure(GatewayError.code)
        message = str(exc) if expose_details else "Internal server error"
        return JSONResponse(status_code=500, content=error_body(GatewayError.code, message))
