# File: src/utxo_gateway/api/server.py
import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import GatewaySettings
from ..explorer.api import GatewayAPI
from ..explorer.relay import SignedTxRelay
from ..monitoring.health import HealthChecker
from ..monitoring.metrics import GatewayMetrics
from ..network.broadcast import ConnectionRegistry
from ..storage.database import Database
from ..storage.ledger import LedgerBackend, LedgerStore
from .errors import install_error_handlers
from .routes import explorer_router, monitoring_router, push_router, wallet_router

logger = logging.getLogger(__name__)

def create_app(
    settings: GatewaySettings,
    ledger: Optional[LedgerBackend] = None,
    relay: Optional[SignedTxRelay] = None,
    metrics: Optional[GatewayMetrics] = None,
    clock: Optional[Callable[[], float]] = None,
    start_health_checker: bool = True
) -> FastAPI:
    """Build the application with every component wired explicitly.

    Without an injected ledger the app owns a Postgres pool that is opened and
    closed by the lifespan handler.
    """
    metrics = metrics or GatewayMetrics()
    database = None
    if ledger is None:
        database = Database(settings)
        ledger = LedgerStore(database)
    relay = relay or SignedTxRelay(settings.tx_submission_endpoint)
    registry = ConnectionRegistry(metrics=metrics)

    health_kwargs = {"clock": clock} if clock is not None else {}
    health_checker = HealthChecker(
        ledger.best_block,
        stale_after=settings.stale_after_seconds,
        poll_interval=settings.poll_interval_seconds,
        on_new_tip=registry.broadcast_new_tip,
        metrics=metrics,
        **health_kwargs
    )
    gateway = GatewayAPI(settings, ledger, health_checker, relay)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if database is not None:
            await database.connect()
        if start_health_checker:
            await health_checker.start()
        logger.info(f"utxo-gateway listening on {settings.host}:{settings.port}")
        try:
            yield
        finally:
            await health_checker.stop()
            await relay.close()
            if database is not None:
                await database.close()

    app = FastAPI(title="utxo-gateway", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.metrics = metrics
    app.state.registry = registry
    app.state.health_checker = health_checker
    app.state.gateway = gateway

    install_error_handlers(app, settings.expose_error_details)

    app.include_router(explorer_router)
    app.include_router(wallet_router)
    app.include_router(monitoring_router)
    app.include_router(push_router)

    return app
