# File: src/utxo_gateway/monitoring/metrics.py

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Gauge, generate_latest

from ..explorer.models import BlockReference

HEALTH_STATES = ("OK", "STALE", "ERROR")


class GatewayMetrics:
    CONTENT_TYPE = CONTENT_TYPE_LATEST

    def __init__(self, registry: CollectorRegistry = None):
        self.registry = registry or CollectorRegistry()

        # Request metrics
        self.requests_failed = Counter(
            'gateway_requests_failed', 'Requests that ended in an error response',
            ['code'], registry=self.registry
        )

        # Importer metrics
        self.health_state = Gauge(
            'gateway_importer_health', 'Importer health state (1 for the current state)',
            ['state'], registry=self.registry
        )
        self.tip_height = Gauge(
            'gateway_chain_tip_height', 'Height of the last observed chain tip',
            registry=self.registry
        )

        # Push channel metrics
        self.ws_connections = Gauge(
            'gateway_ws_connections', 'Registered WebSocket connections',
            registry=self.registry
        )

    def record_failure(self, code: str):
        self.requests_failed.labels(code=code).inc()

    def record_health(self, state: str):
        for name in HEALTH_STATES:
            self.health_state.labels(state=name).set(1 if name == state else 0)

    def record_tip(self, tip: BlockReference):
        self.tip_height.set(tip.number)

    def set_ws_connections(self, count: int):
        self.ws_connections.set(count)

    def render(self) -> bytes:
        return generate_latest(self.registry)
