from .health import HealthChecker, HealthSnapshot, HealthStatus
from .logging_config import LogConfig
from .metrics import GatewayMetrics

__all__ = ['HealthChecker', 'HealthSnapshot', 'HealthStatus', 'LogConfig', 'GatewayMetrics']
