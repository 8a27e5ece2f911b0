from .gateway_config import DEFAULT_CONFIG, GatewayConfig, GatewaySettings

__all__ = ['DEFAULT_CONFIG', 'GatewayConfig', 'GatewaySettings']
