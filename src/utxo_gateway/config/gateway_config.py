# File: src/utxo_gateway/config/gateway_config.py

import copy
import os
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional

import yaml

DEFAULT_CONFIG: Dict[str, Any] = {
    "server": {
        "host": "0.0.0.0",
        "port": 8082,
        "addressRequestLimit": 50,
        "apiResponseLimit": 50,
        "txsHashesRequestLimit": 150,
        "minMobileVersion": "2.2.2",
        "txSubmissionEndpoint": "http://localhost:8090/api/submit/tx",
        "exposeErrorDetails": True,
    },
    "health": {
        "pollIntervalSeconds": 2,
        "staleAfterSeconds": 120,
    },
    "db": {
        "user": "postgres",
        "host": "localhost",
        "port": 5432,
        "database": "cexplorer",
        "password": "",
        "minPoolSize": 1,
        "maxPoolSize": 10,
    },
    "logging": {
        "logDir": "logs",
        "level": "INFO",
    },
}

# environment variable -> dotted config key
ENV_OVERRIDES = {
    "DB_USER": "db.user",
    "DB_HOST": "db.host",
    "DB_PORT": "db.port",
    "DB_NAME": "db.database",
    "DB_PASSWORD": "db.password",
    "SERVER_PORT": "server.port",
}

INT_KEYS = {"db.port", "server.port"}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


class GatewayConfig:
    def __init__(self, config_path: str = "config/default.yaml", environ: Optional[Dict[str, str]] = None):
        self.config_path = config_path
        self.environ = os.environ if environ is None else environ
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        config = copy.deepcopy(DEFAULT_CONFIG)
        if os.path.exists(self.config_path):
            with open(self.config_path, 'r') as f:
                _merge(config, yaml.safe_load(f) or {})

        for env_name, key in ENV_OVERRIDES.items():
            raw = self.environ.get(env_name)
            if raw:
                self._set(config, key, int(raw) if key in INT_KEYS else raw)
        return config

    @staticmethod
    def _set(config: Dict[str, Any], key: str, value: Any):
        keys = key.split('.')
        for k in keys[:-1]:
            config = config.setdefault(k, {})
        config[keys[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        try:
            keys = key.split('.')
            value = self.config
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def settings(self) -> "GatewaySettings":
        return GatewaySettings.from_config(self)


@dataclass(frozen=True)
class GatewaySettings:
    """Typed view over the configuration, built once at startup."""
    host: str
    port: int
    address_request_limit: int
    api_response_limit: int
    txs_hashes_request_limit: int
    min_mobile_version: str
    tx_submission_endpoint: str
    expose_error_details: bool
    poll_interval_seconds: float
    stale_after_seconds: float
    db_user: str
    db_host: str
    db_port: int
    db_name: str
    db_password: str
    db_min_pool_size: int
    db_max_pool_size: int
    log_dir: str
    log_level: str

    @classmethod
    def from_config(cls, config: GatewayConfig) -> "GatewaySettings":
        return cls(
            host=config.get("server.host"),
            port=int(config.get("server.port")),
            address_request_limit=int(config.get("server.addressRequestLimit")),
            api_response_limit=int(config.get("server.apiResponseLimit")),
            txs_hashes_request_limit=int(config.get("server.txsHashesRequestLimit")),
            min_mobile_version=str(config.get("server.minMobileVersion")),
            tx_submission_endpoint=config.get("server.txSubmissionEndpoint"),
            expose_error_details=bool(config.get("server.exposeErrorDetails")),
            poll_interval_seconds=float(config.get("health.pollIntervalSeconds")),
            stale_after_seconds=float(config.get("health.staleAfterSeconds")),
            db_user=config.get("db.user"),
            db_host=config.get("db.host"),
            db_port=int(config.get("db.port")),
            db_name=config.get("db.database"),
            db_password=config.get("db.password"),
            db_min_pool_size=int(config.get("db.minPoolSize")),
            db_max_pool_size=int(config.get("db.maxPoolSize")),
            log_dir=config.get("logging.logDir"),
            log_level=str(config.get("logging.level")).upper(),
        )

    @classmethod
    def defaults(cls, **overrides) -> "GatewaySettings":
        settings = cls.from_config(GatewayConfig(config_path="", environ={}))
        return replace(settings, **overrides)

    def masked(self) -> Dict[str, Any]:
        values = asdict(self)
        if values["db_password"]:
            values["db_password"] = "***"
        return values
