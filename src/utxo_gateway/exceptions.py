# src/utxo_gateway/exceptions.py

class GatewayError(Exception):
    """Base exception class for gateway errors"""
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

class ValidationError(GatewayError):
    """Raised when a request body fails validation"""
    code = "INVALID_REQUEST"
    status_code = 400

class ReferenceConsistencyError(GatewayError):
    """Raised when a pagination reference no longer matches the canonical chain"""
    status_code = 400

    BEST_BLOCK_MISMATCH = "REFERENCE_BEST_BLOCK_MISMATCH"
    TX_NOT_FOUND = "REFERENCE_TX_NOT_FOUND"
    BLOCK_MISMATCH = "REFERENCE_BLOCK_MISMATCH"

    def __init__(self, code: str):
        super().__init__(code, code)

class UpstreamError(GatewayError):
    """Raised when the backing store or submission service fails"""
    code = "UPSTREAM_ERROR"
    status_code = 502

class HealthError(GatewayError):
    """Raised when the importer health check is failing"""
    code = "IMPORTER_UNHEALTHY"
    status_code = 503

class DatabaseError(Exception):
    """Raised when database operations fail"""
    pass
