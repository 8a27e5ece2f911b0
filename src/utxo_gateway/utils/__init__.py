# src/utxo_gateway/utils/__init__.py
from .result import (
    Found,
    Invalid,
    LookupFailed,
    LookupResult,
    NoValue,
    Valid,
    ValidationResult,
    assert_never,
)

__all__ = [
    'Found',
    'Invalid',
    'LookupFailed',
    'LookupResult',
    'NoValue',
    'Valid',
    'ValidationResult',
    'assert_never',
]
