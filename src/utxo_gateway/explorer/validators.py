# File: src/utxo_gateway/explorer/validators.py
"""Request gates that run before any backend call."""
import string
from typing import Any, List

from .models import HistoryCursor, HistoryQuery
from ..utils.result import Invalid, Valid, ValidationResult

NO_BODY = "NO_BODY"
NO_ADDRESSES = "NO_ADDRESSES"
ADDRESS_LIMIT_EXCEEDED = "ADDRESS_LIMIT_EXCEEDED"
INVALID_ADDRESSES = "INVALID_ADDRESSES"
INVALID_LIMIT = "INVALID_LIMIT"
LIMIT_EXCEEDED = "LIMIT_EXCEEDED"
INVALID_CURSOR = "INVALID_CURSOR"
NO_UNTIL_BLOCK = "NO_UNTIL_BLOCK"
INVALID_TX_HASHES = "INVALID_TX_HASHES"

_HEX_DIGITS = set(string.hexdigits)


def validate_addresses(addresses: Any, max_addresses: int) -> ValidationResult[List[str]]:
    """Check an address list against the configured cardinality limit."""
    if not addresses:
        return Invalid("error, no addresses.", NO_ADDRESSES)
    if not isinstance(addresses, list) or not all(isinstance(a, str) for a in addresses):
        return Invalid("addresses must be an array of strings.", INVALID_ADDRESSES)
    if len(addresses) > max_addresses:
        return Invalid(
            f"The request has more than {max_addresses} addresses.",
            ADDRESS_LIMIT_EXCEEDED
        )
    return Valid(addresses)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_history_request(
    body: Any, max_addresses: int, max_results: int
) -> ValidationResult[HistoryQuery]:
    """Check the shape and bounds of a transaction-history body.

    ``after`` must carry both the cursor transaction and the block the client
    saw it in; ``untilBlock`` is always required.
    """
    if not body or not isinstance(body, dict):
        return Invalid("error, no body", NO_BODY)
    if not body.get("addresses"):
        return Invalid("error, no addresses.", NO_ADDRESSES)

    addresses = validate_addresses(body["addresses"], max_addresses)
    if isinstance(addresses, Invalid):
        return addresses

    limit = body.get("limit")
    if limit is not None:
        if not _is_positive_int(limit):
            return Invalid("limit must be a positive integer.", INVALID_LIMIT)
        if limit > max_results:
            return Invalid(
                f"The request has more than {max_results} results.",
                LIMIT_EXCEEDED
            )

    after = body.get("after")
    cursor = None
    if after is not None:
        if (
            not isinstance(after, dict)
            or not isinstance(after.get("tx"), str) or not after["tx"]
            or not isinstance(after.get("block"), str) or not after["block"]
        ):
            return Invalid("after must contain both tx and block.", INVALID_CURSOR)
        cursor = HistoryCursor(tx=after["tx"], block=after["block"])

    until_block = body.get("untilBlock")
    if not isinstance(until_block, str) or not until_block:
        return Invalid("error, no untilBlock.", NO_UNTIL_BLOCK)

    return Valid(HistoryQuery(
        addresses=addresses.value,
        after=cursor,
        until_block=until_block,
        limit=limit
    ))


def validate_tx_hashes(body: Any, max_hashes: int) -> ValidationResult[List[str]]:
    """Check a txBodies request: 1..max_hashes hex transaction hashes."""
    tx_hashes = body.get("txsHashes") if isinstance(body, dict) else None
    if not isinstance(tx_hashes, list):
        return Invalid("txBodies: must contain an array named txsHashes", INVALID_TX_HASHES)
    if len(tx_hashes) == 0 or len(tx_hashes) > max_hashes:
        return Invalid(
            f"txsHashes request length should be (0, {max_hashes}]",
            INVALID_TX_HASHES
        )
    for tx_hash in tx_hashes:
        if (
            not isinstance(tx_hash, str)
            or not tx_hash
            or len(tx_hash) % 2
            or not set(tx_hash) <= _HEX_DIGITS
        ):
            return Invalid(f"txsHashes contains an invalid hash: {tx_hash!r}", INVALID_TX_HASHES)
    # the ledger encodes hashes as lowercase hex
    return Valid(list(dict.fromkeys(tx_hash.lower() for tx_hash in tx_hashes)))
