# File: src/utxo_gateway/explorer/api.py
from typing import Any, Dict, List, Optional, Tuple

from .history import TransactionHistoryAssembler
from .models import BestBlock, HistoryEntry, ImporterHealth, ServerStatus, Utxo, UtxoSum
from .pagination import PaginationCursorResolver
from .relay import SignedTxRelay
from .validators import validate_addresses, validate_history_request, validate_tx_hashes
from ..config import GatewaySettings
from ..exceptions import HealthError, UpstreamError, ValidationError
from ..monitoring.health import HealthChecker, HealthStatus
from ..storage.ledger import LedgerBackend
from ..utils.result import Invalid, Valid, ValidationResult, assert_never

MOBILE_PLATFORM_PREFIXES = ("android / ", "ios / ", "- /")


def _unwrap(result: ValidationResult):
    if isinstance(result, Valid):
        return result.value
    if isinstance(result, Invalid):
        raise ValidationError(result.message, result.code)
    assert_never(result)


def _version_tuple(raw: str) -> Optional[Tuple[int, ...]]:
    try:
        parts = tuple(int(part) for part in raw.strip().split("."))
    except ValueError:
        return None
    return parts + (0,) * (3 - len(parts))


def is_outdated_mobile_client(client_version: Optional[str], min_version: str) -> bool:
    """True for a recognized mobile client reporting a version below min_version.

    The header reads "<platform> / <version>", e.g. "android / 2.2.1".
    Unrecognized platforms and unparseable versions are never flagged.
    """
    if not client_version:
        return False
    if not any(prefix in client_version for prefix in MOBILE_PLATFORM_PREFIXES):
        return False
    pieces = client_version.split(" / ")
    if len(pieces) < 2:
        return False
    reported = _version_tuple(pieces[1])
    minimum = _version_tuple(min_version)
    if reported is None or minimum is None:
        return False
    return reported < minimum


class GatewayAPI:
    def __init__(
        self,
        settings: GatewaySettings,
        ledger: LedgerBackend,
        health_checker: HealthChecker,
        relay: Optional[SignedTxRelay] = None
    ):
        self.settings = settings
        self.ledger = ledger
        self.health_checker = health_checker
        self.relay = relay
        self.resolver = PaginationCursorResolver(ledger)
        self.assembler = TransactionHistoryAssembler(ledger, settings.api_response_limit)

    def _addresses(self, body: Any) -> List[str]:
        if not isinstance(body, dict) or not body.get("addresses"):
            raise ValidationError("error, no addresses.", "NO_ADDRESSES")
        return _unwrap(validate_addresses(body["addresses"], self.settings.address_request_limit))

    async def best_block(self) -> BestBlock:
        """Get the current chain tip."""
        tip = await self.ledger.best_block()
        return BestBlock(epoch=tip.epoch, slot=tip.slot, hash=tip.hash, height=tip.number)

    async def filter_used_addresses(self, body: Any) -> List[str]:
        """Return the requested addresses that appear in any transaction."""
        addresses = self._addresses(body)
        used = set(await self.ledger.used_addresses(addresses))
        return [address for address in dict.fromkeys(addresses) if address in used]

    async def utxo_for_addresses(self, body: Any) -> List[Utxo]:
        """Get unspent outputs for addresses."""
        return await self.ledger.utxos_for_addresses(self._addresses(body))

    async def utxo_sum_for_addresses(self, body: Any) -> UtxoSum:
        """Get the total unspent value for addresses."""
        total = await self.ledger.utxo_sum_for_addresses(self._addresses(body))
        return UtxoSum(sum=total)

    async def tx_history(self, body: Any) -> List[HistoryEntry]:
        """Get one page of transaction history."""
        query = _unwrap(validate_history_request(
            body,
            self.settings.address_request_limit,
            self.settings.api_response_limit
        ))
        bounds = await self.resolver.resolve(query)
        return await self.assembler.assemble(query.addresses, bounds, query.limit)

    async def tx_bodies(self, body: Any) -> Dict[str, str]:
        """Get raw transaction bodies by hash."""
        tx_hashes = _unwrap(validate_tx_hashes(body, self.settings.txs_hashes_request_limit))
        return await self.ledger.tx_bodies(tx_hashes)

    async def submit_signed_tx(self, body: Any) -> Any:
        if self.relay is None:
            raise UpstreamError("Transaction submission is not configured", "TX_SUBMISSION_DISABLED")
        return await self.relay.submit(body)

    def importer_health(self) -> ImporterHealth:
        status = self.health_checker.get_status()
        if status == HealthStatus.OK:
            return ImporterHealth(code=200, message="Importer is OK")
        if status == HealthStatus.STALE:
            return ImporterHealth(
                code=200,
                message="Importer seems OK. Not enough time has passed since last valid request."
            )
        if status == HealthStatus.ERROR:
            raise HealthError(self.health_checker.last_error or status.value)
        assert_never(status)

    def server_status(self, client_version: Optional[str] = None) -> ServerStatus:
        maintenance = is_outdated_mobile_client(client_version, self.settings.min_mobile_version)
        return ServerStatus(isServerOk=True, isMaintenance=maintenance)
