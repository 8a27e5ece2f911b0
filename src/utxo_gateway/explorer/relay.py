# File: src/utxo_gateway/explorer/relay.py
import asyncio
import base64
import binascii
import json
import logging
from typing import Any, Optional

import aiohttp

from ..exceptions import UpstreamError, ValidationError

logger = logging.getLogger(__name__)


class SignedTxRelay:
    """Forwards signed transactions to the node's submission service."""

    def __init__(self, endpoint: str, session: Optional[aiohttp.ClientSession] = None, timeout_s: float = 30.0):
        self.endpoint = endpoint
        self.timeout = aiohttp.ClientTimeout(total=timeout_s)
        self._session = session

    def _get_session(self) -> aiohttp.ClientSession:
        # created lazily, a ClientSession needs the running loop
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def submit(self, body: Any) -> Any:
        signed_tx = body.get("signedTx") if isinstance(body, dict) else None
        if not isinstance(signed_tx, str) or not signed_tx:
            raise ValidationError("signedTx: must be a base64 encoded string", "INVALID_SIGNED_TX")
        try:
            payload = base64.b64decode(signed_tx, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError("signedTx: not valid base64", "INVALID_SIGNED_TX")

        try:
            async with self._get_session().post(
                self.endpoint,
                data=payload,
                headers={"Content-Type": "application/cbor"}
            ) as response:
                status = response.status
                text = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Transaction submission to {self.endpoint} failed: {str(e)}")
            raise UpstreamError(f"Transaction submission failed: {str(e) or type(e).__name__}")

        if status >= 400:
            logger.warning(f"Transaction rejected ({status}): {text}")
            raise UpstreamError(
                f"Transaction submission rejected ({status}): {text}",
                "TX_SUBMISSION_REJECTED"
            )
        try:
            return json.loads(text)
        except ValueError:
            return {"response": text}

    async def close(self):
        if self._session is not None and not self._session.closed:
            await self._session.close()
