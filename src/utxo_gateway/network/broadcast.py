# src/utxo_gateway/network/broadcast.py

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Protocol

from ..explorer.models import BlockReference

logger = logging.getLogger(__name__)

class MessageType(Enum):
    """Server-initiated message types on the push channel"""
    CONNECTED = "connected"
    NEW_TIP = "new_tip"

@dataclass
class PushMessage:
    """Push channel message structure"""
    type: MessageType
    data: dict
    timestamp: float = field(default_factory=time.time)

    def serialize(self) -> str:
        """Convert message to JSON string"""
        return json.dumps({
            "type": self.type.value,
            "data": self.data,
            "timestamp": self.timestamp
        })

    @classmethod
    def new_tip(cls, tip: BlockReference) -> "PushMessage":
        return cls(
            type=MessageType.NEW_TIP,
            data={
                "epoch": tip.epoch,
                "slot": tip.slot,
                "hash": tip.hash,
                "height": tip.number
            }
        )

class PushConnection(Protocol):
    async def send_text(self, data: str) -> None: ...

class ConnectionRegistry:
    """Connections registered on the push channel, keyed by connection id"""

    def __init__(self, metrics=None, send_timeout: float = 5.0):
        self.connections: Dict[str, PushConnection] = {}
        self.metrics = metrics
        self.send_timeout = send_timeout
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self.connections)

    async def register(self, connection: PushConnection, connection_id: Optional[str] = None) -> str:
        """Add a connection and return its id"""
        connection_id = connection_id or uuid.uuid4().hex
        async with self._lock:
            self.connections[connection_id] = connection
            self._update_metrics()
        logger.info(f"Push connection {connection_id} registered ({len(self.connections)} open)")
        return connection_id

    async def unregister(self, connection_id: str) -> bool:
        """Remove a connection; returns False if it was not registered"""
        async with self._lock:
            removed = self.connections.pop(connection_id, None) is not None
            self._update_metrics()
        if removed:
            logger.info(f"Push connection {connection_id} removed ({len(self.connections)} open)")
        return removed

    async def broadcast(self, message: PushMessage) -> int:
        """Send a message to every registered connection.

        Sends run concurrently, each bounded by send_timeout. Connections whose
        send fails or times out are dropped. Returns the number of connections
        the message was delivered to.
        """
        async with self._lock:
            targets = list(self.connections.items())

        payload = message.serialize()
        results = await asyncio.gather(*(
            self._send(connection_id, connection, payload)
            for connection_id, connection in targets
        ))
        return sum(results)

    async def _send(self, connection_id: str, connection: PushConnection, payload: str) -> bool:
        try:
            await asyncio.wait_for(connection.send_text(payload), timeout=self.send_timeout)
            return True
        except asyncio.TimeoutError:
            logger.warning(f"Push to {connection_id} timed out after {self.send_timeout}s")
        except Exception as e:
            logger.warning(f"Failed to push to {connection_id}: {str(e)}")
        await self.unregister(connection_id)
        return False

    async def broadcast_new_tip(self, tip: BlockReference) -> int:
        return await self.broadcast(PushMessage.new_tip(tip))

    def _update_metrics(self):
        if self.metrics:
            self.metrics.set_ws_connections(len(self.connections))

def welcome_message(connection_id: str, tip: Optional[BlockReference] = None) -> PushMessage:
    data: Dict[str, Any] = {"connection_id": connection_id}
    if tip is not None:
        data["tip"] = PushMessage.new_tip(tip).data
    return PushMessage(type=MessageType.CONNECTED, data=data)
