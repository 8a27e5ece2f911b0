# File: src/utxo_gateway/api/routes/push.py
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ...network.broadcast import welcome_message

logger = logging.getLogger(__name__)

router = APIRouter()

@router.websocket("/")
async def push_channel(websocket: WebSocket):
    """Keep the connection registered until the client goes away; messages are server-initiated."""
    registry = websocket.app.state.registry
    health_checker = websocket.app.state.health_checker

    await websocket.accept()
    connection_id = await registry.register(websocket)
    try:
        tip = health_checker.snapshot.last_observed_tip
        await websocket.send_text(welcome_message(connection_id, tip).serialize())
        while True:
            # inbound frames, text or binary, are ignored
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
        logger.debug(f"Push connection {connection_id} closed by client")
    except WebSocketDisconnect:
        logger.debug(f"Push connection {connection_id} closed before the welcome message")
    finally:
        await registry.unregister(connection_id)
