"""Live broadcast of new reviews to connected WebSocket clients."""

import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)

NEW_REVIEW_EVENT = "newReview"


class ConnectionManager:
    def __init__(self):
        self.active_connections: set[WebSocket] = set()

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.add(websocket)
        logger.info(f"New client connected ({len(self.active_connections)} active)")

    def disconnect(self, websocket: WebSocket):
        self.active_connections.discard(websocket)
        logger.info(f"Client disconnected ({len(self.active_connections)} active)")

    async def broadcast(self, event: str, payload: Any):
        """
        Send an event to every connected client.

        Clients that cannot be reached are dropped; nothing is queued for them.
        """
        message = {"event": event, "data": payload}
        for websocket in list(self.active_connections):
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.warning(f"Dropping client after failed send of '{event}': {e}")
                self.active_connections.discard(websocket)


# Singleton instance
connection_manager = ConnectionManager()
