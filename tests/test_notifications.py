"""Tests for ConnectionManager."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from bike_reviews.services.notifications import ConnectionManager


class TestConnectionManager:
    @pytest.fixture
    def manager(self):
        return ConnectionManager()

    @pytest.fixture
    def make_socket(self):
        def _make():
            websocket = MagicMock()
            websocket.accept = AsyncMock()
            websocket.send_json = AsyncMock()
            return websocket

        return _make

    async def test_connect_accepts_and_tracks(self, manager, make_socket):
        websocket = make_socket()

        await manager.connect(websocket)

        websocket.accept.assert_awaited_once()
        assert websocket in manager.active_connections

    async def test_broadcast_reaches_every_client(self, manager, make_socket):
        """Test each connected client receives the event envelope."""
        sockets = [make_socket(), make_socket()]
        for websocket in sockets:
            await manager.connect(websocket)

        await manager.broadcast("newReview", {"riderName": "Asha"})

        for websocket in sockets:
            websocket.send_json.assert_awaited_once_with({"event": "newReview", "data": {"riderName": "Asha"}})

    async def test_broadcast_drops_failed_client(self, manager, make_socket):
        """Test a client whose send fails is dropped without affecting others."""
        healthy, broken = make_socket(), make_socket()
        broken.send_json.side_effect = RuntimeError("socket closed")
        await manager.connect(healthy)
        await manager.connect(broken)

        await manager.broadcast("newReview", {})

        healthy.send_json.assert_awaited_once()
        assert manager.active_connections == {healthy}

    async def test_broadcast_without_clients(self, manager):
        await manager.broadcast("newReview", {})

        assert manager.active_connections == set()

    async def test_disconnect_forgets_client(self, manager, make_socket):
        websocket = make_socket()
        await manager.connect(websocket)

        manager.disconnect(websocket)
        manager.disconnect(websocket)

        assert manager.active_connections == set()
