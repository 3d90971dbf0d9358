"""Tests for store connection at startup and the application lifespan."""

from unittest.mock import MagicMock, patch

import mongomock
import pytest
from fastapi import FastAPI
from pymongo.errors import ServerSelectionTimeoutError

from app import main
from app.config import get_settings
from app.core import database
from app.core.exceptions import StoreConnectionError
from app.services.song_store import SongStore


class TestConnect:
    def test_returns_client_after_ping(self):
        client = MagicMock()
        with patch.object(database, "get_mongo_client", return_value=client):
            assert database.connect(get_settings()) is client
        client.admin.command.assert_called_once_with("ping")
        client.close.assert_not_called()

    def test_failed_ping_closes_client(self):
        client = MagicMock()
        client.admin.command.side_effect = ServerSelectionTimeoutError("no servers available")
        with patch.object(database, "get_mongo_client", return_value=client):
            with pytest.raises(StoreConnectionError, match="no servers available"):
                database.connect(get_settings())
        client.close.assert_called_once()


class TestLifespan:
    async def test_unreachable_store_aborts_startup(self):
        app = FastAPI()
        with patch.object(main, "connect", side_effect=StoreConnectionError("Could not connect to MongoDB")):
            with pytest.raises(StoreConnectionError):
                async with main.lifespan(app):
                    pytest.fail("lifespan must not yield without a store")
        assert not hasattr(app.state, "song_store")

    async def test_publishes_store_and_closes_client_on_shutdown(self):
        client = mongomock.MongoClient()
        app = FastAPI()
        with patch.object(main, "connect", return_value=client), \
                patch.object(client, "close") as close:
            async with main.lifespan(app):
                assert isinstance(app.state.song_store, SongStore)
                assert app.state.song_store.collection.name == get_settings().mongodb_collection
                close.assert_not_called()
            close.assert_called_once()
