"""
Pytest configuration and shared fixtures.

API tests run against the real FastAPI app with the store dependency
swapped for a SongStore on an in-memory mongomock collection, so no MongoDB
server is needed. The app lifespan (which connects to MongoDB) is not run
by ASGITransport.
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from itertools import count

import mongomock
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.dependencies import get_song_store
from app.main import app as main_app
from app.services.song_store import SongStore

BASE_TIME = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def collection():
    """Fresh in-memory songs collection for each test."""
    return mongomock.MongoClient()["song_suggestions_test"]["songs"]


@pytest.fixture
def song_store(collection) -> SongStore:
    store = SongStore(collection)
    store.ensure_indexes()
    return store


@pytest.fixture
def app(song_store: SongStore) -> FastAPI:
    """
    FastAPI app wired to the in-memory store.

    Overrides the store dependency and clears the override afterwards.
    """
    main_app.dependency_overrides[get_song_store] = lambda: song_store

    yield main_app

    main_app.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for the API.

    Usage:
        async def test_endpoint(client):
            response = await client.get("/api/songs")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def make_song(collection):
    """
    Factory that inserts a song document directly into the collection.

    Each call gets a createdAt one minute after the previous one, so
    ordering by createdAt is deterministic.

    Usage:
        song = make_song(artist="Adele", title="Hello", status="approved")
        song_id = str(song["_id"])
    """
    sequence = count()

    def _make_song(**overrides) -> dict:
        n = next(sequence)
        document = {
            "name": "Tester",
            "artist": f"Artist {n}",
            "title": f"Title {n}",
            "status": "pending",
            "createdAt": BASE_TIME + timedelta(minutes=n),
        }
        document.update(overrides)
        document["_id"] = collection.insert_one(document).inserted_id
        return document

    return _make_song


# =============================================================================
# Sample Data Dictionaries (for API request payloads)
# =============================================================================


@pytest.fixture
def song_payload() -> dict:
    return {
        "name": "Jamie",
        "artist": "Adele",
        "title": "Hello",
        "link": "https://example.com/adele-hello",
        "message": "Our first dance",
    }
