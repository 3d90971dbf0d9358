"""Unit tests for SongStore against an in-memory collection."""

from datetime import datetime

import pytest
from pymongo import ASCENDING, DESCENDING

from app.core.exceptions import InvalidSongIdError, SongValidationError
from app.services.song_store import (
    SongStore,
    build_list_filter,
    build_sort,
    duplicate_filter,
)

MISSING_ID = "0123456789abcdef01234567"


class TestInsert:
    def test_assigns_id_created_at_and_pending(self, song_store: SongStore, collection):
        song = song_store.insert({"name": " Jamie ", "artist": "Adele", "title": "Hello", "status": "approved"})
        assert song["_id"] is not None
        assert isinstance(song["createdAt"], datetime)
        assert song["status"] == "pending"
        assert song["name"] == "Jamie"
        assert collection.count_documents({}) == 1

    def test_lists_every_violation(self, song_store: SongStore, collection):
        with pytest.raises(SongValidationError) as exc_info:
            song_store.insert({"name": "J", "artist": "", "title": "Hello", "link": "nope"})
        assert exc_info.value.errors == [
            "Name must be at least 2 characters long",
            "Artist name is required",
            "Link must be a valid URL starting with http:// or https://",
        ]
        assert collection.count_documents({}) == 0


class TestLookups:
    def test_find_by_id(self, song_store: SongStore, make_song):
        song = make_song()
        found = song_store.find_by_id(str(song["_id"]))
        assert found["title"] == song["title"]

    def test_find_by_id_missing(self, song_store: SongStore):
        assert song_store.find_by_id(MISSING_ID) is None

    def test_find_by_id_malformed(self, song_store: SongStore):
        with pytest.raises(InvalidSongIdError):
            song_store.find_by_id("123")

    def test_duplicate_lookup_is_case_insensitive_exact(self, song_store: SongStore, make_song):
        make_song(artist="Adele", title="Hello")
        assert song_store.find_one(duplicate_filter("adele", "HELLO")) is not None
        assert song_store.find_one(duplicate_filter(" Adele ", "Hello ")) is not None
        assert song_store.find_one(duplicate_filter("Adel", "Hello")) is None
        assert song_store.find_one(duplicate_filter("Adele", "Hello, It's Me")) is None

    def test_find_and_count_share_filter(self, song_store: SongStore, make_song):
        for status in ("approved", "approved", "pending"):
            make_song(status=status)
        query = build_list_filter("approved", None)
        songs = song_store.find(query, sort=build_sort("createdAt", "desc"), skip=0, limit=10)
        assert len(songs) == song_store.count(query) == 2

    def test_skip_and_limit(self, song_store: SongStore, make_song):
        created = [make_song() for _ in range(5)]
        page = song_store.find({}, sort=build_sort("createdAt", "asc"), skip=2, limit=2)
        assert [s["_id"] for s in page] == [created[2]["_id"], created[3]["_id"]]


class TestUpdateStatus:
    def test_only_status_changes(self, song_store: SongStore, make_song):
        song = make_song(link="https://x.co")
        updated = song_store.update_status_by_id(str(song["_id"]), "rejected")
        assert updated["status"] == "rejected"
        for field in ("name", "artist", "title", "link"):
            assert updated[field] == song[field]

    def test_missing(self, song_store: SongStore):
        assert song_store.update_status_by_id(MISSING_ID, "approved") is None

    def test_invalid_status(self, song_store: SongStore, make_song):
        song = make_song()
        with pytest.raises(SongValidationError):
            song_store.update_status_by_id(str(song["_id"]), "archived")

    def test_malformed_id(self, song_store: SongStore):
        with pytest.raises(InvalidSongIdError):
            song_store.update_status_by_id("nope", "approved")


class TestDelete:
    def test_delete_returns_document(self, song_store: SongStore, make_song, collection):
        song = make_song()
        deleted = song_store.delete_by_id(str(song["_id"]))
        assert deleted["_id"] == song["_id"]
        assert collection.count_documents({}) == 0

    def test_delete_missing(self, song_store: SongStore):
        assert song_store.delete_by_id(MISSING_ID) is None


class TestQueryBuilders:
    def test_status_all_means_no_status_filter(self):
        assert build_list_filter("all", None) == {}

    def test_status_and_escaped_artist(self):
        query = build_list_filter("pending", "AC/DC (live)")
        assert query["status"] == "pending"
        assert query["artist"] == {"$regex": r"AC/DC\ \(live\)", "$options": "i"}

    def test_sort_direction(self):
        assert build_sort("title", "asc") == [("title", ASCENDING)]
        assert build_sort("title", "desc") == [("title", DESCENDING)]
        assert build_sort("title", "sideways") == [("title", DESCENDING)]

    def test_sort_by_id_uses_store_key(self):
        assert build_sort("id", "asc") == [("_id", ASCENDING)]


def test_ensure_indexes(song_store: SongStore, collection):
    keys = [tuple(index["key"]) for index in collection.index_information().values()]
    assert (("artist", 1), ("title", 1)) in keys
    assert (("status", 1),) in keys
    assert (("createdAt", -1),) in keys
