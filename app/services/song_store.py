import re
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.collection import Collection

from app.core.exceptions import InvalidSongIdError, SongValidationError
from app.core.logging import get_logger
from app.models.song import SongStatus
from app.services.validation import (
    is_valid_object_id,
    normalize_song_fields,
    validate_song_fields,
)

logger = get_logger("services.song_store")

# Client-facing sort names that differ from the stored key
SORT_FIELD_ALIASES = {"id": "_id"}


def duplicate_filter(artist: str, title: str) -> dict:
    """Case-insensitive exact match on (artist, title)"""
    return {
        "artist": {"$regex": f"^{re.escape(artist.strip())}$", "$options": "i"},
        "title": {"$regex": f"^{re.escape(title.strip())}$", "$options": "i"},
    }


def build_list_filter(status: str | None, artist: str | None) -> dict:
    """
    Filter for the list endpoint.

    ``status="all"`` (or empty) disables status filtering; ``artist`` is a
    case-insensitive substring match.
    """
    query: dict[str, Any] = {}
    if status and status != "all":
        query["status"] = status
    if artist:
        query["artist"] = {"$regex": re.escape(artist), "$options": "i"}
    return query


def build_sort(field: str, order: str) -> list[tuple[str, int]]:
    direction = ASCENDING if order == "asc" else DESCENDING
    return [(SORT_FIELD_ALIASES.get(field, field), direction)]


def _to_object_id(song_id: str) -> ObjectId:
    if not is_valid_object_id(song_id):
        raise InvalidSongIdError(song_id)
    return ObjectId(song_id)


class SongStore:
    """
    Persistence for song suggestion documents.

    Wraps a single MongoDB collection. The collection handle is injected so
    the store can be built once at startup (or on an in-memory collection in
    tests). Methods return raw documents with the ``_id`` key; shaping for
    the API happens in ``app.utils.formatters``.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    def ensure_indexes(self) -> None:
        self.collection.create_index([("artist", ASCENDING), ("title", ASCENDING)])
        self.collection.create_index([("status", ASCENDING)])
        self.collection.create_index([("createdAt", DESCENDING)])
        logger.info(f"Indexes ensured on collection '{self.collection.name}'")

    # ==================== WRITE OPERATIONS ====================

    def insert(self, data: dict) -> dict:
        """
        Validate and persist a new suggestion.

        Status is always forced to pending; createdAt is set here and never
        touched again.

        Raises:
            SongValidationError: One or more fields violate their rules
        """
        document = normalize_song_fields(data)
        document["status"] = SongStatus.PENDING.value

        errors = validate_song_fields(document)
        if errors:
            raise SongValidationError(errors)

        document["createdAt"] = datetime.now(timezone.utc)
        result = self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        logger.debug(f"Inserted song {result.inserted_id}")
        return document

    def update_status_by_id(self, song_id: str, status: str) -> dict | None:
        """
        Set the status of a suggestion. No other field is ever modified.

        Returns:
            The updated document, or None when no document has this id

        Raises:
            InvalidSongIdError: Malformed identifier
            SongValidationError: Status is not one of the enum values
        """
        object_id = _to_object_id(song_id)
        errors = validate_song_fields({"status": status}, fields=("status",))
        if errors:
            raise SongValidationError(errors)

        return self.collection.find_one_and_update(
            {"_id": object_id},
            {"$set": {"status": status}},
            return_document=ReturnDocument.AFTER,
        )

    def delete_by_id(self, song_id: str) -> dict | None:
        """Remove a suggestion and return it, or None when absent"""
        return self.collection.find_one_and_delete({"_id": _to_object_id(song_id)})

    # ==================== READ OPERATIONS ====================

    def find_by_id(self, song_id: str) -> dict | None:
        return self.collection.find_one({"_id": _to_object_id(song_id)})

    def find_one(self, query: dict) -> dict | None:
        return self.collection.find_one(query)

    def find(
        self,
        query: dict,
        sort: list[tuple[str, int]],
        skip: int = 0,
        limit: int = 0
    ) -> list[dict]:
        cursor = self.collection.find(query).sort(sort).skip(skip).limit(limit)
        return list(cursor)

    def count(self, query: dict) -> int:
        return self.collection.count_documents(query)
