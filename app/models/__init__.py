"""
Database models for the song suggestion service.
These Pydantic models map to documents in the MongoDB songs collection.
"""

from .song import (
    SONG_STATUSES,
    Song,
    SongBase,
    SongStatus,
)

__all__ = [
    "SONG_STATUSES",
    "Song",
    "SongBase",
    "SongStatus",
]
