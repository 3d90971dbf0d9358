from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SongStatus(str, Enum):
    """Moderation state of a song suggestion"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


SONG_STATUSES = tuple(s.value for s in SongStatus)


class SongBase(BaseModel):
    """Fields supplied by the person suggesting the song"""
    name: str = Field(..., description="Name of the person suggesting the song")
    artist: str = Field(..., description="Performing artist")
    title: str = Field(..., description="Song title")
    link: str | None = Field(None, description="Optional http(s) link to the song")
    message: str | None = Field(None, description="Optional note for the playlist owner")


class Song(SongBase):
    """
    Song suggestion as stored in the songs collection.

    The store key ``_id`` is exposed as ``id``; ``createdAt`` keeps the
    camelCase name used by the collection and the API.
    """
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str
    status: SongStatus = SongStatus.PENDING
    created_at: datetime = Field(..., alias="createdAt")
