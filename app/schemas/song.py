"""
Song suggestion request and response schemas for API endpoints.
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from app.models.song import Song, SongStatus


# ==================== REQUEST SCHEMAS ====================

class CreateSongRequest(BaseModel):
    """
    Request schema for suggesting a song.

    Fields are optional at the schema level; the route reports missing
    values with a single presence message before this schema runs. Any
    value that is present must be a string. Unknown fields (including
    ``status``) are dropped.
    """
    model_config = ConfigDict(extra="ignore")

    name: StrictStr | None = None
    artist: StrictStr | None = None
    title: StrictStr | None = None
    link: StrictStr | None = None
    message: StrictStr | None = None


class UpdateSongStatusRequest(BaseModel):
    """Request schema for moderating a song suggestion"""
    model_config = ConfigDict(extra="ignore")

    status: StrictStr | None = None


# ==================== RESPONSE SCHEMAS ====================

class SongSummaryResponse(BaseModel):
    """Projection returned right after a suggestion is created"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    artist: str
    title: str
    status: SongStatus
    created_at: datetime = Field(..., alias="createdAt")


class CreateSongResponse(BaseModel):
    message: str
    song: SongSummaryResponse


class PaginationResponse(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class SongListResponse(BaseModel):
    songs: list[Song]
    pagination: PaginationResponse


class SongDetailResponse(BaseModel):
    song: Song


class UpdateSongStatusResponse(BaseModel):
    message: str
    song: Song


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Shape shared by every error body"""
    error: str
    message: str | None = None
    details: list[str] | None = None


class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: str
