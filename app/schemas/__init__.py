"""
API request and response schemas (DTOs).
Separate from database models - these are for API endpoints.
"""

from .song import (
    CreateSongRequest,
    UpdateSongStatusRequest,
    SongSummaryResponse,
    CreateSongResponse,
    PaginationResponse,
    SongListResponse,
    SongDetailResponse,
    UpdateSongStatusResponse,
    MessageResponse,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    # Request schemas
    "CreateSongRequest",
    "UpdateSongStatusRequest",
    # Response schemas
    "SongSummaryResponse",
    "CreateSongResponse",
    "PaginationResponse",
    "SongListResponse",
    "SongDetailResponse",
    "UpdateSongStatusResponse",
    "MessageResponse",
    "ErrorResponse",
    "HealthResponse",
]
