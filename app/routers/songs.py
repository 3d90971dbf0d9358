from typing import Any

from fastapi import APIRouter, Depends, Query, status
from pydantic import ValidationError

from app.core.exceptions import SongValidationError, error_response
from app.core.logging import get_logger
from app.dependencies import get_request_payload, get_song_store
from app.models.song import SONG_STATUSES
from app.schemas.song import (
    CreateSongRequest,
    CreateSongResponse,
    MessageResponse,
    SongDetailResponse,
    SongListResponse,
    UpdateSongStatusRequest,
    UpdateSongStatusResponse,
)
from app.services.song_store import SongStore, build_list_filter, build_sort, duplicate_filter
from app.services.validation import is_valid_object_id, is_valid_status
from app.utils.formatters import format_pagination, format_song, format_song_summary

logger = get_logger("api.songs")
router = APIRouter()

INTERNAL_ERROR_MESSAGE = "An internal server error occurred"
REQUIRED_FIELDS = ("name", "artist", "title")


def _invalid_id_response():
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Invalid ID format",
        message="Song ID must be a 24-character hexadecimal string",
    )


def _not_found_response():
    return error_response(
        status.HTTP_404_NOT_FOUND,
        "Song not found",
        message="No song found with the provided ID",
    )


def _has_required_fields(payload: dict[str, Any]) -> bool:
    return all(payload.get(field) for field in REQUIRED_FIELDS)


def _type_error_message(exc: ValidationError) -> str:
    fields = {str(e["loc"][0]) for e in exc.errors() if e.get("loc")}
    if fields & set(REQUIRED_FIELDS):
        return "Name, artist, and title must be strings"
    return "Link and message must be strings"


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CreateSongResponse)
@router.post("/", status_code=status.HTTP_201_CREATED, response_model=CreateSongResponse, include_in_schema=False)
def create_song(
    payload: dict[str, Any] = Depends(get_request_payload),
    store: SongStore = Depends(get_song_store)
):
    """Suggest a song. New suggestions always start as pending."""
    if not _has_required_fields(payload):
        logger.warning("Rejected song suggestion missing required fields")
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "Validation failed",
            message="Name, artist, and title are required fields",
        )

    try:
        request = CreateSongRequest.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Rejected song suggestion with non-string fields: {e.error_count()} error(s)")
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "Validation failed",
            message=_type_error_message(e),
        )

    try:
        # Check-then-insert is not atomic; concurrent identical submissions may both land
        existing = store.find_one(duplicate_filter(request.artist, request.title))
        if existing:
            logger.info(f"Duplicate suggestion for '{request.artist} - {request.title}'")
            return error_response(
                status.HTTP_409_CONFLICT,
                "Duplicate song",
                message="This song has already been suggested",
            )

        song = store.insert(request.model_dump(exclude_none=True))
        logger.info(f"Song suggestion {song['_id']} created: '{song['artist']} - {song['title']}'")
        return {
            "message": "Song suggestion submitted successfully",
            "song": format_song_summary(song),
        }
    except SongValidationError as e:
        logger.warning(f"Song suggestion failed validation: {e.errors}")
        return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", details=e.errors)
    except Exception as e:
        logger.error(f"Error creating song: {e}", exc_info=True)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to save song suggestion",
            message=INTERNAL_ERROR_MESSAGE,
        )


@router.get("", response_model=SongListResponse, response_model_exclude_none=True)
@router.get("/", response_model=SongListResponse, response_model_exclude_none=True, include_in_schema=False)
def list_songs(
    status_filter: str = Query("approved", alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    artist: str | None = None,
    sort: str = "createdAt",
    order: str = "desc",
    store: SongStore = Depends(get_song_store)
):
    """
    List suggestions with filtering and pagination.

    ``status`` defaults to approved; ``status=all`` lists every status.
    The same filter drives both the returned page and the total.
    """
    try:
        query = build_list_filter(status_filter, artist)
        skip = (page - 1) * limit

        songs = store.find(query, sort=build_sort(sort, order), skip=skip, limit=limit)
        total = store.count(query)

        logger.info(f"Listed {len(songs)} of {total} songs (status={status_filter}, page={page})")
        return {
            "songs": [format_song(s) for s in songs],
            "pagination": format_pagination(page, limit, total),
        }
    except Exception as e:
        logger.error(f"Error fetching songs: {e}", exc_info=True)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to fetch songs",
            message=INTERNAL_ERROR_MESSAGE,
        )


@router.get("/{song_id}", response_model=SongDetailResponse, response_model_exclude_none=True)
def get_song(song_id: str, store: SongStore = Depends(get_song_store)):
    """Get a single suggestion by id"""
    if not is_valid_object_id(song_id):
        return _invalid_id_response()

    try:
        song = store.find_by_id(song_id)
        if not song:
            logger.info(f"Song not found: {song_id}")
            return _not_found_response()
        return {"song": format_song(song)}
    except Exception as e:
        logger.error(f"Error fetching song {song_id}: {e}", exc_info=True)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to fetch song",
            message=INTERNAL_ERROR_MESSAGE,
        )


@router.put("/{song_id}/status", response_model=UpdateSongStatusResponse, response_model_exclude_none=True)
def update_song_status(
    song_id: str,
    payload: dict[str, Any] = Depends(get_request_payload),
    store: SongStore = Depends(get_song_store)
):
    """Approve, reject or reset a suggestion (admin use)"""
    try:
        new_status = UpdateSongStatusRequest.model_validate(payload).status
    except ValidationError:
        new_status = None

    if not is_valid_status(new_status):
        logger.warning(f"Rejected status update for {song_id}: {payload.get('status')!r}")
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "Invalid status",
            message=f"Status must be one of: {', '.join(SONG_STATUSES)}",
        )

    if not is_valid_object_id(song_id):
        return _invalid_id_response()

    try:
        song = store.update_status_by_id(song_id, new_status)
        if not song:
            logger.info(f"Song not found for status update: {song_id}")
            return _not_found_response()

        logger.info(f"Song {song_id} status set to {new_status}")
        return {
            "message": "Song status updated successfully",
            "song": format_song(song),
        }
    except SongValidationError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", details=e.errors)
    except Exception as e:
        logger.error(f"Error updating song status for {song_id}: {e}", exc_info=True)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to update song status",
            message=INTERNAL_ERROR_MESSAGE,
        )


@router.delete("/{song_id}", response_model=MessageResponse)
def delete_song(song_id: str, store: SongStore = Depends(get_song_store)):
    """Delete a suggestion permanently"""
    if not is_valid_object_id(song_id):
        return _invalid_id_response()

    try:
        song = store.delete_by_id(song_id)
        if not song:
            logger.info(f"Song not found for deletion: {song_id}")
            return _not_found_response()

        logger.info(f"Song {song_id} deleted")
        return {"message": "Song deleted successfully"}
    except Exception as e:
        logger.error(f"Error deleting song {song_id}: {e}", exc_info=True)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to delete song",
            message=INTERNAL_ERROR_MESSAGE,
        )
