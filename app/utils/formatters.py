import math
from typing import Any, Dict

SONG_FIELDS = ("name", "artist", "title", "link", "message", "status", "createdAt")
SUMMARY_FIELDS = ("name", "artist", "title", "status", "createdAt")


def format_song(song: Dict[str, Any]) -> Dict[str, Any]:
    """
    Format a stored song document for API responses.

    The store key ``_id`` becomes ``id``; fields missing from the document
    are left out rather than sent as null.

    Args:
        song: Song document from the collection

    Returns:
        Formatted song dictionary
    """
    formatted = {"id": str(song["_id"])}
    for field in SONG_FIELDS:
        if song.get(field) is not None:
            formatted[field] = song[field]
    return formatted


def format_song_summary(song: Dict[str, Any]) -> Dict[str, Any]:
    """Trimmed projection returned when a suggestion is created (no link/message)"""
    summary = {"id": str(song["_id"])}
    for field in SUMMARY_FIELDS:
        summary[field] = song.get(field)
    return summary


def format_pagination(page: int, limit: int, total: int) -> Dict[str, int]:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }
