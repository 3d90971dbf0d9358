import json
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError

from app.core.logging import get_logger
from app.services.song_store import SongStore

logger = get_logger("Dependencies")

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_song_store(request: Request) -> SongStore:
    """
    Dependency returning the store built at startup.

    The store lives on ``app.state`` so there is one handle per process;
    tests override this dependency with an in-memory store.
    """
    return request.app.state.song_store


async def get_request_payload(request: Request) -> dict[str, Any]:
    """
    Dependency that parses a JSON or form-encoded body into a dict.

    An empty body yields an empty dict. Anything that is not a JSON object
    (or form) is rejected as a validation failure.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    body = await request.body()
    if not body:
        return {}

    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Malformed JSON body on {request.url.path}: {e}")
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body",), "msg": "Malformed JSON body", "input": None}]
        ) from e

    if not isinstance(payload, dict):
        raise RequestValidationError(
            [{"type": "dict_type", "loc": ("body",), "msg": "Request body must be a JSON object", "input": None}]
        )
    return payload
