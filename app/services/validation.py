"""
Field validation for song suggestion documents.

Rules live in a static table keyed by field name and are evaluated the same
way for inserts and status updates. Every function here is pure.
"""
import re
from typing import Any, Mapping, NamedTuple

from app.models.song import SONG_STATUSES

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")
LINK_PATTERN = re.compile(r"^https?://.+")


class FieldRule(NamedTuple):
    """Constraints for a single document field"""
    label: str
    required: bool = False
    trim: bool = True
    min_length: int | None = None
    max_length: int | None = None
    pattern: re.Pattern | None = None
    pattern_message: str | None = None
    choices: tuple[str, ...] | None = None


SONG_FIELD_RULES: dict[str, FieldRule] = {
    "name": FieldRule(label="Name", required=True, min_length=2, max_length=100),
    "artist": FieldRule(label="Artist name", required=True, min_length=2, max_length=100),
    "title": FieldRule(label="Title", required=True, min_length=2, max_length=200),
    "link": FieldRule(
        label="Link",
        pattern=LINK_PATTERN,
        pattern_message="Link must be a valid URL starting with http:// or https://",
    ),
    "message": FieldRule(label="Message", max_length=500),
    "status": FieldRule(label="Status", trim=False, choices=SONG_STATUSES),
}


def is_valid_object_id(value: Any) -> bool:
    """True when value is a 24-character hexadecimal string"""
    return isinstance(value, str) and OBJECT_ID_PATTERN.match(value) is not None


def is_valid_status(value: Any) -> bool:
    """Exact, case-sensitive membership in the status enum"""
    return isinstance(value, str) and value in SONG_STATUSES


def normalize_song_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Trim string values of known fields and drop absent (None) ones.

    Unknown keys are discarded.
    """
    normalized = {}
    for field, rule in SONG_FIELD_RULES.items():
        value = data.get(field)
        if value is None:
            continue
        if rule.trim and isinstance(value, str):
            value = value.strip()
        normalized[field] = value
    return normalized


def validate_field(field: str, value: Any) -> list[str]:
    """Check one field against its rule and return the violated messages"""
    rule = SONG_FIELD_RULES[field]

    if value is None or value == "":
        return [f"{rule.label} is required"] if rule.required else []

    if not isinstance(value, str):
        return [f"{rule.label} must be a string"]

    errors = []
    if rule.min_length is not None and len(value) < rule.min_length:
        errors.append(f"{rule.label} must be at least {rule.min_length} characters long")
    if rule.max_length is not None and len(value) > rule.max_length:
        errors.append(f"{rule.label} cannot exceed {rule.max_length} characters")
    if rule.pattern is not None and not rule.pattern.match(value):
        errors.append(rule.pattern_message or f"{rule.label} has an invalid format")
    if rule.choices is not None and value not in rule.choices:
        errors.append(f"`{value}` is not a valid {rule.label.lower()}; expected one of: {', '.join(rule.choices)}")
    return errors


def validate_song_fields(data: Mapping[str, Any], fields: tuple[str, ...] | None = None) -> list[str]:
    """
    Validate a (normalized) song document.

    Args:
        data: Document fields, already trimmed
        fields: Restrict validation to these fields (defaults to every rule)

    Returns:
        One message per violated constraint, in rule-table order
    """
    errors = []
    for field in fields or tuple(SONG_FIELD_RULES):
        errors.extend(validate_field(field, data.get(field)))
    return errors
