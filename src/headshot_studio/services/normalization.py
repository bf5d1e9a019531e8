"""Normalization of persisted generation records.

Records written by different clients store the image lists in different
physical encodings: a native array, a JSON-encoded array string, or a
comma-separated string. Field names also come in two conventions
(``generated_images`` and ``generatedImages``). The functions here turn any
of those shapes into a canonical ``HeadshotGeneration``.

``normalize_url_list`` is total. Each tier of the fallback chain either
produces a list or hands the value to the next tier:

1. sequence -> its string entries
2. string -> JSON array
3. string that is not JSON -> comma-separated parts
4. anything else -> ``[]``
"""

import json
import logging
from collections.abc import Mapping, Sequence
from datetime import datetime

from headshot_studio.domain.headshots import HeadshotGeneration

_logger = logging.getLogger(__name__)


def normalize_url_list(value: object, field_name: str = "images") -> list[str]:
    """Return an ordered list of non-empty URL strings for a raw field value."""
    if isinstance(value, Sequence) and not isinstance(value, str | bytes):
        return _clean_entries(list(value), field_name)
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            return _split_delimited(value)
        if isinstance(parsed, list):
            return _clean_entries(parsed, field_name)
        _logger.warning(
            "Normalization degraded: %s JSON is %s, not a list",
            field_name,
            type(parsed).__name__,
        )
        return []
    if value is not None:
        _logger.warning(
            "Normalization degraded: %s has unsupported type %s",
            field_name,
            type(value).__name__,
        )
    return []


def pick_field(row: Mapping[str, object], snake_key: str, camel_key: str) -> object:
    """Return the snake_case value when set, else the camelCase one.

    ``None`` and empty strings count as unset.
    """
    value = row.get(snake_key)
    if value is not None and value != "":
        return value
    return row.get(camel_key)


def normalize_generation(row: Mapping[str, object]) -> HeadshotGeneration:
    """Build a normalized generation from a raw record."""
    return HeadshotGeneration(
        id=str(row.get("id") or ""),
        user_id=str(pick_field(row, "user_id", "userId") or ""),
        style=str(row.get("style") or ""),
        background=str(row.get("background") or ""),
        reference_images=normalize_url_list(
            pick_field(row, "reference_images", "referenceImages"),
            field_name="reference_images",
        ),
        generated_images=normalize_url_list(
            pick_field(row, "generated_images", "generatedImages"),
            field_name="generated_images",
        ),
        created_at=_parse_timestamp(pick_field(row, "created_at", "createdAt")),
    )


def encode_url_list(urls: Sequence[str]) -> str:
    """Encode URLs the way generation records store them."""
    return json.dumps(list(urls))


def _split_delimited(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def _clean_entries(entries: list[object], field_name: str) -> list[str]:
    cleaned = [entry for entry in entries if isinstance(entry, str) and entry]
    if len(cleaned) != len(entries):
        _logger.warning(
            "Normalization degraded: dropped %s invalid %s entries",
            len(entries) - len(cleaned),
            field_name,
        )
    return cleaned


def _parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        _logger.warning("Normalization degraded: unparseable created_at %r", value)
        return None
