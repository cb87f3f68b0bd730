"""Metadata helpers for vector store writes and filters.

Chroma only stores flat scalar metadata (str, int, float, bool), so every
write passes through ``sanitize_metadata`` first.
"""

import json
import re
from datetime import datetime, timezone
from typing import Any, Literal

_INVALID_KEY_CHARS = re.compile(r"[^a-zA-Z0-9_-]")
_VALID_KEY = re.compile(r"^[a-zA-Z0-9_-]+$")

Scalar = str | int | float | bool


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def sanitize_metadata(metadata: dict[str, Any] | None) -> dict[str, Scalar]:
    """Make metadata storable.

    None values are dropped, invalid key characters become ``_``,
    lists/dicts are JSON-encoded and anything else is stringified.
    """
    sanitized: dict[str, Scalar] = {}
    for key, value in (metadata or {}).items():
        if value is None:
            continue
        clean_key = _INVALID_KEY_CHARS.sub("_", str(key))
        if _is_scalar(value):
            sanitized[clean_key] = value
        elif isinstance(value, (dict, list, tuple, set)):
            if isinstance(value, set):
                value = sorted(value, key=str)
            sanitized[clean_key] = json.dumps(value, default=str, ensure_ascii=False)
        else:
            sanitized[clean_key] = str(value)
    return sanitized


def validate_metadata(metadata: Any) -> list[str]:
    """Return a list of problems; empty means the metadata is storable as-is."""
    if not isinstance(metadata, dict):
        return ["Metadata must be a mapping"]

    errors = []
    for key, value in metadata.items():
        if not isinstance(key, str) or not _VALID_KEY.match(key):
            errors.append(
                f'Invalid metadata key "{key}": only alphanumeric, underscore, '
                "and dash characters are allowed"
            )
        if value is not None and not _is_scalar(value):
            errors.append(
                f'Invalid metadata value type for "{key}": {type(value).__name__}. '
                "Only str, int, float and bool are supported"
            )
    return errors


def merge_metadata(*metadata_objects: dict[str, Any] | None) -> dict[str, Any]:
    """Merge left to right; later keys win."""
    result: dict[str, Any] = {}
    for metadata in metadata_objects:
        if metadata:
            result.update(metadata)
    return result


def filter_metadata(metadata: dict[str, Any], allowed_keys: list[str]) -> dict[str, Any]:
    return {key: metadata[key] for key in allowed_keys if key in metadata}


def metadata_to_where_clause(
    metadata: dict[str, Any],
    operator: Literal["and", "or"] = "and",
) -> dict[str, Any]:
    """Build a Chroma ``where`` filter from a flat mapping.

    Lists become ``$in``, dicts are taken as operator objects and scalars
    become ``$eq``. Several conditions are combined with ``$and``/``$or``.

    Example:
        >>> metadata_to_where_clause({"category": "code", "chunk_index": {"$gte": 2}})
        {'$and': [{'category': {'$eq': 'code'}}, {'chunk_index': {'$gte': 2}}]}
    """
    conditions = []
    for key, value in metadata.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            conditions.append({key: {"$in": list(value)}})
        elif isinstance(value, dict):
            conditions.append({key: value})
        else:
            conditions.append({key: {"$eq": value}})

    if not conditions:
        return {}
    if len(conditions) == 1:
        return conditions[0]
    return {f"${operator}": conditions}


def add_default_metadata(
    metadata: dict[str, Any] | None = None,
    *,
    timestamp: bool = False,
    version: str | None = None,
    source: str | None = None,
    **defaults: Any,
) -> dict[str, Any]:
    """Fill in defaults without overwriting keys already present."""
    result = dict(metadata or {})
    if timestamp:
        result.setdefault("created_at", datetime.now(timezone.utc).isoformat())
    if version:
        result.setdefault("version", version)
    if source:
        result.setdefault("source", source)
    for key, value in defaults.items():
        if result.get(key) is None:
            result[key] = value
    return result
