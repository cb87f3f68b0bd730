"""Utility functions for ragstore."""

from .logging import configure_logging
from .metadata import (
    add_default_metadata,
    filter_metadata,
    merge_metadata,
    metadata_to_where_clause,
    sanitize_metadata,
    validate_metadata,
)
from .performance import timer
from .validation import validate_collection_name

__all__ = [
    "add_default_metadata",
    "configure_logging",
    "filter_metadata",
    "merge_metadata",
    "metadata_to_where_clause",
    "sanitize_metadata",
    "timer",
    "validate_collection_name",
    "validate_metadata",
]
