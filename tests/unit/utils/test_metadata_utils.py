"""Tests for metadata helpers and input validation."""

import json
from pathlib import Path

import pytest

from ragstore.errors import ErrorKind, StoreError
from ragstore.utils.metadata import (
    add_default_metadata,
    filter_metadata,
    merge_metadata,
    metadata_to_where_clause,
    sanitize_metadata,
    validate_metadata,
)
from ragstore.utils.validation import validate_chunking, validate_collection_name


class TestSanitizeMetadata:

    def test_scalars_kept(self):
        metadata = {"title": "Guide", "page": 3, "score": 0.5, "draft": False}
        assert sanitize_metadata(metadata) == metadata

    def test_none_dropped_and_keys_cleaned(self):
        result = sanitize_metadata({"file name": "a.md", "author.email": "x@y", "missing": None})
        assert result == {"file_name": "a.md", "author_email": "x@y"}

    def test_collections_json_encoded(self):
        result = sanitize_metadata({"tags": ["a", "b"], "extra": {"k": 1}, "ids": {"z", "y"}})
        assert json.loads(result["tags"]) == ["a", "b"]
        assert json.loads(result["extra"]) == {"k": 1}
        assert json.loads(result["ids"]) == ["y", "z"]

    def test_other_values_stringified(self):
        result = sanitize_metadata({"path": Path("docs/a.md")})
        assert result["path"] == str(Path("docs/a.md"))

    def test_empty(self):
        assert sanitize_metadata(None) == {}


class TestValidateMetadata:

    def test_valid(self):
        assert validate_metadata({"a": 1, "b-c": "x", "d_e": None}) == []

    def test_invalid_key_and_value(self):
        errors = validate_metadata({"bad key": 1, "tags": ["a"]})
        assert len(errors) == 2
        assert "bad key" in errors[0]
        assert "list" in errors[1]

    def test_not_a_mapping(self):
        assert validate_metadata(["a"]) == ["Metadata must be a mapping"]


class TestMetadataHelpers:

    def test_merge_later_wins(self):
        assert merge_metadata({"a": 1, "b": 1}, None, {"b": 2}) == {"a": 1, "b": 2}

    def test_filter(self):
        assert filter_metadata({"a": 1, "b": 2}, ["b", "c"]) == {"b": 2}

    def test_where_single_condition(self):
        assert metadata_to_where_clause({"category": "code"}) == {"category": {"$eq": "code"}}

    def test_where_multiple_conditions(self):
        where = metadata_to_where_clause({"category": ["code", "test"], "chunk_index": {"$gte": 2}})
        assert where == {
            "$and": [
                {"category": {"$in": ["code", "test"]}},
                {"chunk_index": {"$gte": 2}},
            ]
        }

    def test_where_or_and_empty(self):
        where = metadata_to_where_clause({"a": 1, "b": 2}, operator="or")
        assert list(where) == ["$or"]
        assert metadata_to_where_clause({"a": None}) == {}

    def test_add_default_metadata(self):
        result = add_default_metadata({"source": "kept"}, timestamp=True, version="2", source="ignored", lang="en")
        assert result["source"] == "kept"
        assert result["version"] == "2"
        assert result["lang"] == "en"
        assert "created_at" in result


class TestValidation:

    @pytest.mark.parametrize("name", ["notes", "my-collection_1.v2", "ab", "a" * 63])
    def test_valid_collection_names(self, name):
        validate_collection_name(name)

    @pytest.mark.parametrize("name", ["", "a", "-notes", "notes-", "my notes", "a" * 64, "notes!"])
    def test_invalid_collection_names(self, name):
        with pytest.raises(StoreError) as exc_info:
            validate_collection_name(name)
        assert exc_info.value.kind is ErrorKind.VALIDATION

    @pytest.mark.parametrize("size,overlap", [(0, 0), (100, 100), (100, -1)])
    def test_invalid_chunking(self, size, overlap):
        with pytest.raises(StoreError) as exc_info:
            validate_chunking(size, overlap)
        assert exc_info.value.kind is ErrorKind.VALIDATION

    def test_valid_chunking(self):
        validate_chunking(100, 0)
        validate_chunking(100, 99)
