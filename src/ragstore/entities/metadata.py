"""Metadata derived from a piece of content by the metadata extractor."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ContentCategory(StrEnum):
    CODE = "code"
    DOCUMENTATION = "documentation"
    CONFIGURATION = "configuration"
    WORKFLOW = "workflow"
    TASK = "task"
    TEST = "test"
    GENERAL = "general"


class ComplexityLevel(StrEnum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


class Heading(BaseModel):
    level: int = Field(ge=1, le=6)
    text: str

    model_config = {"frozen": True}


class ExtractedMetadata(BaseModel):
    """
    Structured metadata for one chunk. Immutable once produced.

    List fields are deduplicated and keep first-seen order. Optional fields
    stay None when the corresponding extraction was not requested.
    """
    category: ContentCategory = ContentCategory.GENERAL
    complexity: ComplexityLevel | None = None
    topics: list[str] | None = None
    keywords: list[str] | None = None
    headings: list[Heading] = Field(default_factory=list)
    reading_time_minutes: int | None = None
    cross_references: list[str] | None = None
    has_code_blocks: bool = False
    code_block_count: int = 0
    has_tables: bool = False
    has_lists: bool = False
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)

    # Code specific
    code_language: str | None = None
    imports: list[str] | None = None
    exports: list[str] | None = None
    functions: list[str] | None = None
    classes: list[str] | None = None

    model_config = {"frozen": True}

    def to_metadata(self) -> dict[str, Any]:
        """Fields that were produced, ready to merge into chunk metadata."""
        return self.model_dump(mode="json", exclude_none=True)
