"""
schemas.py — Pydantic v2 models for the validation contract.

ValidationResult is the wire contract shared with the bid-submission UI.
The UI reads camelCase (matchedDocuments, missingDocuments, ...), Python
code uses snake_case, and the alias generator bridges the two. Every list
defaults to empty so callers never branch on None, and a payload missing a
field parses to the default instead of failing.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class UploadedDocument(_WireModel):
    """One uploaded file. Only the name is guaranteed."""
    name: str
    text: Optional[str] = Field(
        default=None,
        description="Extracted text content, when an extractor ran",
    )
    size: Optional[int] = Field(default=None, ge=0, description="Size in bytes")
    content_hash: Optional[str] = Field(default=None, description="MD5 hex digest")
    extraction_failed: bool = Field(default=False)


class MatchDetail(_WireModel):
    """Why a required document counted as satisfied."""
    required: str
    upload: str
    strategy: str = Field(..., description="direct_substring, keyword_table or word_overlap")
    source: Literal["name", "text"] = "name"
    keyword: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    confidence_level: Literal["HIGH", "MEDIUM", "LOW"] = "LOW"
    # Template evidence, only for matches on extracted text
    document_number: Optional[str] = None
    validated_fields: List[str] = Field(default_factory=list)
    missing_fields: List[str] = Field(default_factory=list)


class ValidationResult(_WireModel):
    """Verdict for one submission. Built once, never mutated."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True,
    )

    valid: bool = False
    message: str = ""
    matched_documents: List[str] = Field(default_factory=list)
    missing_documents: List[str] = Field(default_factory=list)
    duplicate_documents: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    match_details: List[MatchDetail] = Field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def has_duplicates(self) -> bool:
        return bool(self.duplicate_documents)

    @property
    def validated_count(self) -> int:
        return len(self.matched_documents)

    @property
    def missing_count(self) -> int:
        return len(self.missing_documents)


class ValidationRequest(_WireModel):
    """Body of the name-based validation endpoint.

    Null entries are accepted here. The matcher reports a null required
    document as missing and skips a null file name.
    """
    required_documents: List[Optional[str]] = Field(default_factory=list)
    uploaded_file_names: List[Optional[str]] = Field(default_factory=list)
