"""
config.py — Central configuration for the document validation service.

All tunable params live here. The matcher, the extraction adapter and the
HTTP layer each read their own section, and every section can be
overridden from the environment so the same image runs locally and on the
staging cluster without code changes.

Confidence buckets: >= 0.90 HIGH, >= 0.60 MEDIUM, anything else LOW.
"""

from dataclasses import dataclass, field
import os
import logging

logger = logging.getLogger(__name__)


def _split_env(name: str, default: str) -> tuple:
    raw = os.getenv(name, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass
class MatchingConfig:
    """
    Knobs for the requirement matcher.

    min_token_length is exclusive: word-overlap only fires for tokens
    *longer* than this. At 3, "pan" and "gst" never match as bare tokens
    (they go through the keyword table instead) while "bank", "audit" and
    "experience" do.

    Strategy weights are the starting confidence for a match found by that
    strategy. Keyword hits in the candidate push it towards 1.0.
    """
    min_token_length: int = 3
    token_split_pattern: str = r"[\s,_-]+"

    direct_weight: float = 1.0
    keyword_weight: float = 0.6
    overlap_weight: float = 0.4

    high_confidence_threshold: float = 0.90
    medium_confidence_threshold: float = 0.60

    # Same upload picked for two different requirements is a conflict.
    # Turning this off restores the old client behaviour (accept silently).
    flag_shared_uploads: bool = True


@dataclass
class ExtractionConfig:
    """
    Text extraction for the content-based variant.

    Extraction runs one thread per file. Eight workers is plenty for the
    usual 5-15 documents in a bid; more just contends on the GIL since
    pdfplumber is pure Python.
    """
    max_workers: int = int(os.getenv("EXTRACTION_WORKERS", "8"))
    # Pages with fewer chars than this are most likely scans. We don't OCR,
    # so the file degrades to name-only matching.
    min_text_chars: int = 20
    max_pages: int = 50


@dataclass
class ApiConfig:
    cors_origins: tuple = field(
        default_factory=lambda: _split_env("CORS_ORIGINS", "http://localhost:4200")
    )
    max_file_size_mb: int = int(os.getenv("MAX_UPLOAD_MB", "10"))
    supported_formats: tuple = (".pdf",)


@dataclass
class Config:
    """Top-level config holding one section per component."""
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    api: ApiConfig = field(default_factory=ApiConfig)

    # Optional JSON file replacing the built-in keyword table
    keyword_table_path: str = os.getenv("KEYWORD_TABLE_PATH", "")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self):
        """Validate config on startup so a bad deploy fails immediately
        instead of quietly approving every bid."""
        m = self.matching
        for name in ("direct_weight", "keyword_weight", "overlap_weight"):
            value = getattr(m, name)
            if not 0 <= value <= 1:
                raise ValueError(f"{name} must be [0,1], got {value}")

        if not 0 <= m.medium_confidence_threshold <= m.high_confidence_threshold <= 1:
            raise ValueError(
                "Confidence thresholds must satisfy 0 <= medium <= high <= 1, "
                f"got medium={m.medium_confidence_threshold}, "
                f"high={m.high_confidence_threshold}"
            )

        if m.min_token_length < 0:
            raise ValueError(f"min_token_length must be >= 0, got {m.min_token_length}")

        if self.extraction.max_workers < 1:
            raise ValueError(
                f"Extraction workers must be >= 1, got {self.extraction.max_workers}"
            )

        if not (m.direct_weight >= m.keyword_weight >= m.overlap_weight):
            logger.warning(
                "Strategy weights are not ordered (direct=%.2f, keyword=%.2f, "
                "overlap=%.2f). Weaker strategies will outscore stronger ones.",
                m.direct_weight, m.keyword_weight, m.overlap_weight,
            )


# Shared instance imported by every module
config = Config()
