"""
keywords.py — Canonical document categories and their keyword phrases.

Tender creators type required documents as free text. The same document
shows up as "PAN", "PAN Card", "Permanent Account Number" or "Income Tax
PAN". Each canonical category owns an ordered list of lower-cased phrases
and the keyword-table strategy uses them to bridge a required label and an
upload that share a phrase but not the literal label.

The table is built once and handed to the matcher. It is read-only after
construction (MappingProxyType over tuples), so worker threads can share
it without locking. Deployments that need different vocabulary can point
KEYWORD_TABLE_PATH at a JSON file of the same shape instead of patching
this module.
"""

from __future__ import annotations

import json
import logging
import re
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

_LABEL_SEPARATORS = re.compile(r"[_\-]+")


class CanonicalCategory(str, Enum):
    """Known document kinds. Order here is the order reported to clients."""
    AADHAR = "AADHAR"
    PAN = "PAN"
    GST = "GST"
    TENDER = "TENDER"
    COMPANY_REGISTRATION = "COMPANY_REGISTRATION"
    POWER_OF_ATTORNEY = "POWER_OF_ATTORNEY"
    BANK_STATEMENT = "BANK_STATEMENT"
    AUDITED_FINANCIALS = "AUDITED_FINANCIALS"
    WORK_EXPERIENCE = "WORK_EXPERIENCE"
    TECHNICAL_CAPABILITY = "TECHNICAL_CAPABILITY"
    QUALITY_CERTIFICATE = "QUALITY_CERTIFICATE"
    EMD = "EMD"
    TENDER_FEE = "TENDER_FEE"
    AFFIDAVIT = "AFFIDAVIT"
    NATIONALITY = "NATIONALITY"
    REGISTRATION = "REGISTRATION"


_DEFAULT_KEYWORDS: Dict[CanonicalCategory, List[str]] = {
    CanonicalCategory.AADHAR: [
        "aadhar", "aadhaar", "uidai", "uid", "aadhar card", "aadhaar card",
        "unique identification",
    ],
    CanonicalCategory.PAN: [
        "pan", "permanent account", "income tax", "pan card", "pan number",
        "income tax department",
    ],
    CanonicalCategory.GST: ["gst", "goods and services", "gstin"],
    CanonicalCategory.TENDER: ["tender", "bid document", "proposal"],
    CanonicalCategory.COMPANY_REGISTRATION: [
        "company registration", "moa", "aoa", "incorporation",
    ],
    CanonicalCategory.POWER_OF_ATTORNEY: ["power of attorney", "poa", "authorization"],
    CanonicalCategory.BANK_STATEMENT: ["bank statement", "bank account"],
    CanonicalCategory.AUDITED_FINANCIALS: [
        "audited", "financial statements", "balance sheet",
    ],
    CanonicalCategory.WORK_EXPERIENCE: ["work experience", "completed projects"],
    CanonicalCategory.TECHNICAL_CAPABILITY: ["technical", "capability statement"],
    CanonicalCategory.QUALITY_CERTIFICATE: ["quality", "iso", "certification"],
    CanonicalCategory.EMD: [
        "emd", "earnest money", "security deposit", "bid security",
    ],
    CanonicalCategory.TENDER_FEE: ["tender fee", "document fee"],
    CanonicalCategory.AFFIDAVIT: ["affidavit", "declaration", "undertaking"],
    CanonicalCategory.NATIONALITY: ["nationality", "citizenship"],
    CanonicalCategory.REGISTRATION: ["registration", "license", "permit"],
}


class KeywordTable:
    """
    Immutable category -> keywords mapping.

    Keywords are normalised (stripped, lower-cased, blanks and repeats
    dropped) at construction so the hot matching loop never has to. Each
    keyword also gets a whole-word pattern used to classify labels.
    """

    __slots__ = ("_entries", "_patterns")

    def __init__(self, entries: Mapping[CanonicalCategory, Iterable[str]]):
        normalised: Dict[CanonicalCategory, Tuple[str, ...]] = {}
        for category in CanonicalCategory:
            if category not in entries:
                continue
            seen: List[str] = []
            for keyword in entries[category]:
                kw = " ".join(str(keyword).lower().split())
                if kw and kw not in seen:
                    seen.append(kw)
            normalised[category] = tuple(seen)
        patterns = {
            category: tuple(re.compile(rf"\b{re.escape(kw)}\b") for kw in keywords)
            for category, keywords in normalised.items()
        }
        object.__setattr__(self, "_entries", MappingProxyType(normalised))
        object.__setattr__(self, "_patterns", MappingProxyType(patterns))

    def __setattr__(self, name, value):
        raise AttributeError("KeywordTable is immutable")

    def __iter__(self):
        return iter(self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, category) -> bool:
        return category in self._entries

    def __repr__(self) -> str:
        return f"KeywordTable({len(self._entries)} categories)"

    @property
    def categories(self) -> Tuple[CanonicalCategory, ...]:
        return tuple(self._entries)

    def keywords(self, category: CanonicalCategory) -> Tuple[str, ...]:
        return self._entries.get(category, ())

    def supported_document_types(self) -> List[str]:
        """Category names in table order."""
        return [c.value for c in self._entries]

    def keywords_for(self, document_type: str) -> Tuple[str, ...]:
        """Case-insensitive lookup by category name; empty when unknown."""
        try:
            category = CanonicalCategory(document_type.strip().upper())
        except (ValueError, AttributeError):
            return ()
        return self.keywords(category)

    def classify(self, label: str) -> List[CanonicalCategory]:
        """
        Every category with at least one keyword appearing in ``label`` as
        whole words. "pan" classifies "PAN Card" but not "Company
        Registration".
        """
        text = " ".join(_LABEL_SEPARATORS.sub(" ", (label or "").lower()).split())
        if not text:
            return []
        return [
            category for category, patterns in self._patterns.items()
            if any(p.search(text) for p in patterns)
        ]

    def category_keywords(self, categories: Sequence[CanonicalCategory]) -> List[str]:
        """Union of keywords for ``categories``, first-seen order."""
        out: List[str] = []
        for category in categories:
            for kw in self.keywords(category):
                if kw not in out:
                    out.append(kw)
        return out

    @classmethod
    def from_json(cls, path: str) -> "KeywordTable":
        """
        Load a table from a JSON object of {"CATEGORY": ["kw", ...]}.

        Unknown category names are a deploy mistake, not something to skip
        silently, so they raise ValueError.
        """
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"Keyword table must be a JSON object, got {type(raw).__name__}")

        entries: Dict[CanonicalCategory, List[str]] = {}
        for name, keywords in raw.items():
            try:
                category = CanonicalCategory(str(name).upper())
            except ValueError:
                raise ValueError(f"Unknown document category in {path}: {name!r}") from None
            if not isinstance(keywords, list):
                raise ValueError(f"Keywords for {name} must be a list")
            entries[category] = keywords

        logger.info("Loaded keyword table from %s (%d categories)", path, len(entries))
        return cls(entries)


def load_keyword_table(path: Optional[str] = None) -> KeywordTable:
    """Build the process-wide table: JSON override if given, else built-in."""
    if path:
        return KeywordTable.from_json(path)
    return KeywordTable(_DEFAULT_KEYWORDS)


def _load_default() -> KeywordTable:
    from tender_validation.config import config
    return load_keyword_table(config.keyword_table_path or None)


DEFAULT_KEYWORD_TABLE: KeywordTable = _load_default()
