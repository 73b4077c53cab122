"""
templates.py — What the text of a genuine document of a given kind contains.

Keywords say a PDF is *about* GST. A template says it *is* a GST
certificate: it carries a GSTIN in the right format and the fields every
such certificate prints (legal name, address, state). When a requirement
is matched on extracted text, the matcher checks the text against the
template of the requirement's category and uses what it finds to raise
the match confidence.

Number formats:
  PAN      ABCDE1234F               5 letters, 4 digits, 1 letter
  Aadhaar  1234 5678 9012           12 digits, optional space/hyphen groups
  GSTIN    27ABCDE1234F1Z5          state code, PAN, entity code, check digit
  CIN      U72200KA2010PTC012345    listing flag, industry, state, year, type, serial

Only categories with a recognisable layout have a template. Everything
else keeps its keyword-only confidence.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from tender_validation.keywords import CanonicalCategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentTemplate:
    """Number pattern plus named fields, each with the phrases that show it."""
    category: CanonicalCategory
    number_pattern: Optional[re.Pattern] = None
    fields: Tuple[Tuple[str, Tuple[str, ...]], ...] = ()

    @property
    def field_names(self) -> List[str]:
        return [name for name, _ in self.fields]


@dataclass(frozen=True)
class TemplateEvidence:
    category: CanonicalCategory
    document_number: Optional[str] = None
    found_fields: Tuple[str, ...] = ()
    missing_fields: Tuple[str, ...] = ()
    has_number_pattern: bool = False

    @property
    def score(self) -> float:
        """Share of expected evidence present: fields, plus the number if the
        template has a pattern for one."""
        expected = len(self.found_fields) + len(self.missing_fields)
        found = len(self.found_fields)
        if self.has_number_pattern:
            expected += 1
            found += 1 if self.document_number else 0
        if expected == 0:
            return 0.0
        return found / expected


def _template(category, number_pattern=None, **fields) -> DocumentTemplate:
    return DocumentTemplate(
        category=category,
        number_pattern=re.compile(number_pattern, re.IGNORECASE) if number_pattern else None,
        fields=tuple((name, tuple(phrases)) for name, phrases in fields.items()),
    )


_DEFAULT_TEMPLATES: Dict[CanonicalCategory, DocumentTemplate] = {
    CanonicalCategory.PAN: _template(
        CanonicalCategory.PAN,
        r"\b[A-Z]{5}[0-9]{4}[A-Z]\b",
        name=["name", "holder name", "card holder"],
        fatherName=["father", "father's name", "father name"],
        dateOfBirth=["dob", "date of birth", "birth date"],
        signature=["signature", "signed"],
    ),
    CanonicalCategory.AADHAR: _template(
        CanonicalCategory.AADHAR,
        r"\b\d{4}[\s-]?\d{4}[\s-]?\d{4}\b",
        name=["name", "holder name"],
        dateOfBirth=["dob", "date of birth", "birth date", "year of birth"],
        gender=["gender", "sex", "male", "female"],
        address=["address", "residence", "village", "district"],
    ),
    CanonicalCategory.GST: _template(
        CanonicalCategory.GST,
        r"\b\d{2}[A-Z]{5}\d{4}[A-Z][A-Z0-9][A-Z]\d\b",
        businessName=["legal name", "business name", "trade name", "firm name"],
        address=["address", "principal place", "place of business"],
        state=["state", "state code"],
    ),
    CanonicalCategory.COMPANY_REGISTRATION: _template(
        CanonicalCategory.COMPANY_REGISTRATION,
        r"\b[LU]\d{5}[A-Z]{2}\d{4}[A-Z]{3}\d{6}\b",
        companyName=["company name", "name of company", "corporate name"],
        dateOfIncorporation=[
            "date of incorporation", "incorporated on", "incorporation date",
        ],
        registeredAddress=["registered office", "registered address"],
        capital=["authorized capital", "authorised capital", "paid up capital", "share capital"],
    ),
    CanonicalCategory.WORK_EXPERIENCE: _template(
        CanonicalCategory.WORK_EXPERIENCE,
        employeeName=["this is to certify", "certify that", "name of employee", "employee name"],
        companyName=["company", "organization", "organisation", "employer"],
        designation=["designation", "position", "job title", "worked as", "employed as"],
        duration=["duration", "period", "joining date", "relieving date", "tenure"],
        certificateType=[
            "experience certificate", "experience letter", "service certificate",
            "employment certificate", "work experience",
        ],
    ),
}

DEFAULT_TEMPLATES: Mapping[CanonicalCategory, DocumentTemplate] = MappingProxyType(
    _DEFAULT_TEMPLATES
)


def _contains_phrase(text: str, phrase: str) -> bool:
    return re.search(rf"\b{re.escape(phrase)}\b", text) is not None


def inspect_text(template: DocumentTemplate, text: Optional[str]) -> TemplateEvidence:
    """
    Look for the template's document number and fields in raw ``text``.

    The number pattern runs on the original text (formats are upper-case
    and may contain hyphens); fields are matched as whole words on the
    lower-cased text.
    """
    has_pattern = template.number_pattern is not None
    if not text:
        return TemplateEvidence(
            category=template.category,
            missing_fields=tuple(template.field_names),
            has_number_pattern=has_pattern,
        )

    number = None
    if has_pattern:
        found = template.number_pattern.search(text)
        if found:
            number = found.group().upper()

    lowered = " ".join(text.lower().split())
    found_fields: List[str] = []
    missing_fields: List[str] = []
    for name, phrases in template.fields:
        if any(_contains_phrase(lowered, p) for p in phrases):
            found_fields.append(name)
        else:
            missing_fields.append(name)

    evidence = TemplateEvidence(
        category=template.category,
        document_number=number,
        found_fields=tuple(found_fields),
        missing_fields=tuple(missing_fields),
        has_number_pattern=has_pattern,
    )
    logger.debug(
        "%s template: number=%s, fields %d/%d",
        template.category.value, number, len(found_fields), len(template.fields),
    )
    return evidence


def best_evidence(
    templates: Mapping[CanonicalCategory, DocumentTemplate],
    categories: Sequence[CanonicalCategory],
    text: Optional[str],
) -> Optional[TemplateEvidence]:
    """Strongest evidence across the templates of ``categories``, or None
    when none of them has a template."""
    best: Optional[TemplateEvidence] = None
    for category in categories:
        template = templates.get(category)
        if template is None:
            continue
        evidence = inspect_text(template, text)
        if best is None or evidence.score > best.score:
            best = evidence
    return best
