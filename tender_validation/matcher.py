"""
matcher.py — Decide whether a bid's uploads satisfy a tender's required
document list, and explain why.

Flow per call:

  1. Coerce inputs. Blank labels stay as requirements nothing can satisfy;
     malformed uploads are skipped
  2. Short-circuit: no requirements -> pass; no uploads -> all missing
  3. For each requirement, first upload whose name (then extracted text)
     satisfies matches() wins, unless another requirement needs that
     upload and this one has a different match available (see _assign)
  4. Duplicate checks: shared uploads + identical uploads
  5. Warnings, then verdict and message

validate() never raises. Anything odd in the input degrades to the
stricter verdict: an unreadable requirement or upload counts as unmatched.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from tender_validation.config import MatchingConfig, config
from tender_validation.duplicates import find_identical_uploads, find_shared_uploads
from tender_validation.keywords import (
    DEFAULT_KEYWORD_TABLE,
    CanonicalCategory,
    KeywordTable,
)
from tender_validation.schemas import MatchDetail, UploadedDocument, ValidationResult
from tender_validation.strategies import (
    MatchStrategy,
    StrategyHit,
    default_strategies,
    normalize,
)
from tender_validation.templates import (
    DEFAULT_TEMPLATES,
    DocumentTemplate,
    TemplateEvidence,
    best_evidence,
)

logger = logging.getLogger(__name__)

MSG_NO_REQUIREMENTS = "No required documents specified. Validation passed."
MSG_SUCCESS = "All required documents validated successfully!"
WARN_EXTRA_DOCUMENTS = "Extra documents uploaded beyond requirements"


class DocumentRequirementMatcher:
    """
    Stateless matcher. One instance can serve every request; the keyword
    table and strategy list are fixed at construction.

    Usage:
        matcher = DocumentRequirementMatcher()
        result = matcher.validate(["PAN Card", "GST"], ["pan.pdf", "gstin.pdf"])
    """

    def __init__(
        self,
        keyword_table: KeywordTable = DEFAULT_KEYWORD_TABLE,
        strategies: Optional[Sequence[MatchStrategy]] = None,
        settings: MatchingConfig = config.matching,
        templates: Mapping[CanonicalCategory, DocumentTemplate] = DEFAULT_TEMPLATES,
    ):
        self.keyword_table = keyword_table
        self.settings = settings
        self.templates = templates
        self.strategies: Tuple[MatchStrategy, ...] = tuple(
            strategies if strategies is not None
            else default_strategies(keyword_table, settings)
        )
        self._weights = {
            "direct_substring": settings.direct_weight,
            "keyword_table": settings.keyword_weight,
            "word_overlap": settings.overlap_weight,
        }

    # ── Matching predicate ──────────────────────────────────────────

    def find_match(self, required: str, candidate: str) -> Optional[StrategyHit]:
        """First strategy that fires, or None. Normalises both sides."""
        req = normalize(required)
        cand = normalize(candidate)
        if not req or not cand:
            return None
        for strategy in self.strategies:
            hit = strategy.attempt(req, cand)
            if hit is not None:
                return hit
        return None

    def matches(self, required: str, candidate: str) -> bool:
        return self.find_match(required, candidate) is not None

    # ── Validation ──────────────────────────────────────────────────

    def validate(self, required_documents: Any, uploads: Any) -> ValidationResult:
        """
        Validate one submission.

        ``required_documents`` is a sequence of labels. ``uploads`` is a
        sequence of file names, UploadedDocument objects, or dicts in the
        UploadedDocument shape (snake_case or camelCase). Either may be
        None.
        """
        required, blank_count = _clean_required(required_documents)
        docs = _coerce_uploads(uploads)

        warnings: List[str] = []
        if blank_count:
            warnings.append(f"{blank_count} blank required document label(s) cannot be matched")

        if not required:
            logger.info("No required documents; validation passes trivially")
            return ValidationResult(
                valid=True, message=MSG_NO_REQUIREMENTS, warnings=warnings,
            )

        if not docs:
            logger.info("No uploads for %d required documents", len(required))
            return ValidationResult(
                valid=False,
                message="No documents uploaded. Required: " + ", ".join(required),
                missing_documents=list(required),
                warnings=warnings,
            )

        matched: List[str] = []
        missing: List[str] = []
        details: List[MatchDetail] = []
        assignments: List[Tuple[str, int, str]] = []

        # Repeated labels ("PAN", "pan ") share one entry
        options: Dict[str, Dict[int, MatchDetail]] = {}
        for label in required:
            req = normalize(label)
            if req not in options:
                options[req] = self._matching_uploads(label, req, docs)
        chosen = self._assign(options)

        for label in required:
            position = chosen.get(normalize(label))
            if position is None:
                missing.append(label)
                logger.debug("Requirement '%s' not satisfied", label)
                continue
            detail = options[normalize(label)][position]
            if detail.required != label:
                detail = detail.model_copy(update={"required": label})
            matched.append(f"{label} -> {detail.upload}")
            details.append(detail)
            assignments.append((label, position, detail.upload))
            logger.debug(
                "Requirement '%s' -> '%s' via %s on %s (confidence=%.2f)",
                label, detail.upload, detail.strategy, detail.source, detail.confidence,
            )

        duplicates: List[str] = []
        if self.settings.flag_shared_uploads:
            duplicates.extend(find_shared_uploads(assignments))
        duplicates.extend(find_identical_uploads(docs))

        if len(matched) > len(required):
            warnings.append(WARN_EXTRA_DOCUMENTS)

        failed = [d.name for d in docs if d.extraction_failed]
        if failed:
            warnings.append("Text extraction failed for: " + ", ".join(failed))

        for label in missing:
            if label.strip() and not self.keyword_table.classify(label):
                warnings.append(f"Unrecognised required document type: {label}")

        valid = not missing and not duplicates
        if duplicates:
            message = "Duplicate documents detected: " + ", ".join(duplicates)
        elif missing:
            message = "Missing required documents: " + ", ".join(missing)
        else:
            message = MSG_SUCCESS

        logger.info(
            "Validation %s: %d/%d matched, %d missing, %d duplicate, %d warnings",
            "PASSED" if valid else "FAILED",
            len(matched), len(required), len(missing), len(duplicates), len(warnings),
        )

        return ValidationResult(
            valid=valid,
            message=message,
            matched_documents=matched,
            missing_documents=missing,
            duplicate_documents=duplicates,
            warnings=warnings,
            match_details=details,
        )

    def _matching_uploads(
        self,
        label: str,
        req: str,
        docs: Sequence[UploadedDocument],
    ) -> Dict[int, MatchDetail]:
        """Every upload satisfying ``label``, keyed by position, in upload order."""
        if not req:
            return {}
        found: Dict[int, MatchDetail] = {}
        for position, doc in enumerate(docs):
            detail = self._match_upload(label, req, doc)
            if detail is not None:
                found[position] = detail
        return found

    def _assign(self, options: Mapping[str, Mapping[int, MatchDetail]]) -> Dict[str, int]:
        """
        Pick one upload per requirement.

        Each requirement takes its first matching upload that no other
        requirement holds. When all of its matches are held, an earlier
        requirement is moved to another upload it also matches if that
        frees one up. Only when no such move exists does the requirement
        fall back to its first match, which is then a shared upload.

        With flag_shared_uploads off it is plain first-match-wins.
        """
        if not self.settings.flag_shared_uploads:
            return {req: next(iter(found)) for req, found in options.items() if found}

        owner: Dict[int, str] = {}

        def claim(req: str, visited: set) -> bool:
            for position in options[req]:
                if position not in owner:
                    owner[position] = req
                    return True
            for position in options[req]:
                if position in visited:
                    continue
                visited.add(position)
                if claim(owner[position], visited):
                    owner[position] = req
                    return True
            return False

        for req, found in options.items():
            if found and not claim(req, set()):
                logger.debug("No free upload left for '%s'", req)

        held = {req: position for position, req in owner.items()}
        return {
            req: held.get(req, next(iter(found)))
            for req, found in options.items() if found
        }

    def _match_upload(
        self,
        label: str,
        req: str,
        doc: UploadedDocument,
    ) -> Optional[MatchDetail]:
        for source, raw in (("name", doc.name), ("text", doc.text)):
            cand = normalize(raw)
            if not cand:
                continue
            hit = self.find_match(req, cand)
            if hit is not None:
                return self._detail(label, doc, source, hit, req, cand)
        return None

    def _detail(
        self,
        label: str,
        doc: UploadedDocument,
        source: str,
        hit: StrategyHit,
        req: str,
        cand: str,
    ) -> MatchDetail:
        categories = self.keyword_table.classify(req)
        evidence = None
        if source == "text":
            evidence = best_evidence(self.templates, categories, doc.text)
        score = self.confidence(hit, categories, cand, evidence)
        return MatchDetail(
            required=label,
            upload=doc.name,
            strategy=hit.strategy,
            source=source,
            keyword=hit.keyword,
            categories=[c.value for c in categories],
            confidence=score,
            confidence_level=self.confidence_level(score),
            document_number=evidence.document_number if evidence else None,
            validated_fields=list(evidence.found_fields) if evidence else [],
            missing_fields=list(evidence.missing_fields) if evidence else [],
        )

    # ── Confidence ──────────────────────────────────────────────────

    def confidence(
        self,
        hit: StrategyHit,
        categories: Sequence[CanonicalCategory],
        candidate: str,
        evidence: Optional[TemplateEvidence] = None,
    ) -> float:
        """
        Strategy base weight, raised towards 1.0 by the fraction of the
        label's category keywords present in the candidate, then raised
        again by the share of template evidence (document number, expected
        fields) found in the text.

        More keyword hits never lower the score, and neither does more
        template evidence. A direct substring match is already certain and
        stays at its weight.
        """
        base = self._weights.get(hit.strategy, self.settings.overlap_weight)
        if base >= 1.0:
            return round(base, 4)

        score = base
        keywords = self.keyword_table.category_keywords(categories)
        if keywords:
            hits = sum(1 for kw in keywords if kw in candidate)
            score = base + (1.0 - base) * hits / len(keywords)
        if evidence is not None:
            score = score + (1.0 - score) * evidence.score
        return round(min(1.0, score), 4)

    def confidence_level(self, score: float) -> str:
        if score >= self.settings.high_confidence_threshold:
            return "HIGH"
        elif score >= self.settings.medium_confidence_threshold:
            return "MEDIUM"
        return "LOW"


def _clean_required(required_documents: Any) -> Tuple[List[str], int]:
    """
    Labels verbatim (case, order), plus how many are blank.

    Blank and None labels are kept: they are requirements nothing can
    satisfy, so they end up in missing_documents ("" for None). A lone
    string or scalar counts as a one-item list.
    """
    if required_documents is None:
        return [], 0
    if isinstance(required_documents, (str, int, float)):
        required_documents = [required_documents]

    try:
        items = list(required_documents)
    except TypeError:
        logger.warning("Required documents is not iterable: %r", type(required_documents))
        return [], 0

    labels: List[str] = []
    blank = 0
    for item in items:
        label = "" if item is None else (item if isinstance(item, str) else str(item))
        if not label.strip():
            blank += 1
        labels.append(label)
    return labels, blank


def _coerce_uploads(uploads: Any) -> List[UploadedDocument]:
    if uploads is None:
        return []
    if isinstance(uploads, (str, UploadedDocument, dict)):
        uploads = [uploads]

    try:
        items: Iterable[Any] = list(uploads)
    except TypeError:
        logger.warning("Uploads is not iterable: %r", type(uploads))
        return []

    docs: List[UploadedDocument] = []
    for item in items:
        if isinstance(item, UploadedDocument):
            doc = item
        elif isinstance(item, str):
            doc = UploadedDocument(name=item)
        elif isinstance(item, dict):
            try:
                doc = UploadedDocument.model_validate(item)
            except ValidationError as exc:
                logger.warning("Skipping malformed upload record: %s", exc.errors()[:1])
                continue
        else:
            logger.warning("Skipping upload of unsupported type %s", type(item).__name__)
            continue

        if not doc.name or not doc.name.strip():
            logger.debug("Skipping upload with blank name")
            continue
        docs.append(doc)
    return docs


_default_matcher: Optional[DocumentRequirementMatcher] = None


def get_matcher() -> DocumentRequirementMatcher:
    """Process-wide matcher built from the default keyword table."""
    global _default_matcher
    if _default_matcher is None:
        _default_matcher = DocumentRequirementMatcher()
    return _default_matcher


def validate(required_documents: Any, uploads: Any) -> ValidationResult:
    """Shortcut for get_matcher().validate(...)."""
    return get_matcher().validate(required_documents, uploads)


def matches(required: str, candidate: str) -> bool:
    return get_matcher().matches(required, candidate)
