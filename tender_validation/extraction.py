"""
extraction.py — Turn uploaded file bytes into text for content matching.

File names are a weak signal. Half the uploads we see are called
"scan001.pdf" or "Document (3).pdf", and name-only matching sends those
bids back as "missing documents" even when the right PDF is attached. When
the server has the bytes, we pull the text layer out with pdfplumber and
let the matcher look at that too.

Scanned PDFs have no text layer and we don't OCR here. Those files, and
anything pdfplumber chokes on (encrypted, truncated, not really a PDF),
degrade to name-only matching for that one file. One bad attachment must
never fail the whole validation.

Extraction is per file and independent, so it runs in a thread pool.
"""

from __future__ import annotations

import io
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Tuple

import pdfplumber

from tender_validation.config import config
from tender_validation.duplicates import content_hash
from tender_validation.schemas import UploadedDocument

logger = logging.getLogger(__name__)

# (file name, raw bytes) -> text. Raise on failure; the caller degrades.
TextExtractor = Callable[[str, bytes], str]


def extract_pdf_text(name: str, data: bytes) -> str:
    """
    Concatenate the text layer of every page, up to max_pages.

    Raises whatever pdfplumber/pdfminer raises on unreadable input.
    """
    parts: List[str] = []
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        total = len(pdf.pages)
        for idx, page in enumerate(pdf.pages, start=1):
            if idx > config.extraction.max_pages:
                logger.info(
                    "%s: stopping after %d of %d pages",
                    name, config.extraction.max_pages, total,
                )
                break
            text = page.extract_text() or ""
            if text.strip():
                parts.append(text)

    logger.debug("Extracted %d chars from %s", sum(len(p) for p in parts), name)
    return "\n".join(parts)


def _safe_extract(extractor: TextExtractor, name: str, data: bytes) -> Optional[str]:
    try:
        text = extractor(name, data)
    except Exception as exc:
        # pdfminer raises its own exception zoo
        # (PDFSyntaxError, PSEOF, PdfminerException, struct.error ...).
        logger.warning("Text extraction failed for %s: %s", name, exc)
        return None

    if not text or len(text.strip()) < config.extraction.min_text_chars:
        logger.warning(
            "No usable text in %s (%d chars), likely a scan. Using file name only",
            name, len(text.strip()) if text else 0,
        )
        return None
    return text


def extract_texts(
    files: Sequence[Tuple[str, bytes]],
    extractor: TextExtractor = extract_pdf_text,
    max_workers: Optional[int] = None,
) -> List[Optional[str]]:
    """
    Run ``extractor`` over every file concurrently.

    Returns one entry per file in input order, None for files that failed
    or had no text. Two files with the same name each get their own text.
    """
    if not files:
        return []

    workers = max(1, min(max_workers or config.extraction.max_workers, len(files)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [
            pool.submit(_safe_extract, extractor, name, data)
            for name, data in files
        ]
        results = [future.result() for future in futures]

    ok = sum(1 for t in results if t is not None)
    logger.info("Text extraction: %d/%d files readable", ok, len(results))
    return results


def build_uploads(
    files: Sequence[Tuple[str, bytes]],
    extractor: TextExtractor = extract_pdf_text,
    extract_text: bool = True,
    max_workers: Optional[int] = None,
) -> List[UploadedDocument]:
    """
    Build UploadedDocument records (size, hash and, optionally, text)
    from raw (name, bytes) pairs, preserving input order.
    """
    if extract_text:
        texts = extract_texts(files, extractor=extractor, max_workers=max_workers)
    else:
        texts = [None] * len(files)

    uploads: List[UploadedDocument] = []
    for (name, data), text in zip(files, texts):
        uploads.append(UploadedDocument(
            name=name,
            text=text,
            size=len(data),
            content_hash=content_hash(data),
            extraction_failed=extract_text and text is None,
        ))
    return uploads
