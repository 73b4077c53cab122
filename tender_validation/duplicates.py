"""
duplicates.py — Duplicate upload detection.

Two separate problems end up in the same `duplicateDocuments` list:

  1. Identical uploads. The same PDF attached twice (often renamed), which
     inflates the bid and sometimes hides a missing document. Detected by
     MD5 of the bytes when we have them, otherwise by file name + size.

  2. Shared uploads. One file picked to satisfy two different
     requirements, e.g. "pan_gst_combo.pdf" for both "PAN" and "GST".
     Evaluators asked for these to block submission: each required
     document has to be its own file so it can be checked individually.
     Matching is heuristic, so a file that merely shares a generic word
     ("certificate") with a second requirement is not a conflict as long
     as another upload satisfies that requirement. Only an upload nothing
     else can stand in for is reported.

Listing the same requirement twice ("PAN", "pan") is NOT a conflict; the
tender form allows repeated rows and we compare normalised labels.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Dict, List, Sequence, Tuple

from tender_validation.schemas import UploadedDocument
from tender_validation.strategies import normalize

logger = logging.getLogger(__name__)


def content_hash(data: bytes) -> str:
    """MD5 hex digest of the file bytes. Not used for security."""
    return hashlib.md5(data, usedforsecurity=False).hexdigest()


def find_identical_uploads(uploads: Sequence[UploadedDocument]) -> List[str]:
    """
    Return "<later> (duplicate of <first>)" for every repeat upload.

    Uploads with a content hash are compared by hash only. Without one,
    name plus size is used. A bare name collision on its own is not
    reported.
    """
    first_by_hash: Dict[str, str] = {}
    first_by_name_size: Dict[Tuple[str, int], str] = {}
    duplicates: List[str] = []

    for upload in uploads:
        original = None
        if upload.content_hash:
            original = first_by_hash.get(upload.content_hash)
            if original is None:
                first_by_hash[upload.content_hash] = upload.name

        if original is None and upload.content_hash is None and upload.size is not None:
            key = (normalize(upload.name), upload.size)
            original = first_by_name_size.get(key)
            if original is None:
                first_by_name_size[key] = upload.name

        if original is not None:
            duplicates.append(f"{upload.name} (duplicate of {original})")

    if duplicates:
        logger.warning("Identical uploads detected: %s", duplicates)
    return duplicates


def find_shared_uploads(assignments: Sequence[Tuple[str, int, str]]) -> List[str]:
    """
    Report uploads chosen for more than one distinct requirement.

    ``assignments`` is the ordered list of (required label, upload
    position, upload name) triples the matcher produced. Position tells
    apart two files that happen to share a name. The matcher only hands a
    taken upload to a second requirement when nothing else matches, so
    every entry here is a real conflict. Output order follows first use.
    """
    labels_by_upload: Dict[int, List[str]] = {}
    names: Dict[int, str] = {}
    seen_labels: Dict[int, set] = {}

    for label, position, upload in assignments:
        key = normalize(label)
        bucket = seen_labels.setdefault(position, set())
        if key in bucket:
            continue
        bucket.add(key)
        names.setdefault(position, upload)
        labels_by_upload.setdefault(position, []).append(label)

    shared = [
        f"{names[position]} (matched by: {', '.join(labels)})"
        for position, labels in labels_by_upload.items()
        if len(labels) > 1
    ]
    if shared:
        logger.warning("Uploads satisfying several requirements: %s", shared)
    return shared
