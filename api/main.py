import logging
from typing import List, Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

from tender_validation.config import config
from tender_validation.extraction import build_uploads
from tender_validation.keywords import DEFAULT_KEYWORD_TABLE
from tender_validation.matcher import get_matcher
from tender_validation.schemas import ValidationRequest

logger = logging.getLogger("tender_validation.api")

app = FastAPI(title="Tender document validation")
app.add_middleware(CORSMiddleware,
    allow_origins=list(config.api.cors_origins),
    allow_methods=["*"], allow_headers=["*"])

matcher = get_matcher()


def _split_required(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def _is_pdf(upload: UploadFile) -> bool:
    if upload.content_type == "application/pdf":
        return True
    return bool(upload.filename) and upload.filename.lower().endswith(config.api.supported_formats)


@app.post("/api/bids/validate-documents")
def validate_documents(request: ValidationRequest):
    """Name-based check; same verdict the bid form computes client-side."""
    result = matcher.validate(request.required_documents, request.uploaded_file_names)
    return result.to_wire()


@app.post("/api/bids/validate-content")
async def validate_content(
    required_documents: str = Form("", alias="requiredDocuments"),
    files: Optional[List[UploadFile]] = File(None),
):
    """Content-based check on the uploaded PDFs."""
    required = _split_required(required_documents)
    received = [f for f in (files or []) if f.filename]

    invalid = [f.filename for f in received if not _is_pdf(f)]
    if invalid:
        logger.warning("Rejected non-PDF files: %s", invalid)
        raise HTTPException(
            status_code=400,
            detail="Only PDF files are allowed. Invalid files: " + ", ".join(invalid),
        )

    limit = config.api.max_file_size_mb * 1024 * 1024
    payload = []
    for f in received:
        data = await f.read()
        if len(data) > limit:
            raise HTTPException(
                status_code=413,
                detail=f"{f.filename} is larger than {config.api.max_file_size_mb} MB",
            )
        if data:
            payload.append((f.filename, data))

    logger.info("Content validation: %d required, %d files", len(required), len(payload))
    uploads = await run_in_threadpool(build_uploads, payload)
    return matcher.validate(required, uploads).to_wire()


@app.get("/api/documents/types")
def list_document_types():
    return DEFAULT_KEYWORD_TABLE.supported_document_types()


@app.get("/api/documents/types/{document_type}/keywords")
def get_keywords(document_type: str):
    keywords = DEFAULT_KEYWORD_TABLE.keywords_for(document_type)
    if not keywords:
        raise HTTPException(status_code=404, detail=f"Unknown document type: {document_type}")
    return {"documentType": document_type.upper(), "keywords": list(keywords)}
