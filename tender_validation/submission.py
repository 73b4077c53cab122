"""
submission.py — Validate first, then submit.

The bid form must not fire the multipart submission until the document
check has come back clean. This module models that as one sequential step:

    EDITING -> VALIDATING -> SUBMITTING -> SUBMITTED
                   |              |
                   +--> EDITING <-+   (with error_messages filled in)

Validation failures (missing/duplicate documents) and transport failures
(validator or submit call raised) land in EDITING with different
messages. The form shows them differently, so they are never merged.
"""

from __future__ import annotations

import inspect
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Union

from pydantic import BaseModel, Field

from tender_validation.matcher import get_matcher
from tender_validation.schemas import ValidationResult

logger = logging.getLogger(__name__)

Validator = Callable[[Any, Any], Union[ValidationResult, Awaitable[ValidationResult]]]
Submitter = Callable[[Any], Any]


class SubmissionState(str, Enum):
    EDITING = "editing"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


class SubmissionOutcome(BaseModel):
    state: SubmissionState
    validation: Optional[ValidationResult] = None
    error_messages: List[str] = Field(default_factory=list)
    response: Any = None

    @property
    def submitted(self) -> bool:
        return self.state is SubmissionState.SUBMITTED


async def _maybe_await(value):
    if inspect.isawaitable(value):
        return await value
    return value


def _validation_messages(result: ValidationResult) -> List[str]:
    messages = [result.message] if result.message else []
    messages.extend(f"Missing: {doc}" for doc in result.missing_documents)
    messages.extend(f"Duplicate: {doc}" for doc in result.duplicate_documents)
    return messages


async def validate_then_submit(
    required_documents: Any,
    uploads: Any,
    submit: Submitter,
    validate: Optional[Validator] = None,
    on_state: Optional[Callable[[SubmissionState], None]] = None,
) -> SubmissionOutcome:
    """
    Run validation, and only on a clean verdict call ``submit(uploads)``.

    ``validate`` and ``submit`` may be plain or async callables.
    ``validate`` defaults to the local matcher. ``on_state`` is told about
    every state transition, in order.
    """
    def enter(state: SubmissionState) -> SubmissionState:
        if on_state is not None:
            on_state(state)
        return state

    validator = validate or get_matcher().validate

    enter(SubmissionState.VALIDATING)
    try:
        result = await _maybe_await(validator(required_documents, uploads))
    except Exception as exc:
        logger.error("Validation request failed: %s", exc)
        return SubmissionOutcome(
            state=enter(SubmissionState.EDITING),
            error_messages=[f"Could not validate documents: {exc}"],
        )

    if not result.valid:
        logger.info("Submission blocked: %s", result.message)
        return SubmissionOutcome(
            state=enter(SubmissionState.EDITING),
            validation=result,
            error_messages=_validation_messages(result),
        )

    enter(SubmissionState.SUBMITTING)
    try:
        response = await _maybe_await(submit(uploads))
    except Exception as exc:
        logger.error("Submission failed after successful validation: %s", exc)
        return SubmissionOutcome(
            state=enter(SubmissionState.EDITING),
            validation=result,
            error_messages=[f"Submission failed: {exc}"],
        )

    logger.info("Bid submitted (%d documents matched)", result.validated_count)
    return SubmissionOutcome(
        state=enter(SubmissionState.SUBMITTED),
        validation=result,
        response=response,
    )
