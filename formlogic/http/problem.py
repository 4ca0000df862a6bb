"""Problem+JSON utilities and global exception handlers.

Defines the RFC 7807 media type and the handler callables that turn engine
exceptions into application/problem+json responses:
- SubmissionRejected        -> 422 VALIDATION_FAILED, with per-field errors
- MalformedDefinitionError  -> 400, code taken from the exception
- RequestValidationError    -> 422 REQUEST_INVALID
- anything else             -> 500
"""

from __future__ import annotations

from typing import Any, Dict, Mapping
import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from formlogic.logic.errors import MalformedDefinitionError, SubmissionRejected
from formlogic.models.evaluation import FieldState

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def dump_states(states: Mapping[str, FieldState]) -> Dict[str, Dict[str, bool]]:
    """Serialize a state map keeping field order."""
    return {fid: state.model_dump() for fid, state in states.items()}


def summary_message(exc: SubmissionRejected) -> str:
    """First error message, suffixed with how many more errors were found."""
    message = str(exc)
    extra = sum(len(messages) for messages in exc.errors.values()) - 1
    if extra == 1:
        return f"{message} (and 1 more error)"
    if extra > 1:
        return f"{message} (and {extra} more errors)"
    return message


def submission_problem(exc: SubmissionRejected) -> Dict[str, Any]:
    message = summary_message(exc)
    return {
        "title": "Unprocessable Content",
        "status": 422,
        "detail": message,
        "message": message,
        "code": "VALIDATION_FAILED",
        "errors": exc.errors,
        "states": dump_states(exc.result.states),
    }


async def handle_submission_rejected(request: Request, exc: SubmissionRejected) -> JSONResponse:
    logger.info(
        "submission_rejected mode=%s fields=%s",
        exc.result.mode,
        list(exc.errors),
    )
    headers = {"Precognition": "true"} if exc.result.mode == "partial" else None
    return JSONResponse(
        submission_problem(exc), status_code=422, media_type=PROBLEM_MEDIA_TYPE, headers=headers
    )


async def handle_malformed_definition(request: Request, exc: MalformedDefinitionError) -> JSONResponse:
    problem: Dict[str, Any] = {
        "title": "Malformed Form Definition",
        "status": 400,
        "detail": exc.detail,
        "code": exc.code,
    }
    if exc.field_id is not None:
        problem["field_id"] = exc.field_id
    if exc.errors:
        problem["errors"] = jsonable_encoder(exc.errors)
    logger.info("error_handler.handle code=%s field_id=%s", exc.code, exc.field_id)
    return JSONResponse(problem, status_code=400, media_type=PROBLEM_MEDIA_TYPE)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problem = {
        "title": "Invalid Request",
        "status": 422,
        "detail": "Request validation failed",
        "code": "REQUEST_INVALID",
        "errors": jsonable_encoder(exc.errors()),
    }
    return JSONResponse(problem, status_code=422, media_type=PROBLEM_MEDIA_TYPE)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return JSONResponse(
        {"title": "Internal Server Error", "status": 500},
        status_code=500,
        media_type=PROBLEM_MEDIA_TYPE,
    )


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "dump_states",
    "summary_message",
    "submission_problem",
    "handle_submission_rejected",
    "handle_malformed_definition",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
