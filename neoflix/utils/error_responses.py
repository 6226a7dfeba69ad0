"""Builders for the structured JSON error payloads returned by the API.

Every exception handler in :mod:`neoflix.main` goes through these helpers so
payloads share one shape: request id and a timezone-aware timestamp are
filled in here rather than at each call site.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from fastapi.responses import JSONResponse

from neoflix.schemas.error import (
    ErrorResponse,
    ErrorType,
    ValidationErrorDetail,
    ValidationErrorResponse,
)
from neoflix.utils.request_context import get_request_id

__all__ = [
    "build_error_response",
    "build_validation_error_response",
    "to_json_response",
]


def _current_timestamp() -> datetime:
    """Return the payload timestamp; patched by tests for determinism."""

    return datetime.now(UTC)


def build_validation_error_response(
    *,
    errors: Sequence[ValidationErrorDetail],
    message: str,
    detail: str,
    status_code: int,
    path: str,
    error_type: ErrorType = ErrorType.VALIDATION_ERROR,
    request_id: str | None = None,
) -> ValidationErrorResponse:
    """Construct a ``ValidationErrorResponse`` listing every failing field."""

    return ValidationErrorResponse(
        error_type=error_type,
        message=message,
        detail=detail,
        status_code=status_code,
        timestamp=_current_timestamp(),
        request_id=request_id or get_request_id(),
        path=path,
        errors=list(errors),
    )


def build_error_response(
    *,
    error_type: ErrorType,
    message: str,
    detail: str | None,
    status_code: int,
    path: str,
    retry_after: int | None = None,
    request_id: str | None = None,
) -> ErrorResponse:
    """Construct a generic ``ErrorResponse``.

    ``retry_after`` is only set for failures worth retrying, such as an
    unreachable database.
    """

    return ErrorResponse(
        error_type=error_type,
        message=message,
        detail=detail,
        status_code=status_code,
        timestamp=_current_timestamp(),
        request_id=request_id or get_request_id(),
        path=path,
        retry_after=retry_after,
    )


def to_json_response(error_response: ErrorResponse) -> JSONResponse:
    """Serialise ``error_response`` using its own status code."""

    headers = None
    if error_response.retry_after is not None:
        headers = {"Retry-After": str(error_response.retry_after)}
    return JSONResponse(
        status_code=error_response.status_code,
        content=error_response.model_dump(mode="json"),
        headers=headers,
    )
