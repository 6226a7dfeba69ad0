"""Request-scoped identifier shared by middleware, handlers and logs.

``neoflix.main`` assigns every inbound request an identifier with
:func:`assign_request_id` and echoes it back in the ``X-Request-ID`` header.
A caller that already sends a usable ``X-Request-ID`` keeps its own value,
so traces can be followed across services.
"""

from __future__ import annotations

import re
import uuid
from contextvars import ContextVar, Token

from starlette.responses import Response

__all__ = [
    "REQUEST_ID_CONTEXT",
    "REQUEST_ID_HEADER",
    "assign_request_id",
    "attach_request_id",
    "clear_request_id",
    "get_request_id",
    "set_request_id",
]

REQUEST_ID_HEADER = "X-Request-ID"

# Printable token characters only; anything else is replaced by a fresh id.
_ACCEPTED_REQUEST_ID = re.compile(r"[A-Za-z0-9._:-]{1,128}")

REQUEST_ID_CONTEXT: ContextVar[str] = ContextVar("request_id", default="")


def set_request_id(request_id: str) -> Token[str]:
    return REQUEST_ID_CONTEXT.set(request_id)


def get_request_id() -> str:
    """Return the current request identifier, or ``""`` outside a request."""

    return REQUEST_ID_CONTEXT.get()


def clear_request_id(token: Token[str] | None = None) -> None:
    if token is not None:
        REQUEST_ID_CONTEXT.reset(token)
    else:
        REQUEST_ID_CONTEXT.set("")


def assign_request_id(incoming: str | None = None) -> str:
    """Store and return the identifier for the current request.

    ``incoming`` is the value of the caller's ``X-Request-ID`` header. It is
    reused when it looks like an opaque token; otherwise a UUID4 is issued.
    """

    candidate = (incoming or "").strip()
    request_id = candidate if _ACCEPTED_REQUEST_ID.fullmatch(candidate) else str(uuid.uuid4())
    set_request_id(request_id)
    return request_id


def attach_request_id(response: Response, request_id: str | None = None) -> Response:
    """Copy the request identifier onto ``response`` and return it."""

    value = request_id or get_request_id()
    if value:
        response.headers[REQUEST_ID_HEADER] = value
    return response
