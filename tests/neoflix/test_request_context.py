"""Tests for request identifier assignment and propagation."""

from __future__ import annotations

import uuid

import pytest
from starlette.responses import Response

from neoflix.utils.request_context import (
    REQUEST_ID_HEADER,
    assign_request_id,
    attach_request_id,
    get_request_id,
)


def test_assign_reuses_well_formed_incoming_id() -> None:
    assert assign_request_id("  trace-42:a.b_c  ") == "trace-42:a.b_c"
    assert get_request_id() == "trace-42:a.b_c"


@pytest.mark.parametrize("incoming", [None, "", "has spaces", "x" * 129, "bad\nheader"])
def test_assign_generates_uuid_for_missing_or_unusable_id(incoming: str | None) -> None:
    request_id = assign_request_id(incoming)

    assert str(uuid.UUID(request_id)) == request_id
    assert get_request_id() == request_id


def test_attach_prefers_explicit_id_over_context() -> None:
    assign_request_id("from-context")

    explicit = attach_request_id(Response(), "explicit")
    implicit = attach_request_id(Response())

    assert explicit.headers[REQUEST_ID_HEADER] == "explicit"
    assert implicit.headers[REQUEST_ID_HEADER] == "from-context"


def test_attach_without_request_leaves_headers_untouched() -> None:
    response = attach_request_id(Response())

    assert REQUEST_ID_HEADER not in response.headers
