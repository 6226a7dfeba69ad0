"""Pytest configuration shared by every Neoflix test module."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from neoflix.settings import get_settings
from neoflix.utils.request_context import clear_request_id


@pytest.fixture(autouse=True)
def _isolate_process_state() -> Iterator[None]:
    """Drop cached settings and any leftover request id after each test."""

    yield
    get_settings.cache_clear()
    clear_request_id()
