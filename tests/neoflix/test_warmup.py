"""Regression tests for the startup warmup and application lifespan."""

from __future__ import annotations

import logging

import pytest
from fastapi import FastAPI
from neo4j.exceptions import ServiceUnavailable

import neoflix.main as neoflix_main
import neoflix.warmup as warmup
from neoflix.db.connection import DRIVER_STATE_ATTRIBUTE
from tests.neoflix.support.fake_neo4j import FakeDriver


@pytest.mark.asyncio
async def test_warmup_database_verifies_connectivity(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO)
    driver = FakeDriver()

    assert await warmup.warmup_database(driver) is True

    assert driver.connectivity_checks == 1
    assert "Neo4j connection warmed up" in caplog.text


@pytest.mark.asyncio
async def test_warmup_database_logs_failures_without_raising(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.WARNING)
    driver = FakeDriver(error=ServiceUnavailable("connection refused"))

    assert await warmup.warmup_database(driver) is False

    assert "Neo4j warmup failed" in caplog.text


@pytest.mark.asyncio
async def test_lifespan_opens_and_closes_app_scoped_driver(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """The driver lives on ``app.state`` for the app's lifetime only."""

    driver = FakeDriver()
    monkeypatch.setattr(neoflix_main, "create_driver", lambda _settings: driver)
    app = FastAPI()

    async with neoflix_main.lifespan(app):
        assert getattr(app.state, DRIVER_STATE_ATTRIBUTE) is driver
        assert driver.connectivity_checks == 1

    assert getattr(app.state, DRIVER_STATE_ATTRIBUTE) is None
    assert driver.closed is True
