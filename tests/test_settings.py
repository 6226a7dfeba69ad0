"""Unit tests covering the typed application settings implementation."""

from __future__ import annotations

import logging

import pytest

from neoflix.main import _validate_environment
from neoflix.settings import DEFAULT_NEO4J_URI, AppSettings


def test_defaults_target_local_neo4j(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NEO4J_URI", raising=False)
    monkeypatch.delenv("NEO4J_PASSWORD", raising=False)
    configured = AppSettings()

    assert configured.resolved_neo4j_uri == DEFAULT_NEO4J_URI
    assert configured.neo4j_auth is None


def test_environment_overrides_are_applied(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEO4J_URI", "neo4j+s://abc123.databases.neo4j.io")
    monkeypatch.setenv("NEO4J_USERNAME", "neoflix")
    monkeypatch.setenv("NEO4J_PASSWORD", "secret")
    monkeypatch.setenv("NEO4J_DATABASE", "movies")
    configured = AppSettings()

    assert configured.resolved_neo4j_uri == "neo4j+s://abc123.databases.neo4j.io"
    assert configured.neo4j_auth == ("neoflix", "secret")
    assert configured.neo4j_database == "movies"


@pytest.mark.parametrize(
    "uri",
    ["http://localhost:7474", "postgres://localhost/db", "bolt://", "   "],
)
def test_invalid_uri_is_rejected(uri: str) -> None:
    configured = AppSettings(neo4j_uri=uri)

    with pytest.raises(RuntimeError):
        configured.resolved_neo4j_uri


def test_cors_origins_are_normalised() -> None:
    configured = AppSettings(
        cors_allow_origins_raw=" https://neoflix.example/ , ,http://localhost:8080"
    )

    assert configured.cors_allow_origins == [
        "https://neoflix.example",
        "http://localhost:8080",
    ]


def test_log_level_numeric_falls_back_to_info() -> None:
    assert AppSettings(log_level="debug").log_level_numeric == logging.DEBUG
    assert AppSettings(log_level="chatty").log_level_numeric == logging.INFO


def test_optional_config_warnings_default(monkeypatch: pytest.MonkeyPatch) -> None:
    """Default configuration should warn when optional settings remain unset."""

    monkeypatch.delenv("NEO4J_PASSWORD", raising=False)
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)
    configured = AppSettings()

    warnings = configured.optional_config_warnings()

    assert any("NEO4J_PASSWORD" in warning for warning in warnings)
    assert any("CORS_ALLOW_ORIGINS" in warning for warning in warnings)


def test_optional_config_warnings_clear_when_values_provided(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("NEO4J_PASSWORD", "secret")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://example.com")
    configured = AppSettings()

    assert configured.optional_config_warnings() == []


def test_validate_environment_logging(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.delenv("NEO4J_PASSWORD", raising=False)
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)
    candidate = AppSettings()

    with caplog.at_level(logging.WARNING):
        _validate_environment(active_settings=candidate)

    assert "NEO4J_PASSWORD is not set" in caplog.text
