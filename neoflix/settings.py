"""Centralized configuration management for the Neoflix favorites API."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from urllib.parse import urlsplit

from dotenv import load_dotenv
from pydantic import Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load a local .env before the settings singleton is built so scripts and the
# API observe the same environment.
load_dotenv()

# -- Application-wide constants -------------------------------------------------

DEFAULT_NEO4J_URI = "neo4j://localhost:7687"
DEFAULT_NEO4J_USERNAME = "neo4j"
NEO4J_URI_SCHEMES = (
    "neo4j",
    "neo4j+s",
    "neo4j+ssc",
    "bolt",
    "bolt+s",
    "bolt+ssc",
)
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_SLOW_QUERY_THRESHOLD = 0.1


def _normalize_origin(origin: str) -> str:
    """Return the origin stripped of whitespace and trailing slashes."""

    return origin.strip().rstrip("/")


class AppSettings(BaseSettings):
    """Typed configuration surface built on top of ``pydantic-settings``.

    Besides the raw environment values the class exposes a few derived
    helpers (validated driver URI, auth tuple, CORS origins) so that the
    driver factory and the FastAPI app do not repeat parsing logic.
    """

    _explicit_neo4j_password: bool = PrivateAttr(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    def __init__(self, **values: object) -> None:
        """Capture explicit overrides prior to delegating to ``BaseSettings``."""

        normalized_keys = {str(key).lower() for key in values}
        super().__init__(**values)
        self._explicit_neo4j_password = "neo4j_password" in normalized_keys
        password_env = os.getenv("NEO4J_PASSWORD")
        if password_env is not None and password_env.strip():
            self._explicit_neo4j_password = True

    neo4j_uri: str = Field(
        default=DEFAULT_NEO4J_URI,
        alias="NEO4J_URI",
        description=(
            "Connection URI for the Neo4j server. Both routing (neo4j://) and"
            " direct (bolt://) schemes are accepted, with or without TLS."
        ),
    )
    neo4j_username: str = Field(
        default=DEFAULT_NEO4J_USERNAME,
        alias="NEO4J_USERNAME",
        description="Username used for basic authentication against Neo4j.",
    )
    neo4j_password: str | None = Field(
        default=None,
        alias="NEO4J_PASSWORD",
        description="Password used for basic authentication against Neo4j.",
    )
    neo4j_database: str | None = Field(
        default=None,
        alias="NEO4J_DATABASE",
        description=(
            "Name of the database sessions should target. Leaving it unset"
            " lets the server pick its configured default database."
        ),
    )
    cors_allow_origins_raw: str | None = Field(
        default=None,
        alias="CORS_ALLOW_ORIGINS",
        description="Comma-separated list of additional CORS origins.",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        alias="LOG_LEVEL",
        description="Root logging level (e.g. INFO, DEBUG, WARNING).",
    )
    slow_query_threshold: float = Field(
        default=DEFAULT_SLOW_QUERY_THRESHOLD,
        alias="SLOW_QUERY_THRESHOLD",
        description=(
            "Threshold in seconds after which a write transaction is logged as"
            " slow by the monitoring helper."
        ),
    )

    @property
    def resolved_neo4j_uri(self) -> str:
        """Return the configured URI after validating its scheme and host."""

        uri = self.neo4j_uri.strip()
        if not uri:
            raise RuntimeError(
                "NEO4J_URI is set but empty. Provide a connection URI such as"
                f" {DEFAULT_NEO4J_URI}."
            )

        parts = urlsplit(uri)
        if parts.scheme not in NEO4J_URI_SCHEMES:
            raise RuntimeError(
                "NEO4J_URI must use one of the schemes "
                f"{', '.join(NEO4J_URI_SCHEMES)}; received: {uri}"
            )
        if not parts.hostname:
            raise RuntimeError(
                "NEO4J_URI appears malformed. Verify the host is present."
            )
        return uri

    @property
    def neo4j_auth(self) -> tuple[str, str] | None:
        """Return the basic-auth tuple, or ``None`` when no password is set."""

        if self.neo4j_password is None:
            return None
        return (self.neo4j_username, self.neo4j_password)

    @property
    def cors_allow_origins(self) -> list[str]:
        """Return normalised CORS origins supplied via environment variables."""

        if not self.cors_allow_origins_raw:
            return []

        origins = [
            _normalize_origin(origin)
            for origin in self.cors_allow_origins_raw.split(",")
            if origin.strip()
        ]
        return [origin for origin in origins if origin]

    @property
    def log_level_numeric(self) -> int:
        """Translate ``log_level`` into the numeric constant expected by logging."""

        candidate = logging.getLevelName(self.log_level.upper())
        if isinstance(candidate, int):
            return candidate
        return logging.INFO

    def optional_config_warnings(self) -> list[str]:
        """Return human-readable warnings for unset optional configuration."""

        warnings: list[str] = []

        if not self._explicit_neo4j_password and self.neo4j_password is None:
            warnings.append(
                "NEO4J_PASSWORD is not set - connecting without authentication "
                "(the server will reject this unless auth is disabled)"
            )

        if not self.cors_allow_origins:
            warnings.append(
                "CORS_ALLOW_ORIGINS is not set - using default localhost origins only "
                "(may cause CORS issues in production)"
            )

        return warnings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached instance of :class:`AppSettings`."""

    return AppSettings()


settings = get_settings()

__all__ = [
    "AppSettings",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_NEO4J_URI",
    "DEFAULT_NEO4J_USERNAME",
    "DEFAULT_SLOW_QUERY_THRESHOLD",
    "NEO4J_URI_SCHEMES",
    "get_settings",
    "settings",
]
