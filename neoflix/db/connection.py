from __future__ import annotations

import logging
from urllib.parse import urlsplit

from fastapi import Request
from neo4j import AsyncDriver, AsyncGraphDatabase

from neoflix.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)

DRIVER_STATE_ATTRIBUTE = "neo4j_driver"


def get_database_uri(active_settings: AppSettings | None = None) -> str:
    """Return the validated Neo4j connection URI.

    Routing every caller through this helper keeps the scheme validation and
    its error messages in :class:`~neoflix.settings.AppSettings`.
    """

    return (active_settings or get_settings()).resolved_neo4j_uri


def sanitize_database_uri(uri: str) -> str:
    """Hide any inline credentials so the URI can be logged."""

    parts = urlsplit(uri)
    if parts.password is None:
        return uri
    netloc = parts.netloc.replace(f":{parts.password}@", ":***@", 1)
    return parts._replace(netloc=netloc).geturl()


def create_driver(active_settings: AppSettings | None = None) -> AsyncDriver:
    """Create the async Neo4j driver described by ``active_settings``.

    The driver owns its own connection pool; pool sizing is left to the
    driver defaults.
    """

    configured = active_settings or get_settings()
    uri = get_database_uri(configured)
    driver = AsyncGraphDatabase.driver(uri, auth=configured.neo4j_auth)
    logger.info("Created Neo4j driver for %s", sanitize_database_uri(uri))
    return driver


async def close_driver(driver: AsyncDriver | None) -> None:
    """Close ``driver`` when one was created."""

    if driver is None:
        return
    await driver.close()
    logger.info("Closed Neo4j driver")


def get_driver(request: Request) -> AsyncDriver:
    """FastAPI dependency returning the driver opened by the app lifespan.

    The handle lives on ``app.state`` rather than in a module global, so its
    lifetime is tied to the application that created it.
    """

    driver = getattr(request.app.state, DRIVER_STATE_ATTRIBUTE, None)
    if driver is None:
        raise RuntimeError(
            "Neo4j driver is not initialised; the application lifespan has not run."
        )
    return driver


__all__ = [
    "DRIVER_STATE_ATTRIBUTE",
    "close_driver",
    "create_driver",
    "get_database_uri",
    "get_driver",
    "sanitize_database_uri",
]
