"""Startup warmup so the first request does not pay for connection setup.

The driver opens connections lazily; verifying connectivity during the
lifespan establishes the first pooled connection and surfaces bad
credentials or an unreachable server in the startup log.
"""

from __future__ import annotations

import logging
import time

from neo4j import AsyncDriver

logger = logging.getLogger(__name__)


async def warmup_database(driver: AsyncDriver) -> bool:
    """Verify the driver can reach Neo4j.

    Failures are logged rather than raised so the API still starts and
    reports 503 per request until the database becomes reachable.

    Returns:
        ``True`` when connectivity was verified.
    """
    try:
        start = time.time()
        await driver.verify_connectivity()

        elapsed = (time.time() - start) * 1000
        logger.info(f"✓ Neo4j connection warmed up ({elapsed:.0f}ms)")
        return True
    except Exception as e:
        logger.warning(f"Neo4j warmup failed: {e}")
        return False
