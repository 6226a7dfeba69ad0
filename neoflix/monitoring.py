"""Transaction timing for the Neoflix services.

Every unit of work executed against Neo4j is wrapped in
:func:`monitor_transaction`, which logs a warning when the round-trip exceeds
the configured slow query threshold.
"""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

logger = logging.getLogger(__name__)


def _truncate(statement: str, limit: int = 500) -> str:
    """Collapse whitespace and shorten long Cypher statements for logging."""
    collapsed = " ".join(statement.split())
    if len(collapsed) > limit:
        return collapsed[:limit] + "..."
    return collapsed


@asynccontextmanager
async def monitor_transaction(
    name: str,
    statement: str,
    parameters: dict[str, Any] | None = None,
    slow_query_threshold: float | None = None,
) -> AsyncIterator[None]:
    """Time the enclosed block and log slow transactions.

    Args:
        name: Short label for the operation (e.g. ``favorites.add``)
        statement: Cypher statement executed inside the block
        parameters: Query parameters, attached to the log record as ``extra``
        slow_query_threshold: Seconds before the transaction counts as slow.
            Defaults to ``SLOW_QUERY_THRESHOLD`` from the settings.
    """
    if slow_query_threshold is None:
        from neoflix.settings import get_settings

        slow_query_threshold = get_settings().slow_query_threshold

    start = time.perf_counter()
    try:
        yield
    finally:
        total = time.perf_counter() - start
        if total > slow_query_threshold:
            logger.warning(
                f"Slow transaction {name} ({total:.3f}s): {_truncate(statement)}",
                extra={
                    "duration_seconds": total,
                    "query": statement,
                    "parameters": parameters,
                    "threshold_seconds": slow_query_threshold,
                },
            )
        else:
            logger.debug("Transaction %s completed in %.3fs", name, total)
