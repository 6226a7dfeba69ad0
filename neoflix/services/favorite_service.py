"""Business logic powering the favorites API endpoints.

A movie is a user's favorite when a ``(:User)-[:HAS_FAVOURITE]->(:Movie)``
relationship exists between them. :class:`FavoriteService` exposes three
operations over that relationship:

* ``all`` – list the movies a user has favorited, sorted and paginated.
* ``add`` – create the relationship (idempotent ``MERGE``).
* ``remove`` – delete the relationship.

Each operation opens its own session, runs a single statement inside a
managed write transaction and normalises the returned property maps with
:func:`~neoflix.db.conversion.to_native_types`. An empty result always
raises :class:`~neoflix.exceptions.NotFoundError`.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends
from neo4j import AsyncDriver, AsyncManagedTransaction

from neoflix.db.connection import get_driver
from neoflix.db.conversion import to_native_types
from neoflix.exceptions import NotFoundError
from neoflix.monitoring import monitor_transaction
from neoflix.schemas.favorites import FavoriteSortField, SortOrder, normalise_sort_order
from neoflix.settings import get_settings

logger = logging.getLogger(__name__)

ADD_FAVORITE_QUERY = """
MATCH (u:User {userId: $userId}), (m:Movie {tmdbId: $movieId})
MERGE (u)-[f:HAS_FAVOURITE]->(m)
ON CREATE SET f.createdAt = datetime()
RETURN m {.*, favorite: true} AS movie
"""

REMOVE_FAVORITE_QUERY = """
MATCH (u:User {userId: $userId})-[f:HAS_FAVOURITE]->(m:Movie {tmdbId: $movieId})
DELETE f
RETURN m {.*, favorite: false} AS movie
"""


def build_list_favorites_query(sort: FavoriteSortField, order: SortOrder) -> str:
    """Return the list statement ordered by ``sort`` in ``order`` direction.

    Cypher cannot parameterise ``ORDER BY`` so both values are interpolated;
    they are enum members, never raw caller input.
    """

    return f"""
MATCH (u:User {{userId: $userId}})-[:HAS_FAVOURITE]->(m:Movie)
RETURN m {{.*, favorite: true}} AS movie
ORDER BY m.`{sort.value}` {order.value}
SKIP $skip
LIMIT $limit
"""


def _require_identifier(value: str, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be a non-empty string")
    return value


def _resolve_sort_field(sort: FavoriteSortField | str) -> FavoriteSortField:
    try:
        return FavoriteSortField(sort)
    except ValueError:
        allowed = ", ".join(field.value for field in FavoriteSortField)
        raise ValueError(
            f"Cannot sort favorites by {sort!r}; expected one of: {allowed}"
        ) from None


def _resolve_sort_order(order: SortOrder | str) -> SortOrder:
    if isinstance(order, SortOrder):
        return order
    try:
        return SortOrder(normalise_sort_order(order))
    except ValueError:
        raise ValueError(
            f"Sort order must be ASC or DESC, received {order!r}"
        ) from None


def _require_non_negative(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{name} must be a non-negative integer")
    return value


async def _collect_movies(
    tx: AsyncManagedTransaction, query: str, parameters: dict[str, Any]
) -> list[Any]:
    # Records must be consumed before the transaction function returns.
    result = await tx.run(query, parameters)
    return [record["movie"] async for record in result]


class FavoriteService:
    """Reads and writes ``HAS_FAVOURITE`` relationships in Neo4j."""

    def __init__(
        self,
        driver: AsyncDriver,
        *,
        database: str | None = None,
        slow_query_threshold: float | None = None,
    ) -> None:
        self._driver = driver
        self._database = database
        self._slow_query_threshold = slow_query_threshold

    async def all(
        self,
        user_id: str,
        sort: FavoriteSortField | str = FavoriteSortField.TITLE,
        order: SortOrder | str = SortOrder.ASC,
        limit: int = 6,
        skip: int = 0,
    ) -> list[dict[str, Any]]:
        """Return the movies ``user_id`` has favorited, each with ``favorite: true``.

        Raises:
            ValueError: ``sort``/``order`` are not in the allow-list, or
                ``limit``/``skip`` are negative.
            NotFoundError: Nothing matched. Unknown users, users without
                favorites and ``skip`` past the last row are not told apart.
        """

        _require_identifier(user_id, "user_id")
        query = build_list_favorites_query(
            _resolve_sort_field(sort), _resolve_sort_order(order)
        )
        parameters = {
            "userId": user_id,
            "skip": int(_require_non_negative(skip, "skip")),
            "limit": int(_require_non_negative(limit, "limit")),
        }

        movies = await self._execute_write("favorites.all", query, parameters)
        if not movies:
            raise NotFoundError("Unable to list favorites")
        return movies

    async def add(self, user_id: str, movie_id: str) -> dict[str, Any]:
        """Mark ``movie_id`` as a favorite of ``user_id``.

        Repeating the call is a no-op; ``createdAt`` keeps the time of the
        first call.
        """

        parameters = {
            "userId": _require_identifier(user_id, "user_id"),
            "movieId": _require_identifier(movie_id, "movie_id"),
        }
        movies = await self._execute_write(
            "favorites.add", ADD_FAVORITE_QUERY, parameters
        )
        if not movies:
            raise NotFoundError("Unable to add favorite")

        logger.info("User %s favorited movie %s", user_id, movie_id)
        return movies[0]

    async def remove(self, user_id: str, movie_id: str) -> dict[str, Any]:
        """Delete the favorite and return the movie with ``favorite: false``.

        Fails with :class:`NotFoundError` when the user, the movie or the
        relationship is missing, including on a repeated call.
        """

        parameters = {
            "userId": _require_identifier(user_id, "user_id"),
            "movieId": _require_identifier(movie_id, "movie_id"),
        }
        movies = await self._execute_write(
            "favorites.remove", REMOVE_FAVORITE_QUERY, parameters
        )
        if not movies:
            raise NotFoundError("Unable to remove favorite")

        logger.info("User %s removed movie %s from favorites", user_id, movie_id)
        return movies[0]

    async def _execute_write(
        self, name: str, query: str, parameters: dict[str, Any]
    ) -> list[dict[str, Any]]:
        async with monitor_transaction(
            name,
            query,
            parameters,
            slow_query_threshold=self._slow_query_threshold,
        ):
            async with self._driver.session(database=self._database) as session:
                movies = await session.execute_write(_collect_movies, query, parameters)
        return [to_native_types(movie) for movie in movies]


def get_favorite_service(driver: AsyncDriver = Depends(get_driver)) -> FavoriteService:
    """FastAPI dependency binding the service to the app-scoped driver."""

    configured = get_settings()
    return FavoriteService(
        driver,
        database=configured.neo4j_database,
        slow_query_threshold=configured.slow_query_threshold,
    )


__all__ = [
    "ADD_FAVORITE_QUERY",
    "REMOVE_FAVORITE_QUERY",
    "FavoriteService",
    "build_list_favorites_query",
    "get_favorite_service",
]
