"""Shared fixtures: a seeded in-memory graph and services bound to it."""

from __future__ import annotations

import pytest
from neo4j.time import Date

from neoflix.services.favorite_service import FavoriteService
from tests.neoflix.support.fake_neo4j import FakeDriver, FakeGraph


@pytest.fixture
def graph() -> FakeGraph:
    """Two users and a handful of movies, with no favorites yet."""

    seeded = FakeGraph(users={"u1", "u2"})
    seeded.add_movie(
        "603",
        title="The Matrix",
        released=Date(1999, 3, 31),
        imdbRating=8.7,
        year=1999,
    )
    seeded.add_movie(
        "769",
        title="Goodfellas",
        released=Date(1990, 9, 19),
        imdbRating=8.7,
        year=1990,
    )
    seeded.add_movie(
        "680",
        title="Pulp Fiction",
        released=Date(1994, 10, 14),
        imdbRating=8.9,
        year=1994,
    )
    seeded.add_movie(
        "13",
        title="Forrest Gump",
        released=Date(1994, 7, 6),
        imdbRating=8.8,
        year=1994,
    )
    return seeded


@pytest.fixture
def driver(graph: FakeGraph) -> FakeDriver:
    return FakeDriver(graph)


@pytest.fixture
def service(driver: FakeDriver) -> FavoriteService:
    return FavoriteService(driver, database="movies", slow_query_threshold=1.0)
