"""Tests for the ``seed_movies`` development script."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from neoflix.scripts import seed_movies
from tests.neoflix.support.fake_neo4j import FakeDriver, FakeGraph


def _write_jsonl(path: Path, rows: list[object]) -> Path:
    path.write_text(
        "\n".join(row if isinstance(row, str) else json.dumps(row) for row in rows),
        encoding="utf-8",
    )
    return path


def test_parse_seed_line_builds_movie_merge() -> None:
    query, parameters = seed_movies.parse_seed_line(
        '{"type": "movie", "tmdbId": 603, "title": "The Matrix", "year": 1999}'
    )

    assert query == seed_movies.MERGE_MOVIE_QUERY
    assert parameters == {"tmdbId": "603", "properties": {"title": "The Matrix", "year": 1999}}


def test_parse_seed_line_builds_user_merge() -> None:
    query, parameters = seed_movies.parse_seed_line('{"type": "user", "userId": "u1", "name": "Ada"}')

    assert query == seed_movies.MERGE_USER_QUERY
    assert parameters == {"userId": "u1", "properties": {"name": "Ada"}}


@pytest.mark.parametrize(
    "line",
    [
        "not json",
        "[1, 2]",
        '{"type": "movie", "title": "No id"}',
        '{"type": "user"}',
        '{"type": "genre", "name": "Drama"}',
    ],
)
def test_parse_seed_line_rejects_bad_rows(line: str) -> None:
    with pytest.raises(ValueError):
        seed_movies.parse_seed_line(line)


@pytest.mark.asyncio
async def test_seed_nodes_merges_users_and_movies(tmp_path: Path) -> None:
    graph = FakeGraph()
    driver = FakeDriver(graph)
    path = _write_jsonl(
        tmp_path / "movies.jsonl",
        [
            {"type": "user", "userId": "u1"},
            {"type": "movie", "tmdbId": "603", "title": "The Matrix"},
            {"type": "movie", "tmdbId": "603", "year": 1999},
            {"type": "movie", "title": "Missing id"},
        ],
    )

    loaded, skipped = await seed_movies.seed_nodes(driver, path)

    assert (loaded, skipped) == (3, 1)
    assert graph.users == {"u1"}
    assert graph.movies == {"603": {"tmdbId": "603", "title": "The Matrix", "year": 1999}}
    assert driver.sessions[0].closed is True


@pytest.mark.asyncio
async def test_seed_nodes_dry_run_and_limit(tmp_path: Path) -> None:
    graph = FakeGraph()
    path = _write_jsonl(
        tmp_path / "movies.jsonl",
        [{"type": "movie", "tmdbId": str(movie_id)} for movie_id in range(5)],
    )

    loaded, skipped = await seed_movies.seed_nodes(FakeDriver(graph), path, limit=2, dry_run=True)

    assert (loaded, skipped) == (2, 0)
    assert graph.movies == {}


@pytest.mark.asyncio
async def test_seed_nodes_missing_file(tmp_path: Path) -> None:
    assert await seed_movies.seed_nodes(FakeDriver(), tmp_path / "absent.jsonl") == (0, 0)


@pytest.mark.asyncio
async def test_create_constraints_runs_both_statements() -> None:
    graph = FakeGraph()

    await seed_movies.create_constraints(FakeDriver(graph), database="movies")

    assert [query for query, _ in graph.statements] == list(seed_movies.CONSTRAINT_QUERIES)
