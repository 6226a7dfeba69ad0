#!/usr/bin/env python
"""Seed User and Movie nodes into Neo4j from a JSONL file.

Each line is a JSON object with a ``type`` of ``user`` or ``movie``. Users
need a ``userId``; movies need a ``tmdbId`` and usually carry ``title``,
``released``, ``imdbRating`` and friends. Nodes are MERGEd on their id so the
script can be re-run safely. Uniqueness constraints on both ids are created
first.

Usage:
    python -m neoflix.scripts.seed_movies [path_to_jsonl]
    python -m neoflix.scripts.seed_movies ./data/fixtures/movies.jsonl --limit 50
    python -m neoflix.scripts.seed_movies --constraints-only
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from neo4j import AsyncDriver

from neoflix.db.connection import close_driver, create_driver
from neoflix.main import validate_environment
from neoflix.settings import get_settings

CONSTRAINT_QUERIES = (
    "CREATE CONSTRAINT user_user_id IF NOT EXISTS "
    "FOR (u:User) REQUIRE u.userId IS UNIQUE",
    "CREATE CONSTRAINT movie_tmdb_id IF NOT EXISTS "
    "FOR (m:Movie) REQUIRE m.tmdbId IS UNIQUE",
)

MERGE_USER_QUERY = """
MERGE (u:User {userId: $userId})
SET u += $properties
"""

MERGE_MOVIE_QUERY = """
MERGE (m:Movie {tmdbId: $tmdbId})
SET m += $properties
"""


def parse_seed_line(line: str) -> tuple[str, dict[str, Any]]:
    """Return ``(query, parameters)`` for a single JSONL line.

    Raises:
        ValueError: The line is not valid JSON or lacks its identifier.
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object")

    node_type = str(data.pop("type", "movie")).lower()
    if node_type == "user":
        user_id = data.pop("userId", None)
        if not user_id:
            raise ValueError("Missing userId")
        return MERGE_USER_QUERY, {"userId": str(user_id), "properties": data}
    if node_type == "movie":
        tmdb_id = data.pop("tmdbId", None)
        if not tmdb_id:
            raise ValueError("Missing tmdbId")
        return MERGE_MOVIE_QUERY, {"tmdbId": str(tmdb_id), "properties": data}
    raise ValueError(f"Unknown node type {node_type!r}")


async def create_constraints(driver: AsyncDriver, database: str | None = None) -> None:
    """Create the uniqueness constraints the favorites queries rely on."""
    async with driver.session(database=database) as session:
        for query in CONSTRAINT_QUERIES:
            await session.run(query)
            print(f"✓ {query}")


async def seed_nodes(
    driver: AsyncDriver,
    jsonl_path: Path,
    *,
    database: str | None = None,
    limit: int | None = None,
    dry_run: bool = False,
) -> tuple[int, int]:
    """Load users and movies from ``jsonl_path``.

    Args:
        driver: Open Neo4j driver
        jsonl_path: Path to JSONL file with one node per line
        database: Target database, ``None`` for the server default
        limit: Maximum number of nodes to load
        dry_run: If True, validate without writing

    Returns:
        Tuple of (loaded_count, skipped_count)
    """
    if not jsonl_path.exists():
        print(f"❌ File not found: {jsonl_path}", file=sys.stderr)
        return 0, 0

    loaded_count = 0
    skipped_count = 0

    async with driver.session(database=database) as session:
        with open(jsonl_path, encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                if limit and loaded_count >= limit:
                    break
                if not line.strip():
                    continue

                try:
                    query, parameters = parse_seed_line(line.strip())
                except ValueError as e:
                    print(f"⚠️  Line {line_num}: {e}, skipping")
                    skipped_count += 1
                    continue

                if dry_run:
                    print(f"✓ Would load line {line_num}: {parameters}")
                    loaded_count += 1
                    continue

                await session.execute_write(_run_statement, query, parameters)
                loaded_count += 1
                if loaded_count % 100 == 0:
                    print(f"💾 Loaded {loaded_count} nodes...")

    return loaded_count, skipped_count


async def _run_statement(tx, query: str, parameters: dict[str, Any]) -> None:
    result = await tx.run(query, parameters)
    await result.consume()


async def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    validate_environment()

    parser = argparse.ArgumentParser(
        description="Seed User and Movie nodes into Neo4j"
    )
    parser.add_argument(
        "jsonl_path",
        nargs="?",
        type=Path,
        default=Path("./data/fixtures/movies.jsonl"),
        help="Path to JSONL file (default: ./data/fixtures/movies.jsonl)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        help="Maximum number of nodes to load",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate the file without writing to Neo4j",
    )
    parser.add_argument(
        "--constraints-only",
        action="store_true",
        help="Create uniqueness constraints and exit",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    driver = create_driver(settings)
    try:
        if not args.dry_run:
            await create_constraints(driver, settings.neo4j_database)
        if args.constraints_only:
            return 0

        loaded, skipped = await seed_nodes(
            driver,
            args.jsonl_path,
            database=settings.neo4j_database,
            limit=args.limit,
            dry_run=args.dry_run,
        )
    finally:
        await close_driver(driver)

    print()
    print(f"✓ Loaded: {loaded}")
    print(f"⚠️  Skipped: {skipped}")
    return 0 if loaded or not skipped else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
