"""Pydantic schemas that power the favorites API surface."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FavoriteSortField(str, Enum):
    """Movie properties the favorites list may be ordered by."""

    TITLE = "title"
    RELEASED = "released"
    IMDB_RATING = "imdbRating"
    YEAR = "year"


class SortOrder(str, Enum):
    """Direction applied to the ``ORDER BY`` clause."""

    ASC = "ASC"
    DESC = "DESC"


def normalise_sort_order(value):
    """Upper-case textual directions so ``desc`` and ``DESC`` are equivalent."""

    if isinstance(value, str) and not isinstance(value, SortOrder):
        return value.strip().upper()
    return value


class FavoriteMovie(BaseModel):
    """Movie property map returned by the favorites endpoints.

    The movie's properties are owned by the graph and vary between records,
    so any property beyond the ones declared here is passed through as-is.
    """

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "tmdbId": "603",
                "title": "The Matrix",
                "released": "1999-03-31",
                "imdbRating": 8.7,
                "favorite": True,
            }
        },
    )

    tmdbId: str = Field(..., description="TMDB identifier of the movie")
    title: str | None = Field(None, description="Display title of the movie")
    favorite: bool = Field(
        ...,
        description=(
            "Whether the movie is in the user's favorites after the operation"
            " completed."
        ),
    )


__all__ = ["FavoriteMovie", "FavoriteSortField", "SortOrder", "normalise_sort_order"]
