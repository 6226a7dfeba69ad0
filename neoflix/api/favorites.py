"""FastAPI router exposing a user's favorite movies."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from pydantic import BeforeValidator

from neoflix.schemas.favorites import (
    FavoriteMovie,
    FavoriteSortField,
    SortOrder,
    normalise_sort_order,
)
from neoflix.services.favorite_service import FavoriteService, get_favorite_service

router = APIRouter()


@router.get("", response_model=list[FavoriteMovie])
async def list_favorites(
    user_id: str = Query(..., min_length=1, description="Identifier of the User node"),
    sort: FavoriteSortField = Query(
        FavoriteSortField.TITLE, description="Movie property to order by"
    ),
    order: Annotated[
        SortOrder,
        BeforeValidator(normalise_sort_order),
        Query(description="Sort direction, case-insensitive"),
    ] = SortOrder.ASC,
    limit: int = Query(6, ge=0, le=100, description="Maximum rows to return"),
    skip: int = Query(0, ge=0, description="Rows to skip before returning results"),
    service: FavoriteService = Depends(get_favorite_service),
) -> list[dict[str, Any]]:
    """Return the caller's favorite movies.

    An empty page is reported as 404, the same as an unknown user.
    """

    try:
        return await service.all(
            user_id, sort=sort, order=order, limit=limit, skip=skip
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post(
    "/{movie_id}",
    response_model=FavoriteMovie,
    status_code=status.HTTP_201_CREATED,
)
async def add_favorite(
    movie_id: str = Path(..., min_length=1, description="tmdbId of the Movie node"),
    user_id: str = Query(..., min_length=1, description="Identifier of the User node"),
    service: FavoriteService = Depends(get_favorite_service),
) -> dict[str, Any]:
    """Add a movie to the caller's favorites; repeating the call is harmless."""

    try:
        return await service.add(user_id, movie_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.delete("/{movie_id}", response_model=FavoriteMovie)
async def remove_favorite(
    movie_id: str = Path(..., min_length=1, description="tmdbId of the Movie node"),
    user_id: str = Query(..., min_length=1, description="Identifier of the User node"),
    service: FavoriteService = Depends(get_favorite_service),
) -> dict[str, Any]:
    """Remove a movie from the caller's favorites."""

    try:
        return await service.remove(user_id, movie_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
