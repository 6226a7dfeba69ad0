"""Service layer translating API operations into Cypher transactions."""

from .favorite_service import FavoriteService, get_favorite_service

__all__ = ["FavoriteService", "get_favorite_service"]
