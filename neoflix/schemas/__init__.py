"""Pydantic schemas for API responses."""

from neoflix.schemas.error import (  # noqa: F401
    ErrorResponse,
    ErrorType,
    ValidationErrorDetail,
    ValidationErrorResponse,
)
from neoflix.schemas.favorites import (  # noqa: F401
    FavoriteMovie,
    FavoriteSortField,
    SortOrder,
)
