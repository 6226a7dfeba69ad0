"""Domain errors raised by the Neoflix services."""

from __future__ import annotations

__all__ = ["NotFoundError"]


class NotFoundError(Exception):
    """Raised when a write transaction matches nothing.

    A single error kind covers every empty result: an unknown user, an unknown
    movie, a missing ``HAS_FAVOURITE`` relationship, or a page past the end of
    the list. Callers only learn that nothing matched.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
