"""Common value objects shared across all domain modules."""

from .ids import CollectionId, UserId

__all__ = [
    "CollectionId",
    "UserId",
]
