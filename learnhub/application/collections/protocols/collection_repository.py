"""Protocol for Collection repository."""

from typing import Protocol

from learnhub.domain.collections.entities.collection import Collection
from learnhub.domain.common.value_objects.ids import CollectionId, UserId


class CollectionRepositoryProtocol(Protocol):
    """Protocol for Collection repository operations."""

    def find_by_id(self, collection_id: CollectionId, user_id: UserId) -> Collection | None:
        """
        Get a collection by ID for a specific user.

        Args:
            collection_id: The collection ID
            user_id: The user ID

        Returns:
            Collection entity or None if not found or owned by someone else
        """
        ...

    def find_system(self, alias: str, user_id: UserId) -> list[Collection]:
        """
        Get the system collections seeded for an alias.

        Legacy rows without a stored alias are matched by label. More than one
        result means the alias table is corrupt.
        """
        ...

    def list_for_user(self, user_id: UserId) -> list[Collection]:
        """Get all collections of a user, system collections first."""
        ...

    def save(self, collection: Collection) -> Collection:
        """Insert or update a collection."""
        ...

    def delete(self, collection_id: CollectionId, user_id: UserId) -> bool:
        """
        Delete a collection and its membership rows.

        Returns:
            True if a collection was deleted
        """
        ...
