"""Protocol for membership rows."""

from typing import Protocol

from learnhub.domain.collections.item_kind import ItemKind
from learnhub.domain.collections.value_objects.membership_key import MembershipKey
from learnhub.domain.common.value_objects.ids import UserId


class MembershipRepositoryProtocol(Protocol):
    """Protocol for the collection_items join table."""

    def add(self, key: MembershipKey) -> bool:
        """
        Insert a membership row.

        Args:
            key: The (kind, item, collection) triple

        Returns:
            False if the triple already existed (nothing is inserted)
        """
        ...

    def remove(self, item_id: str, collection_id: str) -> int:
        """
        Remove an item from a collection, whatever its kind.

        Returns:
            Number of rows deleted
        """
        ...

    def remove_item(self, item_kind: ItemKind, item_id: str) -> int:
        """Remove an item from every collection."""
        ...

    def list_for_collection(self, collection_id: str) -> list[MembershipKey]:
        """Get membership rows of a collection in insertion order."""
        ...

    def list_for_user(self, user_id: UserId) -> list[MembershipKey]:
        """Get every membership row in collections owned by a user."""
        ...

    def count_by_collection(self, user_id: UserId) -> dict[str, int]:
        """Get row counts per collection for a user's collections."""
        ...
