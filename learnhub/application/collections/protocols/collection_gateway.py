"""Protocol for the remote persistence collaborator used by the engine."""

from typing import Protocol

from learnhub.domain.collections.entities.collection import Collection
from learnhub.domain.collections.entities.content_item import ContentItem
from learnhub.domain.collections.item_kind import ItemKind
from learnhub.domain.collections.value_objects.membership_key import MembershipKey


class CollectionGatewayProtocol(Protocol):
    """
    Asynchronous access to the authoritative collection store.

    Every method is a suspension point and may fail. Implementations raise
    the domain error taxonomy (AuthenticationError, AuthorizationError,
    EntityNotFoundError, ValidationError, TransientError); they never return
    partial results.
    """

    async def add_membership(
        self, item_id: str, item_kind: ItemKind, collection_id: str
    ) -> None:
        """
        Add an item to a collection. Adding an existing pair is a no-op.

        Args:
            item_id: The item ID
            item_kind: The item kind
            collection_id: Collection ID or reserved alias
        """
        ...

    async def remove_membership(self, item_id: str, collection_id: str) -> None:
        """Remove an item from a collection."""
        ...

    async def fetch_collection_items(self, collection_id: str) -> list[ContentItem]:
        """
        Get the items explicitly joined to a collection.

        Returns an empty list when the backing table is not provisioned.
        """
        ...

    async def fetch_membership_counts(self, owner_id: int) -> dict[str, int]:
        """Get item counts keyed by collection id, alias and pseudo-collection."""
        ...

    async def list_memberships(self) -> list[MembershipKey]:
        """Get every membership row of the current user."""
        ...

    async def list_collections(self) -> list[Collection]:
        """Get the current user's collections, seeding system ones if needed."""
        ...

    async def create_collection(self, label: str, color: str | None = None) -> Collection:
        """Create a custom collection."""
        ...

    async def rename_collection(self, collection_id: str, label: str) -> None:
        """Change a collection's label."""
        ...

    async def delete_collection(self, collection_id: str) -> None:
        """Delete a collection and, remotely, all its memberships."""
        ...

    async def delete_note(self, note_id: str) -> None:
        """Delete a note itself, not just its memberships."""
        ...
