"""
Use case for collection membership.

Handles adding and removing items, accepting reserved aliases in place of
collection ids.
"""

import structlog

from learnhub.application.collections.protocols.membership_repository import (
    MembershipRepositoryProtocol,
)
from learnhub.application.collections.use_cases.collection_management_use_case import (
    CollectionManagementUseCase,
)
from learnhub.domain.collections.item_kind import ItemKind
from learnhub.domain.collections.value_objects.membership_key import MembershipKey
from learnhub.domain.common.exceptions import EntityNotFoundError, ValidationError
from learnhub.domain.common.value_objects.ids import UserId

logger = structlog.get_logger(__name__)


class CollectionMembershipUseCase:
    """Use case for adding items to and removing items from collections."""

    def __init__(
        self,
        membership_repository: MembershipRepositoryProtocol,
        collection_management_use_case: CollectionManagementUseCase,
    ) -> None:
        """
        Initialize use case with dependencies.

        Args:
            membership_repository: Membership repository protocol implementation
            collection_management_use_case: Resolves ids and aliases to collections
        """
        self.membership_repository = membership_repository
        self.collection_management_use_case = collection_management_use_case

    def add_item(
        self, user_id: int, collection_id: str, item_id: str, item_kind: str
    ) -> MembershipKey:
        """
        Add an item to a collection. Adding it twice is a no-op.

        A reserved alias whose system collection does not exist yet creates it.

        Args:
            user_id: ID of the user
            collection_id: Collection ID or alias
            item_id: ID of the item
            item_kind: Kind of the item

        Returns:
            The stored membership, with the resolved collection id

        Raises:
            ValidationError: If the item kind is unknown or the item id is empty
            EntityNotFoundError: If the collection does not exist
        """
        kind = _parse_kind(item_kind)
        if not item_id or not item_id.strip():
            raise ValidationError("Item id cannot be empty", field="item_id")

        collection = self.collection_management_use_case.resolve(
            user_id, collection_id, create_missing=True
        )
        if collection is None:
            raise EntityNotFoundError("Collection", collection_id)

        key = MembershipKey(item_kind=kind, item_id=item_id, collection_id=str(collection.id))
        created = self.membership_repository.add(key)
        logger.info(
            "collection_item_added",
            user_id=user_id,
            collection_id=key.collection_id,
            item_kind=kind,
            item_id=item_id,
            already_present=not created,
        )
        return key

    def remove_item(self, user_id: int, collection_id: str, item_id: str) -> int:
        """
        Remove an item from a collection, whatever its kind.

        Returns:
            Number of membership rows removed (0 when it was not a member)

        Raises:
            EntityNotFoundError: If the collection does not exist
        """
        collection = self.collection_management_use_case.get_collection(user_id, collection_id)
        removed = self.membership_repository.remove(item_id, str(collection.id))
        logger.info(
            "collection_item_removed",
            user_id=user_id,
            collection_id=str(collection.id),
            item_id=item_id,
            removed=removed,
        )
        return removed

    def list_memberships(self, user_id: int) -> list[MembershipKey]:
        """Get every membership row of the user's collections."""
        return self.membership_repository.list_for_user(UserId(user_id))


def _parse_kind(item_kind: str) -> ItemKind:
    try:
        return ItemKind(item_kind)
    except ValueError as exc:
        raise ValidationError(
            f"Unknown item kind '{item_kind}'", field="item_kind", value=item_kind
        ) from exc
