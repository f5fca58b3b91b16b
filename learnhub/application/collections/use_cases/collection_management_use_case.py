"""
Use case for collection lifecycle.

Handles bootstrap of system collections, alias resolution against storage,
and creating, renaming and deleting collections.
"""

import uuid

import structlog

from learnhub.application.collections.protocols.collection_repository import (
    CollectionRepositoryProtocol,
)
from learnhub.application.collections.protocols.content_item_repository import (
    ConversationRepositoryProtocol,
)
from learnhub.domain.collections.entities.collection import Collection
from learnhub.domain.collections.system_collections import (
    ALIAS_TO_SPEC,
    SYSTEM_COLLECTIONS,
    is_alias,
)
from learnhub.domain.common.exceptions import EntityNotFoundError, InvariantViolationError
from learnhub.domain.common.value_objects.ids import CollectionId, UserId

logger = structlog.get_logger(__name__)


class CollectionManagementUseCase:
    """Use case for creating, listing, renaming and deleting collections."""

    def __init__(
        self,
        collection_repository: CollectionRepositoryProtocol,
        conversation_repository: ConversationRepositoryProtocol,
    ) -> None:
        """
        Initialize use case with dependencies.

        Args:
            collection_repository: Collection repository protocol implementation
            conversation_repository: Conversation repository, untagged on delete
        """
        self.collection_repository = collection_repository
        self.conversation_repository = conversation_repository

    def list_collections(self, user_id: int) -> list[Collection]:
        """
        Get all collections of a user, seeding missing system collections.

        Args:
            user_id: ID of the user

        Returns:
            List of collections, system collections first
        """
        user_id_vo = UserId(user_id)
        self.ensure_system_collections(user_id_vo)
        return self.collection_repository.list_for_user(user_id_vo)

    def ensure_system_collections(self, user_id: UserId) -> list[Collection]:
        """Seed every system collection the user does not have yet."""
        seeded = []
        for spec in SYSTEM_COLLECTIONS:
            existing = self.collection_repository.find_system(spec.alias, user_id)
            for legacy in existing:
                if legacy.system_alias is None:
                    legacy.system_alias = spec.alias
                    self.collection_repository.save(legacy)
            if existing:
                continue
            collection = Collection.create_system(CollectionId(_new_id()), user_id, spec)
            seeded.append(self.collection_repository.save(collection))

        if seeded:
            logger.info(
                "system_collections_seeded",
                user_id=user_id.value,
                aliases=[c.system_alias for c in seeded],
            )
        return seeded

    def resolve(
        self, user_id: int, collection_id: str, *, create_missing: bool = False
    ) -> Collection | None:
        """
        Find a collection by storage id or reserved alias.

        Args:
            user_id: ID of the user
            collection_id: Storage id or alias such as ``favorites``
            create_missing: Seed the system collection if an alias has none

        Returns:
            The collection, or None if it does not exist

        Raises:
            InvariantViolationError: If an alias matches several collections
        """
        user_id_vo = UserId(user_id)
        if not is_alias(collection_id):
            return self.collection_repository.find_by_id(CollectionId(collection_id), user_id_vo)

        matches = self.collection_repository.find_system(collection_id, user_id_vo)
        if len(matches) > 1:
            raise InvariantViolationError(
                "Collection",
                f"alias '{collection_id}' resolves to {len(matches)} collections",
            )
        if matches:
            return matches[0]
        if not create_missing:
            return None

        collection = Collection.create_system(
            CollectionId(_new_id()), user_id_vo, ALIAS_TO_SPEC[collection_id]
        )
        logger.info("system_collection_auto_created", user_id=user_id, alias=collection_id)
        return self.collection_repository.save(collection)

    def get_collection(self, user_id: int, collection_id: str) -> Collection:
        """
        Get a collection or fail.

        Raises:
            EntityNotFoundError: If the collection does not exist
        """
        collection = self.resolve(user_id, collection_id)
        if collection is None:
            raise EntityNotFoundError("Collection", collection_id)
        return collection

    def create_collection(
        self, user_id: int, label: str, color: str | None = None, org_id: int | None = None
    ) -> Collection:
        """
        Create a custom or organisation collection.

        Raises:
            ValidationError: If the label is empty or reserved
        """
        collection = Collection.create(
            id=CollectionId(_new_id()),
            owner_id=UserId(user_id),
            label=label,
            color=color,
            org_id=org_id,
        )
        saved = self.collection_repository.save(collection)
        logger.info(
            "collection_created",
            user_id=user_id,
            collection_id=str(saved.id),
            label=saved.label,
            org_id=org_id,
        )
        return saved

    def rename_collection(self, user_id: int, collection_id: str, label: str) -> Collection:
        """
        Rename a collection.

        Raises:
            EntityNotFoundError: If the collection does not exist
            ValidationError: If the label is empty, or reserved for a custom collection
        """
        collection = self.get_collection(user_id, collection_id)
        old_label = collection.label
        collection.rename(label)
        saved = self.collection_repository.save(collection)
        logger.info(
            "collection_renamed",
            user_id=user_id,
            collection_id=str(saved.id),
            old_label=old_label,
            new_label=saved.label,
        )
        return saved

    def delete_collection(self, user_id: int, collection_id: str) -> None:
        """
        Delete a custom or organisation collection with all its memberships.

        Raises:
            EntityNotFoundError: If the collection does not exist
            AuthorizationError: If the collection is a system collection
        """
        collection = self.get_collection(user_id, collection_id)
        collection.ensure_deletable()

        user_id_vo = UserId(user_id)
        untagged = self.conversation_repository.remove_collection_id(
            user_id_vo, str(collection.id)
        )
        self.collection_repository.delete(collection.id, user_id_vo)
        logger.info(
            "collection_deleted",
            user_id=user_id,
            collection_id=str(collection.id),
            untagged_conversations=untagged,
        )


def _new_id() -> str:
    return str(uuid.uuid4())
