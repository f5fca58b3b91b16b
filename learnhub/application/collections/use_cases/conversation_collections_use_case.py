"""
Use case for conversation self-tags.

Conversations store the ids of their collections on themselves. Aliases are
resolved (and their system collections created on demand) before storing,
so the stored list only ever holds storage ids.
"""

import structlog

from learnhub.application.collections.protocols.content_item_repository import (
    ConversationRepositoryProtocol,
)
from learnhub.application.collections.use_cases.collection_management_use_case import (
    CollectionManagementUseCase,
)
from learnhub.domain.collections.entities.content_item import ContentItem
from learnhub.domain.common.exceptions import EntityNotFoundError, StoreNotProvisionedError
from learnhub.domain.common.value_objects.ids import UserId

logger = structlog.get_logger(__name__)


class ConversationCollectionsUseCase:
    """Use case for listing conversations and syncing their collections."""

    def __init__(
        self,
        conversation_repository: ConversationRepositoryProtocol,
        collection_management_use_case: CollectionManagementUseCase,
    ) -> None:
        self.conversation_repository = conversation_repository
        self.collection_management_use_case = collection_management_use_case

    def list_conversations(
        self, user_id: int, collection_id: str | None = None
    ) -> list[ContentItem]:
        """
        Get a user's conversations.

        Args:
            user_id: ID of the user
            collection_id: Only conversations tagged with this collection id
                or alias

        Returns:
            Conversations, newest first; empty when the table is missing or
            the alias has no collection yet
        """
        resolved: str | None = None
        if collection_id is not None:
            collection = self.collection_management_use_case.resolve(user_id, collection_id)
            if collection is None:
                return []
            resolved = str(collection.id)

        try:
            return self.conversation_repository.list_for_user(UserId(user_id), resolved)
        except StoreNotProvisionedError:
            logger.info("conversation_table_missing", user_id=user_id)
            return []

    def set_collections(
        self, user_id: int, conversation_id: str, collection_ids: list[str]
    ) -> ContentItem:
        """
        Replace the collections a conversation is tagged with.

        Args:
            user_id: ID of the user
            conversation_id: ID of the conversation
            collection_ids: Collection ids or aliases; duplicates collapse

        Returns:
            The updated conversation

        Raises:
            EntityNotFoundError: If the conversation or a collection does not exist
        """
        resolved: list[str] = []
        for collection_id in collection_ids:
            collection = self.collection_management_use_case.resolve(
                user_id, collection_id, create_missing=True
            )
            if collection is None:
                raise EntityNotFoundError("Collection", collection_id)
            if str(collection.id) not in resolved:
                resolved.append(str(collection.id))

        conversation = self.conversation_repository.set_collection_ids(
            conversation_id, UserId(user_id), resolved
        )
        if conversation is None:
            raise EntityNotFoundError("Conversation", conversation_id)

        logger.info(
            "conversation_collections_synced",
            user_id=user_id,
            conversation_id=conversation_id,
            collection_ids=resolved,
        )
        return conversation
