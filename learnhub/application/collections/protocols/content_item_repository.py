"""Protocols for the repositories that own content items."""

from typing import Protocol

from learnhub.domain.collections.entities.content_item import ContentItem, Course
from learnhub.domain.collections.item_kind import ItemKind
from learnhub.domain.common.value_objects.ids import UserId


class ContentItemRepositoryProtocol(Protocol):
    """Read access to courses, lessons, modules, resources, notes and context."""

    def find_items(
        self, item_kind: ItemKind, item_ids: list[str], user_id: UserId
    ) -> list[ContentItem]:
        """
        Get items of one kind by id.

        Unknown ids are skipped.

        Raises:
            StoreNotProvisionedError: If the kind's table does not exist
        """
        ...

    def list_courses(self) -> list[Course]:
        """Get the whole course catalog."""
        ...

    def count_certified_courses(self) -> int:
        """Number of courses that carry at least one badge."""
        ...

    def list_context_items(self, user_id: UserId, collection_id: str) -> list[ContentItem]:
        """Get personal-context entries filed under a collection."""
        ...

    def count_context_items(self, user_id: UserId) -> tuple[dict[str, int], set[str]]:
        """
        Count personal-context entries per collection.

        Returns:
            Counts per collection id, and the ids of collections that hold a
            profile
        """
        ...


class ConversationRepositoryProtocol(Protocol):
    """Access to self-tagging conversations."""

    def list_for_user(
        self, user_id: UserId, collection_id: str | None = None
    ) -> list[ContentItem]:
        """Get a user's conversations, optionally only those tagged with a collection."""
        ...

    def find_by_id(self, conversation_id: str, user_id: UserId) -> ContentItem | None:
        ...

    def set_collection_ids(
        self, conversation_id: str, user_id: UserId, collection_ids: list[str]
    ) -> ContentItem | None:
        """
        Replace a conversation's self-tags.

        Returns:
            The updated conversation, or None if it does not exist
        """
        ...

    def remove_collection_id(self, user_id: UserId, collection_id: str) -> int:
        """Untag every conversation of a user from a deleted collection."""
        ...


class NoteRepositoryProtocol(Protocol):
    """Write access to notes."""

    def delete(self, note_id: str, user_id: UserId) -> bool:
        """
        Delete a note.

        Returns:
            True if the note existed and was deleted
        """
        ...
