"""Protocol for item sources that carry their own collection list."""

from typing import Protocol

from learnhub.domain.collections.entities.content_item import ContentItem
from learnhub.domain.collections.item_kind import ItemKind


class TaggedItemSourceProtocol(Protocol):
    """
    A self-tagging source.

    Items of these kinds store the ids of the collections they belong to on
    themselves instead of going through membership rows. Conversations are
    the only such source today.
    """

    @property
    def kinds(self) -> frozenset[ItemKind]:
        """Kinds this source emits."""
        ...

    async def list_tagged(self, collection_id: str) -> list[ContentItem]:
        """Items tagged with the given collection id."""
        ...

    async def list_all(self) -> list[ContentItem]:
        """Every item of this source, tagged or not."""
        ...
