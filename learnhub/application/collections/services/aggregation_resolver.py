"""
Aggregation of collection contents from several sources.

A collection's items come from the authoritative membership join and from
self-tagging sources (conversations list their collection ids on
themselves). Both paths can reference the same item; the authoritative copy
always wins.
"""

from collections.abc import Sequence

import structlog

from learnhub.application.collections.protocols.collection_gateway import (
    CollectionGatewayProtocol,
)
from learnhub.application.collections.protocols.tagged_item_source import (
    TaggedItemSourceProtocol,
)
from learnhub.domain.collections.entities.content_item import ContentItem
from learnhub.domain.collections.services.alias_resolver import AliasResolver
from learnhub.domain.collections.services.profile_singleton import enforce_profile_singleton
from learnhub.domain.collections.system_collections import (
    CONVERSATION_SCOPES,
    PERSONAL_CONTEXT,
)
from learnhub.domain.common.exceptions import EntityNotFoundError

logger = structlog.get_logger(__name__)


def merge_sources(
    authoritative: Sequence[ContentItem],
    tagged_batches: Sequence[tuple[frozenset[str], Sequence[ContentItem]]],
) -> list[ContentItem]:
    """
    Merge authoritative items with self-tagged ones.

    Args:
        authoritative: Items joined through membership rows
        tagged_batches: ``(kinds, items)`` per self-tagging source

    Returns:
        Authoritative items (duplicates collapsed) followed by tagged items
        that the authoritative set does not already contain
    """
    merged: list[ContentItem] = []
    seen: set[tuple[str, str]] = set()
    for item in authoritative:
        if item.key in seen:
            continue
        seen.add(item.key)
        merged.append(item)

    for kinds, items in tagged_batches:
        # Tagged items are matched by id among the kinds their source emits
        taken = {item.id for item in merged if item.kind in kinds}
        for item in items:
            if item.id in taken:
                continue
            taken.add(item.id)
            merged.append(item)
    return merged


class AggregationResolver:
    """Builds the de-duplicated, typed item list of one collection."""

    def __init__(
        self,
        gateway: CollectionGatewayProtocol,
        alias_resolver: AliasResolver,
        tagged_sources: Sequence[TaggedItemSourceProtocol] = (),
    ) -> None:
        """
        Initialize resolver with dependencies.

        Args:
            gateway: Remote store for the authoritative membership join
            alias_resolver: Resolver for reserved collection aliases
            tagged_sources: Self-tagging sources, merged after the join
        """
        self.gateway = gateway
        self.alias_resolver = alias_resolver
        self.tagged_sources = list(tagged_sources)

    async def list_items(self, collection_id: str) -> list[ContentItem]:
        """
        Get every item of a collection.

        Args:
            collection_id: Collection ID, reserved alias or pseudo-collection

        Returns:
            De-duplicated items; empty when the collection or its backing
            table does not exist

        Raises:
            DomainError: For remote failures other than a missing collection
        """
        resolved = self.alias_resolver.resolve(collection_id)

        if resolved in CONVERSATION_SCOPES:
            batches = [
                (source.kinds, await source.list_all()) for source in self.tagged_sources
            ]
            return merge_sources([], batches)

        authoritative = await self._fetch_authoritative(resolved)
        batches = [
            (source.kinds, await source.list_tagged(resolved)) for source in self.tagged_sources
        ]
        items = merge_sources(authoritative, batches)

        if self.alias_resolver.alias_for(resolved) == PERSONAL_CONTEXT:
            # Unprovisioned personal context shows nothing, not a placeholder
            items = enforce_profile_singleton(
                items, synthesize_placeholder=resolved != PERSONAL_CONTEXT
            )

        logger.debug(
            "collection_items_resolved",
            collection_id=collection_id,
            resolved_id=resolved,
            authoritative_count=len(authoritative),
            item_count=len(items),
        )
        return items

    async def _fetch_authoritative(self, collection_id: str) -> list[ContentItem]:
        try:
            return await self.gateway.fetch_collection_items(collection_id)
        except EntityNotFoundError as exc:
            # Unmigrated schema or unknown alias: the join is simply empty
            logger.info(
                "collection_items_unavailable",
                collection_id=collection_id,
                reason=str(exc),
            )
            return []
