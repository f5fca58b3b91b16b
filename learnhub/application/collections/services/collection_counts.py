"""Item counts per collection, kept fresh from the refresh channel."""

import structlog

from learnhub.application.collections.protocols.collection_gateway import (
    CollectionGatewayProtocol,
)
from learnhub.application.collections.protocols.session import SessionProtocol
from learnhub.application.collections.services.refresh_channel import RefreshChannel
from learnhub.domain.collections.events import CollectionEvent
from learnhub.domain.collections.services.alias_resolver import AliasResolver
from learnhub.domain.common.exceptions import DomainError

logger = structlog.get_logger(__name__)


class CollectionCounts:
    """
    Sidebar badge counts.

    Counts are keyed by collection id, by alias for system collections, and
    by pseudo-collection id (``conversations``, ``certifications``...). Any
    refresh event re-fetches the whole table.
    """

    def __init__(
        self,
        gateway: CollectionGatewayProtocol,
        session: SessionProtocol,
        alias_resolver: AliasResolver,
        channel: RefreshChannel,
    ) -> None:
        self.gateway = gateway
        self.session = session
        self.alias_resolver = alias_resolver
        self.counts: dict[str, int] = {}
        self._subscription = channel.subscribe(self._on_event)

    async def refresh(self) -> dict[str, int]:
        """Re-fetch counts; on failure the previous counts stay in place."""
        user_id = self.session.current_user_id()
        if user_id is None:
            self.counts = {}
            return self.counts
        try:
            self.counts = await self.gateway.fetch_membership_counts(user_id)
        except DomainError as exc:
            logger.warning("collection_counts_refresh_failed", user_id=user_id, error=str(exc))
        return self.counts

    def count_for(self, collection_id: str) -> int:
        """Count for a collection id, alias or pseudo-collection."""
        if collection_id in self.counts:
            return self.counts[collection_id]
        resolved = self.alias_resolver.resolve(collection_id)
        if resolved in self.counts:
            return self.counts[resolved]
        alias = self.alias_resolver.alias_for(collection_id)
        if alias is not None:
            return self.counts.get(alias, 0)
        return 0

    def close(self) -> None:
        self._subscription.unsubscribe()

    def _on_event(self, event: CollectionEvent):
        return self.refresh()
