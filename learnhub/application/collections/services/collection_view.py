"""
Consumer side of the engine: one scoped, self-refreshing item list.

A view shows the items of one collection scope. It refreshes itself when the
refresh channel reports a change that concerns its scope, throws away fetch
results that were overtaken by a mutation or by a scope change, and moves to
the default scope when its collection is deleted.
"""

from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime

import structlog

from learnhub.application.collections.services.aggregation_resolver import (
    AggregationResolver,
)
from learnhub.application.collections.services.collection_store import CollectionStore
from learnhub.application.collections.services.refresh_channel import RefreshChannel
from learnhub.application.collections.services.scope_versions import ScopeVersions
from learnhub.domain.collections.entities.content_item import ContentItem, Course
from learnhub.domain.collections.events import CollectionDeleted, CollectionEvent
from learnhub.domain.collections.item_kind import ItemKind
from learnhub.domain.collections.services.alias_resolver import AliasResolver
from learnhub.domain.collections.services.filter_engine import apply_filters
from learnhub.domain.collections.system_collections import ALL_COURSES
from learnhub.domain.collections.value_objects.filter_state import FilterState

logger = structlog.get_logger(__name__)


def annotate_saved(courses: Iterable[Course], store: CollectionStore) -> list[Course]:
    """Stamp ``is_saved`` and ``collections`` on courses from the store."""
    annotated = []
    for course in courses:
        collection_ids = store.collections_of(ItemKind.COURSE, course.id)
        annotated.append(
            replace(
                course,
                is_saved=bool(collection_ids),
                collections=tuple(sorted(collection_ids)),
            )
        )
    return annotated


class CollectionView:
    """Item list of the currently selected collection."""

    def __init__(
        self,
        resolver: AggregationResolver,
        store: CollectionStore,
        alias_resolver: AliasResolver,
        channel: RefreshChannel,
        versions: ScopeVersions,
        default_scope: str = ALL_COURSES,
    ) -> None:
        self.resolver = resolver
        self.store = store
        self.alias_resolver = alias_resolver
        self.versions = versions
        self.default_scope = default_scope
        self.scope = default_scope
        self.items: list[ContentItem] = []
        self._closed = False
        self._subscription = channel.subscribe(self._on_event)

    @property
    def closed(self) -> bool:
        return self._closed

    async def open(self, scope: str) -> list[ContentItem]:
        """Switch to a scope and load it; earlier in-flight loads are discarded."""
        self.scope = self.alias_resolver.resolve(scope)
        self.items = []
        return await self.refresh()

    async def refresh(self) -> list[ContentItem]:
        """
        Reload the current scope.

        Returns:
            The items shown after the refresh. When the fetch result is
            discarded, the items shown before it.
        """
        scope = self.scope
        if self.versions.consume_suppression(scope):
            logger.debug("collection_refresh_suppressed", scope=scope)
            return self.items

        ticket = self.versions.capture(scope)
        items = await self.resolver.list_items(scope)

        if self._closed or self.scope != scope or self.versions.is_stale(ticket):
            logger.debug(
                "collection_fetch_discarded",
                scope=scope,
                current_scope=self.scope,
                closed=self._closed,
                fetched_version=ticket.version,
                current_version=self.versions.current(scope),
            )
            return self.items

        # An optimistically removed item must not flash back in
        removed = self.store.pending_removals(scope)
        self.items = [item for item in items if item.key not in removed]
        return self.items

    def courses(self, filters: FilterState, now: datetime | None = None) -> list[Course]:
        """Courses of the current items that pass ``filters``."""
        courses = annotate_saved(
            (item for item in self.items if isinstance(item, Course)), self.store
        )
        return apply_filters(filters, courses, self.scope, now=now)

    def close(self) -> None:
        """Stop listening; fetches still in flight are discarded on arrival."""
        self._closed = True
        self._subscription.unsubscribe()

    def _on_event(self, event: CollectionEvent):
        if self._closed:
            return None
        if isinstance(event, CollectionDeleted) and event.collection_id == self.scope:
            logger.info(
                "collection_view_redirected",
                deleted_scope=self.scope,
                scope=self.default_scope,
            )
            return self.open(self.default_scope)
        if event.concerns(self.scope):
            return self.refresh()
        return None
