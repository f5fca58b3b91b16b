"""Events broadcast on the ``collection:refresh`` channel."""

from dataclasses import dataclass

from learnhub.domain.common.domain_event import DomainEvent

# Targets every scope, e.g. when a deleted item belonged to no collection
ANY_COLLECTION = "*"


@dataclass(frozen=True, kw_only=True)
class CollectionEvent(DomainEvent):
    """Something changed in a collection; views showing it should refresh."""

    collection_id: str

    def concerns(self, scope: str) -> bool:
        return self.collection_id in (scope, ANY_COLLECTION)


@dataclass(frozen=True, kw_only=True)
class MembershipChanged(CollectionEvent):
    item_kind: str
    item_id: str
    added: bool


@dataclass(frozen=True, kw_only=True)
class CollectionRenamed(CollectionEvent):
    label: str


@dataclass(frozen=True, kw_only=True)
class CollectionCreated(CollectionEvent):
    label: str


@dataclass(frozen=True, kw_only=True)
class CollectionDeleted(CollectionEvent):
    """Views scoped to the collection must move to a default scope."""


@dataclass(frozen=True, kw_only=True)
class ItemDeleted(CollectionEvent):
    """An item was deleted outright; sent once per collection it belonged to."""

    item_kind: str
    item_id: str
