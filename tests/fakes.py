"""In-memory stand-ins for the engine's remote collaborators."""

import asyncio
from datetime import UTC, datetime, timedelta

from learnhub.domain.collections.entities.collection import Collection
from learnhub.domain.collections.entities.content_item import ContentItem, Course
from learnhub.domain.collections.item_kind import CONVERSATION_KINDS, ItemKind
from learnhub.domain.collections.system_collections import SYSTEM_COLLECTIONS
from learnhub.domain.collections.value_objects.membership_key import MembershipKey
from learnhub.domain.common.exceptions import (
    EntityNotFoundError,
    StoreNotProvisionedError,
    TransientError,
)
from learnhub.domain.common.value_objects.ids import CollectionId, UserId

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)


def make_item(
    kind: ItemKind,
    id: str,
    title: str | None = None,
    created_at: datetime = NOW,
    collection_ids: tuple[str, ...] = (),
) -> ContentItem:
    return ContentItem(
        kind=kind,
        id=id,
        title=title or f"{kind.value.lower()} {id}",
        created_at=created_at,
        updated_at=created_at,
        collection_ids=collection_ids,
    )


def make_course(id: str, days_ago: int = 0, title: str | None = None, **fields: object) -> Course:
    created = NOW - timedelta(days=days_ago)
    fields.setdefault("date_added", created)
    return Course(
        id=id,
        title=title or f"Course {id}",
        created_at=created,
        updated_at=created,
        **fields,
    )


def system_collections(owner_id: int = 1) -> list[Collection]:
    """One system collection per alias, with ids like ``sys-favorites``."""
    return [
        Collection.create_with_id(
            id=CollectionId(f"sys-{spec.alias}"),
            owner_id=UserId(owner_id),
            label=spec.label,
            color=spec.color,
            is_system_defined=True,
            created_at=NOW,
            updated_at=NOW,
            system_alias=spec.alias,
        )
        for spec in SYSTEM_COLLECTIONS
    ]


def custom_collection(id: str, label: str, owner_id: int = 1) -> Collection:
    return Collection.create_with_id(
        id=CollectionId(id),
        owner_id=UserId(owner_id),
        label=label,
        color="#3B82F6",
        is_system_defined=False,
        created_at=NOW,
        updated_at=NOW,
    )


class FakeSession:
    def __init__(self, user_id: int | None = 1) -> None:
        self.user_id = user_id

    def current_user_id(self) -> int | None:
        return self.user_id


class FakeGateway:
    """
    Gateway over dictionaries.

    ``fail_next[name]`` makes the next call of that method raise the given
    error; ``gates[name]`` makes calls of that method wait for the event.
    """

    def __init__(self, collections: list[Collection] | None = None) -> None:
        self.collections: dict[str, Collection] = {str(c.id): c for c in collections or []}
        self.memberships: list[MembershipKey] = []
        self.items: dict[tuple[ItemKind, str], ContentItem] = {}
        self.counts: dict[str, int] = {}
        self.calls: list[tuple] = []
        self.fail_next: dict[str, Exception] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.provisioned = True
        self.deleted_notes: list[str] = []

    async def _enter(self, name: str, *args: object) -> None:
        self.calls.append((name, *args))
        gate = self.gates.get(name)
        if gate is not None:
            await gate.wait()
        error = self.fail_next.pop(name, None)
        if error is not None:
            raise error

    async def add_membership(self, item_id: str, item_kind: ItemKind, collection_id: str) -> None:
        await self._enter("add_membership", item_id, item_kind, collection_id)
        key = MembershipKey(item_kind=item_kind, item_id=item_id, collection_id=collection_id)
        if key not in self.memberships:
            self.memberships.append(key)

    async def remove_membership(self, item_id: str, collection_id: str) -> None:
        await self._enter("remove_membership", item_id, collection_id)
        self.memberships = [
            m
            for m in self.memberships
            if not (m.item_id == item_id and m.collection_id == collection_id)
        ]

    async def fetch_collection_items(self, collection_id: str) -> list[ContentItem]:
        await self._enter("fetch_collection_items", collection_id)
        if not self.provisioned:
            raise StoreNotProvisionedError("collection_items")
        return [
            self.items[m.item_key]
            for m in self.memberships
            if m.collection_id == collection_id and m.item_key in self.items
        ]

    async def fetch_membership_counts(self, owner_id: int) -> dict[str, int]:
        await self._enter("fetch_membership_counts", owner_id)
        return dict(self.counts)

    async def list_memberships(self) -> list[MembershipKey]:
        await self._enter("list_memberships")
        return list(self.memberships)

    async def list_collections(self) -> list[Collection]:
        await self._enter("list_collections")
        return list(self.collections.values())

    async def create_collection(self, label: str, color: str | None = None) -> Collection:
        await self._enter("create_collection", label, color)
        collection = custom_collection(f"custom-{len(self.collections) + 1}", label)
        self.collections[str(collection.id)] = collection
        return collection

    async def rename_collection(self, collection_id: str, label: str) -> None:
        await self._enter("rename_collection", collection_id, label)
        if collection_id not in self.collections:
            raise EntityNotFoundError("Collection", collection_id)

    async def delete_collection(self, collection_id: str) -> None:
        await self._enter("delete_collection", collection_id)
        if self.collections.pop(collection_id, None) is None:
            raise EntityNotFoundError("Collection", collection_id)
        self.memberships = [m for m in self.memberships if m.collection_id != collection_id]

    async def delete_note(self, note_id: str) -> None:
        await self._enter("delete_note", note_id)
        self.deleted_notes.append(note_id)

    def calls_to(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]


class FakeConversationSource:
    def __init__(self, conversations: list[ContentItem] | None = None) -> None:
        self.conversations = list(conversations or [])
        self.unavailable = False

    @property
    def kinds(self) -> frozenset[ItemKind]:
        return CONVERSATION_KINDS

    async def list_tagged(self, collection_id: str) -> list[ContentItem]:
        if self.unavailable:
            raise TransientError("conversations unavailable")
        return [c for c in self.conversations if c.is_tagged_with(collection_id)]

    async def list_all(self) -> list[ContentItem]:
        return list(self.conversations)
