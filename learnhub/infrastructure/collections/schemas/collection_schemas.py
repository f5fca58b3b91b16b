"""Pydantic schemas for collection API request/response validation."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from learnhub.domain.collections.entities.collection import Collection
from learnhub.domain.collections.entities.content_item import ContentItem, Course
from learnhub.domain.collections.item_kind import ItemKind
from learnhub.domain.collections.value_objects.membership_key import MembershipKey
from learnhub.domain.common.value_objects.ids import CollectionId, UserId

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CollectionResponse(BaseModel):
    """Schema for Collection response."""

    id: str
    label: str
    color: str
    is_system_defined: bool
    system_alias: str | None = None
    owner_id: int
    org_id: int | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, collection: Collection) -> "CollectionResponse":
        return cls(
            id=str(collection.id),
            label=collection.label,
            color=collection.color,
            is_system_defined=collection.is_system_defined,
            system_alias=collection.system_alias,
            owner_id=collection.owner_id.value,
            org_id=collection.org_id,
            created_at=collection.created_at,
            updated_at=collection.updated_at,
        )

    def to_domain(self) -> Collection:
        return Collection.create_with_id(
            id=CollectionId(self.id),
            owner_id=UserId(self.owner_id),
            label=self.label,
            color=self.color,
            is_system_defined=self.is_system_defined,
            created_at=self.created_at,
            updated_at=self.updated_at,
            org_id=self.org_id,
            system_alias=self.system_alias,
        )


class CollectionCreateRequest(BaseModel):
    """Schema for creating a custom collection."""

    label: str = Field(..., max_length=100, description="Collection label")
    color: str | None = Field(None, pattern=HEX_COLOR_PATTERN, description="Hex colour")
    org_id: int | None = Field(None, description="Owning organisation, for org collections")


class CollectionRenameRequest(BaseModel):
    """Schema for renaming a collection."""

    label: str = Field(..., max_length=100, description="New collection label")


class MembershipRequest(BaseModel):
    """Schema for adding an item to a collection."""

    item_id: str = Field(..., min_length=1, max_length=64)
    item_kind: str = Field(..., description="One of the ItemKind values")


class MembershipResponse(BaseModel):
    """Schema for one membership row."""

    item_kind: ItemKind
    item_id: str
    collection_id: str

    @classmethod
    def from_domain(cls, key: MembershipKey) -> "MembershipResponse":
        return cls(item_kind=key.item_kind, item_id=key.item_id, collection_id=key.collection_id)

    def to_domain(self) -> MembershipKey:
        return MembershipKey(
            item_kind=self.item_kind, item_id=self.item_id, collection_id=self.collection_id
        )


class ContentItemResponse(BaseModel):
    """
    Schema for a content item.

    Course-only fields are null for every other kind.
    """

    kind: ItemKind
    id: str
    title: str
    created_at: datetime
    updated_at: datetime
    collection_ids: list[str] = Field(default_factory=list)
    is_virtual: bool = False
    details: dict[str, Any] = Field(default_factory=dict)

    # Course fields
    author: str | None = None
    description: str | None = None
    category: str | None = None
    badges: list[str] | None = None
    progress: int | None = None
    rating: float | None = None
    date_added: datetime | None = None
    collections: list[str] | None = None
    is_saved: bool | None = None
    lesson_titles: list[str] | None = None

    @classmethod
    def from_domain(cls, item: ContentItem) -> "ContentItemResponse":
        response = cls(
            kind=item.kind,
            id=item.id,
            title=item.title,
            created_at=item.created_at,
            updated_at=item.updated_at,
            collection_ids=list(item.collection_ids),
            is_virtual=item.is_virtual,
            details=dict(item.details),
        )
        if isinstance(item, Course):
            response.author = item.author
            response.description = item.description
            response.category = item.category
            response.badges = sorted(item.badges)
            response.progress = item.progress
            response.rating = item.rating
            response.date_added = item.date_added
            response.collections = list(item.collections)
            response.is_saved = item.is_saved
            response.lesson_titles = list(item.lesson_titles)
        return response

    def to_domain(self) -> ContentItem:
        if self.kind is ItemKind.COURSE:
            return Course(
                id=self.id,
                title=self.title,
                created_at=self.created_at,
                updated_at=self.updated_at,
                details=dict(self.details),
                author=self.author or "",
                description=self.description or "",
                category=self.category or "",
                badges=frozenset(self.badges or ()),
                progress=self.progress or 0,
                rating=self.rating or 0.0,
                date_added=self.date_added,
                collections=tuple(self.collections or ()),
                is_saved=bool(self.is_saved),
                lesson_titles=tuple(self.lesson_titles or ()),
            )
        return ContentItem(
            kind=self.kind,
            id=self.id,
            title=self.title,
            created_at=self.created_at,
            updated_at=self.updated_at,
            collection_ids=tuple(self.collection_ids),
            is_virtual=self.is_virtual,
            details=dict(self.details),
        )


class ConversationCollectionsRequest(BaseModel):
    """Schema for replacing a conversation's collections."""

    collection_ids: list[str] = Field(default_factory=list, description="Collection ids or aliases")
