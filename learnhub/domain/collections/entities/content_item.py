"""Content items as seen by the collection engine."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from learnhub.domain.collections.item_kind import ItemKind
from learnhub.domain.common.exceptions import ValidationError

VIRTUAL_PROFILE_ID = "virtual-profile-placeholder"


@dataclass(frozen=True)
class ContentItem:
    """
    A unit of platform content, treated polymorphically.

    Ids are only unique within a kind, so ``key`` is what identifies an item.
    The engine never creates or deletes items (notes excepted); it only reads
    them and manages their collection associations.
    """

    kind: ItemKind
    id: str
    title: str
    created_at: datetime
    updated_at: datetime

    # Self-tagging kinds carry their own membership list
    collection_ids: tuple[str, ...] = ()
    is_virtual: bool = False
    details: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationError("Content item id cannot be empty", field="id")

    @property
    def key(self) -> tuple[ItemKind, str]:
        return (self.kind, self.id)

    def is_tagged_with(self, collection_id: str) -> bool:
        return collection_id in self.collection_ids

    @classmethod
    def virtual_profile(cls) -> "ContentItem":
        """Placeholder profile shown until the user writes a real one."""
        now = datetime.now(UTC)
        return cls(
            kind=ItemKind.CONTEXT_PROFILE,
            id=VIRTUAL_PROFILE_ID,
            title="My Profile",
            created_at=now,
            updated_at=now,
            is_virtual=True,
        )


@dataclass(frozen=True, kw_only=True)
class Course(ContentItem):
    """
    Catalog course.

    Courses carry their own denormalised collection list because the catalog
    is read far more often than any other kind.
    """

    kind: ItemKind = ItemKind.COURSE
    author: str = ""
    description: str = ""
    category: str = ""
    badges: frozenset[str] = frozenset()
    progress: int = 0
    rating: float = 0.0
    date_added: datetime | None = None
    collections: tuple[str, ...] = ()
    is_saved: bool = False
    lesson_titles: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.kind is not ItemKind.COURSE:
            raise ValidationError("Course kind must be COURSE", field="kind", value=self.kind)
        if not 0 <= self.progress <= 100:
            raise ValidationError("Progress must be between 0 and 100", field="progress")

    @property
    def added_at(self) -> datetime:
        """Date used by the date filters, falling back to creation time."""
        value = self.date_added or self.created_at
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
