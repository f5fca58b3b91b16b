"""Collection entity for grouping content items."""

from dataclasses import dataclass
from datetime import UTC, datetime

from learnhub.domain.collections.system_collections import (
    DEFAULT_CUSTOM_COLOR,
    LABEL_TO_ALIAS,
    SystemCollectionSpec,
    is_reserved_label,
)
from learnhub.domain.common.entity import Entity
from learnhub.domain.common.exceptions import AuthorizationError, ValidationError
from learnhub.domain.common.value_objects.ids import CollectionId, UserId


def _validate_label(label: str, *, is_system_defined: bool) -> str:
    if not label or not label.strip():
        raise ValidationError("Collection label cannot be empty", field="label")
    if not is_system_defined and is_reserved_label(label):
        raise ValidationError(
            f"'{label.strip()}' is reserved for a system collection", field="label", value=label
        )
    return label.strip()


@dataclass
class Collection(Entity[CollectionId]):
    """
    Collection entity.

    A named, owned grouping of content items. System collections are seeded
    at account bootstrap and remember the alias they were seeded for; custom
    and organisation collections are created by explicit user action.
    """

    # Identity
    id: CollectionId
    owner_id: UserId

    # Content
    label: str
    color: str
    is_system_defined: bool

    # Timestamps
    created_at: datetime
    updated_at: datetime

    # Optional fields
    org_id: int | None = None
    system_alias: str | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.label or not self.label.strip():
            raise ValidationError("Collection label cannot be empty", field="label")

    # Command methods
    def rename(self, label: str) -> None:
        """
        Change the label. System collections may be renamed too.

        A system row seeded before aliases were stored is matched to its alias
        by label, so the alias is pinned before the label changes.
        """
        new_label = _validate_label(label, is_system_defined=self.is_system_defined)
        if self.is_system_defined and self.system_alias is None:
            self.system_alias = LABEL_TO_ALIAS.get(self.label)
        self.label = new_label
        self.updated_at = datetime.now(UTC)

    def ensure_deletable(self) -> None:
        """System collections can never be deleted."""
        if self.is_system_defined:
            raise AuthorizationError(f"System collection '{self.label}' cannot be deleted")

    # Factory methods
    @classmethod
    def create(
        cls,
        id: CollectionId,
        owner_id: UserId,
        label: str,
        color: str | None = None,
        org_id: int | None = None,
    ) -> "Collection":
        """Factory for creating a new custom or organisation collection."""
        now = datetime.now(UTC)
        return cls(
            id=id,
            owner_id=owner_id,
            label=_validate_label(label, is_system_defined=False),
            color=color or DEFAULT_CUSTOM_COLOR,
            is_system_defined=False,
            created_at=now,
            updated_at=now,
            org_id=org_id,
        )

    @classmethod
    def create_system(
        cls, id: CollectionId, owner_id: UserId, spec: SystemCollectionSpec
    ) -> "Collection":
        """Factory for seeding a system collection from the alias table."""
        now = datetime.now(UTC)
        return cls(
            id=id,
            owner_id=owner_id,
            label=spec.label,
            color=spec.color,
            is_system_defined=True,
            created_at=now,
            updated_at=now,
            system_alias=spec.alias,
        )

    @classmethod
    def create_with_id(
        cls,
        id: CollectionId,
        owner_id: UserId,
        label: str,
        color: str,
        is_system_defined: bool,
        created_at: datetime,
        updated_at: datetime,
        org_id: int | None = None,
        system_alias: str | None = None,
    ) -> "Collection":
        """Factory for reconstituting a collection from persistence."""
        return cls(
            id=id,
            owner_id=owner_id,
            label=label,
            color=color,
            is_system_defined=is_system_defined,
            created_at=created_at,
            updated_at=updated_at,
            org_id=org_id,
            system_alias=system_alias,
        )
