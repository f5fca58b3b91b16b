"""Tests for AliasResolver domain service."""

import pytest

from learnhub.domain.collections.entities.collection import Collection
from learnhub.domain.collections.services.alias_resolver import AliasResolver
from learnhub.domain.common.exceptions import InvariantViolationError
from learnhub.domain.common.value_objects.ids import CollectionId, UserId
from tests.fakes import NOW, custom_collection, system_collections


def _legacy_system(id: str, label: str) -> Collection:
    return Collection.create_with_id(
        id=CollectionId(id),
        owner_id=UserId(1),
        label=label,
        color="#000000",
        is_system_defined=True,
        created_at=NOW,
        updated_at=NOW,
    )


class TestAliasResolver:
    def test_resolves_each_alias(self) -> None:
        resolver = AliasResolver(system_collections())

        assert resolver.resolve("favorites") == "sys-favorites"
        assert resolver.resolve("research") == "sys-research"
        assert resolver.resolve("to_learn") == "sys-to_learn"
        assert resolver.resolve("personal-context") == "sys-personal-context"

    def test_non_alias_is_returned_unchanged(self) -> None:
        resolver = AliasResolver(system_collections())

        assert resolver.resolve("custom-1") == "custom-1"
        assert resolver.resolve("academy") == "academy"

    def test_resolution_is_idempotent(self) -> None:
        resolver = AliasResolver(system_collections())

        once = resolver.resolve("favorites")
        assert resolver.resolve(once) == once

    def test_unbootstrapped_alias_stays_literal(self) -> None:
        resolver = AliasResolver()

        assert resolver.resolve("personal-context") == "personal-context"
        assert not resolver.is_bootstrapped()

    def test_custom_collection_cannot_shadow_alias(self) -> None:
        resolver = AliasResolver([custom_collection("c1", "Favorites 2")])

        assert resolver.resolve("favorites") == "favorites"

    def test_legacy_row_matched_by_label(self) -> None:
        resolver = AliasResolver([_legacy_system("old-ws", "Workspace")])

        assert resolver.resolve("research") == "old-ws"
        assert resolver.alias_for("old-ws") == "research"

    def test_renamed_system_collection_keeps_alias(self) -> None:
        collections = system_collections()
        collections[0].rename("Starred")
        resolver = AliasResolver(collections)

        assert resolver.resolve("favorites") == "sys-favorites"

    def test_alias_for(self) -> None:
        resolver = AliasResolver(system_collections())

        assert resolver.alias_for("sys-to_learn") == "to_learn"
        assert resolver.alias_for("to_learn") == "to_learn"
        assert resolver.alias_for("custom-1") is None

    def test_validate_accepts_complete_table(self) -> None:
        AliasResolver(system_collections()).validate()

    def test_validate_rejects_missing_alias(self) -> None:
        resolver = AliasResolver(system_collections()[:3])

        with pytest.raises(InvariantViolationError, match="personal-context"):
            resolver.validate()

    def test_validate_rejects_ambiguous_alias(self) -> None:
        collections = [*system_collections(), _legacy_system("dup", "Favorites")]
        resolver = AliasResolver(collections)

        with pytest.raises(InvariantViolationError, match="favorites"):
            resolver.validate()
