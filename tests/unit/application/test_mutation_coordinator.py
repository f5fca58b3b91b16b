"""Tests for MutationCoordinator."""

import asyncio

import pytest

from learnhub.application.collections.services.collection_store import (
    CollectionStore,
    LedgerStatus,
)
from learnhub.application.collections.services.mutation_coordinator import (
    MutationCoordinator,
)
from learnhub.application.collections.services.scope_versions import ScopeVersions
from learnhub.domain.collections.events import (
    ANY_COLLECTION,
    CollectionCreated,
    CollectionDeleted,
    CollectionRenamed,
    ItemDeleted,
    MembershipChanged,
)
from learnhub.domain.collections.item_kind import ItemKind
from learnhub.domain.collections.services.alias_resolver import AliasResolver
from learnhub.domain.collections.value_objects.membership_key import MembershipKey
from learnhub.domain.common.exceptions import (
    AuthenticationError,
    AuthorizationError,
    EntityNotFoundError,
    InvariantViolationError,
    TransientError,
    ValidationError,
)
from learnhub.domain.common.value_objects.ids import CollectionId
from tests.fakes import FakeGateway, custom_collection, system_collections

COURSE = ItemKind.COURSE


def _key(item_id: str = "42", collection_id: str = "c1", kind: ItemKind = COURSE):
    return MembershipKey(item_kind=kind, item_id=item_id, collection_id=collection_id)


class TestAdd:
    async def test_add_commits_and_publishes(
        self,
        coordinator: MutationCoordinator,
        store: CollectionStore,
        gateway: FakeGateway,
        versions: ScopeVersions,
        events: list,
    ) -> None:
        result = await coordinator.add("42", COURSE, "c1")

        assert result.is_success
        assert store.is_member(_key())
        assert gateway.memberships == [_key()]
        assert versions.current("c1") == 1
        assert isinstance(events[0], MembershipChanged)
        assert events[0].added

    async def test_add_twice_is_idempotent(
        self, coordinator: MutationCoordinator, store: CollectionStore, gateway: FakeGateway
    ) -> None:
        await coordinator.add("42", COURSE, "c1")
        await coordinator.add("42", COURSE, "c1")

        assert store.is_member(_key())
        assert gateway.memberships == [_key()]

    async def test_alias_is_resolved(
        self, coordinator: MutationCoordinator, gateway: FakeGateway
    ) -> None:
        await coordinator.add("42", COURSE, "favorites")

        assert gateway.calls_to("add_membership") == [
            ("add_membership", "42", COURSE, "sys-favorites")
        ]

    async def test_change_is_visible_before_remote_call_returns(
        self, coordinator: MutationCoordinator, store: CollectionStore, gateway: FakeGateway
    ) -> None:
        gateway.gates["add_membership"] = asyncio.Event()

        task = asyncio.create_task(coordinator.add("42", COURSE, "c1"))
        await asyncio.sleep(0)

        assert store.is_saved(COURSE, "42")
        assert store.has_pending(_key())

        gateway.gates["add_membership"].set()
        await task
        assert not store.has_pending(_key())

    async def test_failed_add_rolls_back(
        self,
        coordinator: MutationCoordinator,
        store: CollectionStore,
        gateway: FakeGateway,
        events: list,
    ) -> None:
        gateway.fail_next["add_membership"] = TransientError("boom")

        result = await coordinator.add("42", COURSE, "c1")

        assert result.is_failure
        assert isinstance(result.unwrap_error(), TransientError)
        assert not store.is_saved(COURSE, "42")
        assert events == []

    async def test_unexpected_error_rolls_back_and_propagates(
        self, coordinator: MutationCoordinator, store: CollectionStore, gateway: FakeGateway
    ) -> None:
        gateway.fail_next["add_membership"] = RuntimeError("bug")

        with pytest.raises(RuntimeError):
            await coordinator.add("42", COURSE, "c1")

        assert not store.is_saved(COURSE, "42")

    async def test_cancelled_add_rolls_back_and_frees_the_lock(
        self, coordinator: MutationCoordinator, store: CollectionStore, gateway: FakeGateway
    ) -> None:
        gateway.gates["add_membership"] = asyncio.Event()

        task = asyncio.create_task(coordinator.add("42", COURSE, "c1"))
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert store.status(_key()) is LedgerStatus.ROLLED_BACK
        assert not store.has_pending(_key())
        assert not store.is_saved(COURSE, "42")
        assert coordinator._key_locks == {}

        # The key is usable again
        gateway.gates.pop("add_membership").set()
        result = await coordinator.add("42", COURSE, "c1")
        assert result.is_success
        assert store.is_member(_key())

    async def test_signed_out_fails_without_remote_call(
        self,
        coordinator: MutationCoordinator,
        session,
        store: CollectionStore,
        gateway: FakeGateway,
    ) -> None:
        session.user_id = None

        result = await coordinator.add("42", COURSE, "c1")

        assert isinstance(result.unwrap_error(), AuthenticationError)
        assert gateway.calls == []
        assert not store.is_saved(COURSE, "42")


class TestRemove:
    async def test_add_then_remove(
        self, coordinator: MutationCoordinator, store: CollectionStore, gateway: FakeGateway
    ) -> None:
        await coordinator.add("42", COURSE, "c1")

        result = await coordinator.remove("42", "c1", COURSE)

        assert result.is_success
        assert not store.is_saved(COURSE, "42")
        assert gateway.memberships == []

    async def test_failed_remove_restores_membership(
        self, coordinator: MutationCoordinator, store: CollectionStore, gateway: FakeGateway
    ) -> None:
        store.hydrate([_key()])
        gateway.fail_next["remove_membership"] = EntityNotFoundError("Collection", "c1")

        result = await coordinator.remove("42", "c1", COURSE)

        assert isinstance(result.unwrap_error(), EntityNotFoundError)
        assert store.is_member(_key())

    async def test_remove_without_kind_covers_every_known_kind(
        self, coordinator: MutationCoordinator, store: CollectionStore
    ) -> None:
        store.hydrate([_key(), _key(kind=ItemKind.NOTE), _key("7")])

        result = await coordinator.remove("42", "c1")

        assert result.is_success
        assert store.members_of("c1") == {(COURSE, "7")}

    async def test_failed_remove_without_kind_restores_every_kind(
        self, coordinator: MutationCoordinator, store: CollectionStore, gateway: FakeGateway
    ) -> None:
        store.hydrate([_key(), _key(kind=ItemKind.NOTE)])
        gateway.fail_next["remove_membership"] = TransientError("boom")

        await coordinator.remove("42", "c1")

        assert store.members_of("c1") == {(COURSE, "42"), (ItemKind.NOTE, "42")}

    async def test_remove_of_unknown_item_still_calls_remote(
        self, coordinator: MutationCoordinator, gateway: FakeGateway, events: list
    ) -> None:
        result = await coordinator.remove("99", "favorites")

        assert result.is_success
        assert gateway.calls_to("remove_membership") == [
            ("remove_membership", "99", "sys-favorites")
        ]
        assert events[0].collection_id == "sys-favorites"

    async def test_same_key_calls_reach_remote_in_request_order(
        self, coordinator: MutationCoordinator, store: CollectionStore, gateway: FakeGateway
    ) -> None:
        gateway.gates["add_membership"] = asyncio.Event()

        add = asyncio.create_task(coordinator.add("42", COURSE, "c1"))
        remove = asyncio.create_task(coordinator.remove("42", "c1", COURSE))
        await asyncio.sleep(0)

        # The remove waits for the in-flight add of the same key
        assert gateway.calls_to("remove_membership") == []
        assert not store.is_member(_key())

        gateway.gates["add_membership"].set()
        await asyncio.gather(add, remove)

        assert [call[0] for call in gateway.calls] == ["add_membership", "remove_membership"]
        assert gateway.memberships == []
        assert not store.is_member(_key())

    async def test_remove_without_kind_waits_for_in_flight_add_of_another_kind(
        self, coordinator: MutationCoordinator, store: CollectionStore, gateway: FakeGateway
    ) -> None:
        store.hydrate([_key()])
        gateway.gates["add_membership"] = asyncio.Event()

        add = asyncio.create_task(coordinator.add("42", ItemKind.NOTE, "c1"))
        await asyncio.sleep(0)
        remove = asyncio.create_task(coordinator.remove("42", "c1"))
        await asyncio.sleep(0)

        assert gateway.calls_to("remove_membership") == []

        gateway.gates["add_membership"].set()
        results = await asyncio.gather(add, remove)

        assert all(result.is_success for result in results)
        assert [call[0] for call in gateway.calls] == ["add_membership", "remove_membership"]
        assert store.members_of("c1") == set()
        assert coordinator._key_locks == {}

    async def test_suppress_next_refresh_resolves_alias(
        self, coordinator: MutationCoordinator, versions: ScopeVersions
    ) -> None:
        coordinator.suppress_next_refresh("favorites")

        assert versions.consume_suppression("sys-favorites")
        assert not versions.consume_suppression("sys-favorites")


class TestCollectionLifecycle:
    async def test_create_collection(
        self, coordinator: MutationCoordinator, events: list
    ) -> None:
        result = await coordinator.create_collection("  Leadership ", "#000000")

        collection = result.unwrap()
        assert collection.label == "Leadership"
        assert str(collection.id) in coordinator.collections
        assert isinstance(events[0], CollectionCreated)

    @pytest.mark.parametrize("label", ["", "   ", "Favorites", "personal context"])
    async def test_create_rejects_empty_and_reserved_labels(
        self, coordinator: MutationCoordinator, gateway: FakeGateway, label: str
    ) -> None:
        result = await coordinator.create_collection(label)

        assert isinstance(result.unwrap_error(), ValidationError)
        assert gateway.calls_to("create_collection") == []

    async def test_rename(
        self, coordinator: MutationCoordinator, gateway: FakeGateway, events: list
    ) -> None:
        result = await coordinator.rename_collection("c1", " Deep reading ")

        assert result.is_success
        assert coordinator.collections["c1"].label == "Deep reading"
        assert gateway.calls_to("rename_collection") == [
            ("rename_collection", "c1", "Deep reading")
        ]
        assert isinstance(events[0], CollectionRenamed)

    async def test_rename_to_empty_makes_no_remote_call(
        self, coordinator: MutationCoordinator, gateway: FakeGateway
    ) -> None:
        result = await coordinator.rename_collection("c1", "  ")

        assert isinstance(result.unwrap_error(), ValidationError)
        assert gateway.calls == []

    async def test_rename_custom_to_reserved_label_is_rejected(
        self, coordinator: MutationCoordinator, gateway: FakeGateway
    ) -> None:
        result = await coordinator.rename_collection("c1", "Watchlist")

        assert isinstance(result.unwrap_error(), ValidationError)
        assert gateway.calls == []

    async def test_system_collection_rename_by_alias(
        self, coordinator: MutationCoordinator, gateway: FakeGateway
    ) -> None:
        result = await coordinator.rename_collection("favorites", "Starred")

        assert result.is_success
        assert gateway.calls_to("rename_collection") == [
            ("rename_collection", "sys-favorites", "Starred")
        ]

    async def test_failed_rename_restores_label(
        self, coordinator: MutationCoordinator, gateway: FakeGateway
    ) -> None:
        gateway.fail_next["rename_collection"] = TransientError("boom")

        result = await coordinator.rename_collection("c1", "Other")

        assert result.is_failure
        assert coordinator.collections["c1"].label == "Reading"

    async def test_delete_system_collection_is_refused_locally(
        self, coordinator: MutationCoordinator, gateway: FakeGateway
    ) -> None:
        result = await coordinator.delete_collection("favorites")

        assert isinstance(result.unwrap_error(), AuthorizationError)
        assert gateway.calls == []

    async def test_delete_unknown_alias_is_refused(
        self, store, gateway: FakeGateway, session, channel, versions
    ) -> None:
        coordinator = MutationCoordinator(
            store, gateway, session, AliasResolver(), channel, versions
        )

        result = await coordinator.delete_collection("research")

        assert isinstance(result.unwrap_error(), AuthorizationError)

    async def test_delete_drops_memberships_and_publishes(
        self,
        coordinator: MutationCoordinator,
        store: CollectionStore,
        events: list,
    ) -> None:
        store.hydrate([_key(), _key(collection_id="sys-favorites")])

        result = await coordinator.delete_collection("c1")

        assert result.is_success
        assert "c1" not in coordinator.collections
        assert store.members_of("c1") == set()
        assert store.collections_of(COURSE, "42") == {"sys-favorites"}
        assert isinstance(events[0], CollectionDeleted)

    async def test_failed_delete_keeps_everything(
        self, coordinator: MutationCoordinator, store: CollectionStore, gateway: FakeGateway
    ) -> None:
        store.hydrate([_key()])
        gateway.fail_next["delete_collection"] = TransientError("boom")

        result = await coordinator.delete_collection("c1")

        assert result.is_failure
        assert "c1" in coordinator.collections
        assert store.is_member(_key())


class TestDeleteNote:
    async def test_publishes_once_per_collection(
        self,
        coordinator: MutationCoordinator,
        store: CollectionStore,
        gateway: FakeGateway,
        events: list,
    ) -> None:
        note = ItemKind.NOTE
        store.hydrate([_key("n1", "c1", note), _key("n1", "sys-research", note)])

        result = await coordinator.delete_note("n1")

        assert result.is_success
        assert gateway.deleted_notes == ["n1"]
        assert not store.is_saved(note, "n1")
        assert all(isinstance(event, ItemDeleted) for event in events)
        assert {event.collection_id for event in events} == {"c1", "sys-research"}

    async def test_uncollected_note_targets_every_scope(
        self, coordinator: MutationCoordinator, events: list
    ) -> None:
        await coordinator.delete_note("n2")

        assert [event.collection_id for event in events] == [ANY_COLLECTION]

    async def test_missing_note(
        self, coordinator: MutationCoordinator, gateway: FakeGateway
    ) -> None:
        gateway.fail_next["delete_note"] = EntityNotFoundError("Note", "n3")

        result = await coordinator.delete_note("n3")

        assert isinstance(result.unwrap_error(), EntityNotFoundError)


class TestLoad:
    async def test_load_hydrates_store_and_aliases(
        self, coordinator: MutationCoordinator, store: CollectionStore, gateway: FakeGateway
    ) -> None:
        gateway.memberships = [_key(collection_id="sys-to_learn")]

        result = await coordinator.load()

        assert len(result.unwrap()) == 5
        assert store.is_saved(COURSE, "42")
        assert coordinator.alias_resolver.resolve("to_learn") == "sys-to_learn"

    async def test_load_with_ambiguous_alias_fails(
        self, coordinator: MutationCoordinator, gateway: FakeGateway
    ) -> None:
        duplicate = system_collections()[0]
        duplicate.id = CollectionId("sys-favorites-2")
        gateway.collections["sys-favorites-2"] = duplicate

        result = await coordinator.load()

        assert isinstance(result.unwrap_error(), InvariantViolationError)

    async def test_load_failure(
        self, coordinator: MutationCoordinator, gateway: FakeGateway
    ) -> None:
        gateway.fail_next["list_memberships"] = TransientError("down")

        result = await coordinator.load()

        assert isinstance(result.unwrap_error(), TransientError)

    async def test_load_ignores_custom_collection_named_like_alias(
        self, coordinator: MutationCoordinator, gateway: FakeGateway
    ) -> None:
        gateway.collections["x"] = custom_collection("x", "favorites")

        result = await coordinator.load()

        assert result.is_success
        assert coordinator.alias_resolver.resolve("favorites") == "sys-favorites"
