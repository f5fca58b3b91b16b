"""Tests for the optimistic CollectionStore."""

from learnhub.application.collections.services.collection_store import (
    CollectionStore,
    LedgerStatus,
)
from learnhub.domain.collections.item_kind import ItemKind
from learnhub.domain.collections.value_objects.membership_key import (
    MembershipKey,
    MembershipOp,
)

ADD = MembershipOp.ADD
REMOVE = MembershipOp.REMOVE


def _key(
    item_id: str = "42", collection_id: str = "fav", kind: ItemKind = ItemKind.COURSE
) -> MembershipKey:
    return MembershipKey(item_kind=kind, item_id=item_id, collection_id=collection_id)


class TestCollectionStore:
    def test_optimistic_add_is_visible_immediately(self) -> None:
        store = CollectionStore()

        store.apply_optimistic(ADD, _key())

        assert store.is_saved(ItemKind.COURSE, "42")
        assert store.status(_key()) is LedgerStatus.PENDING

    def test_commit(self) -> None:
        store = CollectionStore()
        mutation = store.apply_optimistic(ADD, _key())

        store.commit(mutation)

        assert store.is_member(_key())
        assert store.status(_key()) is LedgerStatus.COMMITTED
        assert not store.has_pending(_key())

    def test_rollback_restores_previous_state(self) -> None:
        store = CollectionStore()
        mutation = store.apply_optimistic(ADD, _key())

        store.rollback(mutation)

        assert not store.is_saved(ItemKind.COURSE, "42")
        assert store.status(_key()) is LedgerStatus.ROLLED_BACK

    def test_rollback_of_remove_restores_membership(self) -> None:
        store = CollectionStore()
        store.hydrate([_key()])
        mutation = store.apply_optimistic(REMOVE, _key())
        assert not store.is_member(_key())

        store.rollback(mutation)

        assert store.is_member(_key())

    def test_rollback_does_not_clobber_later_intent(self) -> None:
        store = CollectionStore()
        add = store.apply_optimistic(ADD, _key())
        remove = store.apply_optimistic(REMOVE, _key())

        store.rollback(add)

        # The later remove is still the visible intent
        assert not store.is_member(_key())
        # ...and inherits the add's snapshot: undoing it too restores "not a member"
        store.rollback(remove)
        assert not store.is_member(_key())

    def test_later_rollback_after_earlier_commit(self) -> None:
        store = CollectionStore()
        add = store.apply_optimistic(ADD, _key())
        remove = store.apply_optimistic(REMOVE, _key())

        store.commit(add)
        store.rollback(remove)

        assert store.is_member(_key())

    def test_last_writer_wins(self) -> None:
        store = CollectionStore()
        store.apply_optimistic(ADD, _key())
        store.apply_optimistic(REMOVE, _key())
        store.apply_optimistic(ADD, _key())

        assert store.is_member(_key())

    def test_is_saved_derived_from_any_collection(self) -> None:
        store = CollectionStore()
        store.hydrate([_key(collection_id="a"), _key(collection_id="b")])

        store.apply_optimistic(REMOVE, _key(collection_id="a"))

        assert store.is_saved(ItemKind.COURSE, "42")
        assert store.collections_of(ItemKind.COURSE, "42") == {"b"}

    def test_ids_are_scoped_by_kind(self) -> None:
        store = CollectionStore()
        store.hydrate([_key(kind=ItemKind.LESSON)])

        assert store.is_saved(ItemKind.LESSON, "42")
        assert not store.is_saved(ItemKind.COURSE, "42")

    def test_hydrate_keeps_pending_keys(self) -> None:
        store = CollectionStore()
        store.apply_optimistic(ADD, _key("1"))
        store.hydrate([_key("2")])

        assert store.is_member(_key("1"))
        assert store.is_member(_key("2"))
        assert store.saved_index() == {(ItemKind.COURSE, "1"), (ItemKind.COURSE, "2")}

    def test_hydrate_keeps_pending_removal(self) -> None:
        store = CollectionStore()
        store.hydrate([_key("1")])
        store.apply_optimistic(REMOVE, _key("1"))

        store.hydrate([_key("1")])

        assert not store.is_member(_key("1"))

    def test_members_of_and_pending_removals(self) -> None:
        store = CollectionStore()
        store.hydrate([_key("1"), _key("2"), _key("3", collection_id="other")])
        store.apply_optimistic(REMOVE, _key("2"))

        assert store.members_of("fav") == {(ItemKind.COURSE, "1")}
        assert store.pending_removals("fav") == {(ItemKind.COURSE, "2")}

    def test_drop_collection(self) -> None:
        store = CollectionStore()
        store.hydrate([_key("1"), _key("1", collection_id="other")])
        store.apply_optimistic(ADD, _key("2"))

        store.drop_collection("fav")

        assert store.members_of("fav") == set()
        assert store.is_saved(ItemKind.COURSE, "1")
        assert not store.has_pending(_key("2"))

    def test_drop_item(self) -> None:
        store = CollectionStore()
        store.hydrate([_key("n1", kind=ItemKind.NOTE), _key("n1", "other", ItemKind.NOTE)])

        store.drop_item(ItemKind.NOTE, "n1")

        assert not store.is_saved(ItemKind.NOTE, "n1")

    def test_stale_handles_are_ignored(self) -> None:
        store = CollectionStore()
        mutation = store.apply_optimistic(ADD, _key())
        store.commit(mutation)

        store.rollback(mutation)

        assert store.is_member(_key())
