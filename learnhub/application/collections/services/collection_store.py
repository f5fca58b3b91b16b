"""
Optimistic membership store.

Holds which collections every (kind, item) pair belongs to as the UI should
currently show it, plus a ledger of mutations that have been applied locally
but not yet confirmed by the remote store.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from itertools import count

from learnhub.domain.collections.item_kind import ItemKind
from learnhub.domain.collections.value_objects.membership_key import (
    MembershipKey,
    MembershipOp,
)

ItemKey = tuple[ItemKind, str]


class LedgerStatus(StrEnum):
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolledback"


@dataclass(eq=False)
class PendingMutation:
    """
    Handle for one optimistic mutation.

    ``was_member`` is the membership of the key right before this mutation
    was applied; rolling back restores exactly that.
    """

    seq: int
    key: MembershipKey
    op: MembershipOp
    was_member: bool


class CollectionStore:
    """
    Authoritative-plus-optimistic membership table.

    Reads always see the latest requested intent per key (last writer wins).
    Several mutations of one key may be outstanding at once; they are kept in
    request order so a rollback can hand its pre-mutation snapshot to the
    mutation that superseded it instead of clobbering the newer intent.

    Only the MutationCoordinator writes to the store.
    """

    def __init__(self) -> None:
        self._memberships: dict[ItemKey, set[str]] = {}
        self._pending: dict[MembershipKey, list[PendingMutation]] = {}
        self._status: dict[MembershipKey, LedgerStatus] = {}
        self._sequence = count(1)

    # Query methods
    def is_saved(self, item_kind: ItemKind, item_id: str) -> bool:
        """True iff the item belongs to at least one collection."""
        return bool(self._memberships.get((item_kind, item_id)))

    def is_member(self, key: MembershipKey) -> bool:
        return key.collection_id in self._memberships.get(key.item_key, ())

    def collections_of(self, item_kind: ItemKind, item_id: str) -> frozenset[str]:
        return frozenset(self._memberships.get((item_kind, item_id), ()))

    def members_of(self, collection_id: str) -> set[ItemKey]:
        return {
            item_key
            for item_key, collection_ids in self._memberships.items()
            if collection_id in collection_ids
        }

    def saved_index(self) -> frozenset[ItemKey]:
        """Derived set of items that belong to any collection."""
        return frozenset(key for key, collection_ids in self._memberships.items() if collection_ids)

    def status(self, key: MembershipKey) -> LedgerStatus | None:
        """Ledger state of a key; None means the key was never mutated."""
        return self._status.get(key)

    def has_pending(self, key: MembershipKey) -> bool:
        return bool(self._pending.get(key))

    def pending_removals(self, collection_id: str) -> set[ItemKey]:
        """Items whose latest outstanding mutation removes them from the collection."""
        return {
            key.item_key
            for key, queue in self._pending.items()
            if key.collection_id == collection_id and queue and queue[-1].op is MembershipOp.REMOVE
        }

    # Command methods
    def apply_optimistic(self, op: MembershipOp, key: MembershipKey) -> PendingMutation:
        """
        Apply a mutation locally and mark it pending.

        The change is visible to the very next read.
        """
        mutation = PendingMutation(
            seq=next(self._sequence),
            key=key,
            op=op,
            was_member=self.is_member(key),
        )
        self._set_member(key, op is MembershipOp.ADD)
        self._pending.setdefault(key, []).append(mutation)
        self._status[key] = LedgerStatus.PENDING
        return mutation

    def commit(self, mutation: PendingMutation) -> None:
        """Mark a mutation as confirmed by the remote store."""
        queue = self._pending.get(mutation.key)
        if not queue or mutation not in queue:
            return
        index = queue.index(mutation)
        if index + 1 < len(queue):
            # The remote now holds this mutation's outcome
            queue[index + 1].was_member = mutation.op is MembershipOp.ADD
        queue.pop(index)
        if not queue:
            del self._pending[mutation.key]
            self._status[mutation.key] = LedgerStatus.COMMITTED

    def rollback(self, mutation: PendingMutation) -> None:
        """
        Undo a mutation the remote store rejected.

        If it is still the latest intent for its key, the pre-mutation
        membership is restored. Otherwise the newer intent stays visible and
        inherits this mutation's snapshot, since this one never happened.
        """
        queue = self._pending.get(mutation.key)
        if not queue or mutation not in queue:
            return
        index = queue.index(mutation)
        if index == len(queue) - 1:
            self._set_member(mutation.key, mutation.was_member)
        else:
            queue[index + 1].was_member = mutation.was_member
        queue.pop(index)
        if not queue:
            del self._pending[mutation.key]
            self._status[mutation.key] = LedgerStatus.ROLLED_BACK

    def hydrate(self, rows: Iterable[MembershipKey]) -> None:
        """
        Load an authoritative membership snapshot.

        Keys with outstanding mutations keep their local state; the snapshot
        may predate those mutations.
        """
        memberships: dict[ItemKey, set[str]] = {}
        for row in rows:
            memberships.setdefault(row.item_key, set()).add(row.collection_id)
        for key in self._pending:
            collection_ids = memberships.setdefault(key.item_key, set())
            if self.is_member(key):
                collection_ids.add(key.collection_id)
            else:
                collection_ids.discard(key.collection_id)
        self._memberships = {k: v for k, v in memberships.items() if v}

    def drop_collection(self, collection_id: str) -> None:
        """Local cascade for a deleted collection."""
        for item_key in list(self._memberships):
            collection_ids = self._memberships[item_key]
            collection_ids.discard(collection_id)
            if not collection_ids:
                del self._memberships[item_key]
        for key in [k for k in self._pending if k.collection_id == collection_id]:
            del self._pending[key]

    def drop_item(self, item_kind: ItemKind, item_id: str) -> None:
        """Forget every membership of an item that no longer exists."""
        self._memberships.pop((item_kind, item_id), None)
        for key in [k for k in self._pending if k.item_key == (item_kind, item_id)]:
            del self._pending[key]

    def _set_member(self, key: MembershipKey, member: bool) -> None:
        if member:
            self._memberships.setdefault(key.item_key, set()).add(key.collection_id)
            return
        collection_ids = self._memberships.get(key.item_key)
        if collection_ids is None:
            return
        collection_ids.discard(key.collection_id)
        if not collection_ids:
            del self._memberships[key.item_key]
