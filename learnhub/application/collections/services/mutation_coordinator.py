"""
Mutation coordinator for collection membership and collection lifecycle.

The only entry point that writes to the CollectionStore. Every membership
mutation follows the same path: authentication check, optimistic local
change, remote call, then commit and refresh broadcast on success or rollback
on failure. The local change always happens before the first suspension
point, so the UI sees it immediately.
"""

import asyncio
from collections.abc import Awaitable, Callable
from contextlib import AsyncExitStack

import structlog

from learnhub.application.collections.protocols.collection_gateway import (
    CollectionGatewayProtocol,
)
from learnhub.application.collections.protocols.session import SessionProtocol
from learnhub.application.collections.services.collection_store import (
    CollectionStore,
    PendingMutation,
)
from learnhub.application.collections.services.refresh_channel import RefreshChannel
from learnhub.application.collections.services.scope_versions import ScopeVersions
from learnhub.application.common.result import Failure, Result, Success
from learnhub.domain.collections.entities.collection import Collection
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
from learnhub.domain.collections.system_collections import is_reserved_label
from learnhub.domain.collections.value_objects.membership_key import (
    MembershipKey,
    MembershipOp,
)
from learnhub.domain.common.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    EntityNotFoundError,
    InvariantViolationError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


class MutationCoordinator:
    """Optimistic add/remove/rename/delete against the remote store."""

    def __init__(
        self,
        store: CollectionStore,
        gateway: CollectionGatewayProtocol,
        session: SessionProtocol,
        alias_resolver: AliasResolver,
        channel: RefreshChannel,
        versions: ScopeVersions,
        collections: dict[str, Collection] | None = None,
    ) -> None:
        """
        Initialize coordinator with dependencies.

        Args:
            store: Optimistic membership store
            gateway: Remote persistence collaborator
            session: Source of the signed-in user
            alias_resolver: Resolver for reserved collection aliases
            channel: Broadcast for ``collection:refresh``
            versions: Per-scope version counters
            collections: Known collections by id, kept in sync with renames
                and deletions
        """
        self.store = store
        self.gateway = gateway
        self.session = session
        self.alias_resolver = alias_resolver
        self.channel = channel
        self.versions = versions
        self.collections: dict[str, Collection] = collections if collections is not None else {}
        self._key_locks: dict[MembershipKey, asyncio.Lock] = {}

    # Bootstrap
    async def load(self) -> Result[list[Collection], DomainError]:
        """Fetch collections and memberships and validate the alias table."""
        if self.session.current_user_id() is None:
            return Failure(AuthenticationError())
        try:
            collections = await self.gateway.list_collections()
            memberships = await self.gateway.list_memberships()
        except DomainError as exc:
            logger.warning("collections_load_failed", error=str(exc))
            return Failure(exc)

        self.collections.clear()
        self.collections.update({str(c.id): c for c in collections})
        self.alias_resolver.load(collections)
        try:
            self.alias_resolver.validate()
        except InvariantViolationError as exc:
            logger.error("alias_table_invalid", error=str(exc))
            return Failure(exc)
        self.store.hydrate(memberships)
        logger.info(
            "collections_loaded",
            collection_count=len(collections),
            membership_count=len(memberships),
        )
        return Success(collections)

    # Membership
    async def add(
        self, item_id: str, item_kind: ItemKind, collection_id: str
    ) -> Result[None, DomainError]:
        """
        Add an item to a collection.

        Args:
            item_id: ID of the item
            item_kind: Kind of the item
            collection_id: Collection ID or reserved alias

        Returns:
            Success, or Failure with the store already reverted
        """
        if self.session.current_user_id() is None:
            return Failure(AuthenticationError())

        key = MembershipKey(
            item_kind=ItemKind(item_kind),
            item_id=item_id,
            collection_id=self.alias_resolver.resolve(collection_id),
        )
        mutation = self.store.apply_optimistic(MembershipOp.ADD, key)
        return await self._run_membership_call(
            [mutation],
            lambda: self.gateway.add_membership(item_id, key.item_kind, key.collection_id),
        )

    async def remove(
        self, item_id: str, collection_id: str, item_kind: ItemKind | None = None
    ) -> Result[None, DomainError]:
        """
        Remove an item from a collection.

        The remote call removes the item id from the collection regardless of
        kind. Without ``item_kind`` every locally known kind of that id in the
        collection is reverted together on failure.

        Args:
            item_id: ID of the item
            collection_id: Collection ID or reserved alias
            item_kind: Kind of the item, if known

        Returns:
            Success, or Failure with the store already reverted
        """
        if self.session.current_user_id() is None:
            return Failure(AuthenticationError())

        resolved = self.alias_resolver.resolve(collection_id)
        if item_kind is not None:
            kinds = [ItemKind(item_kind)]
        else:
            kinds = [
                kind for kind, member_id in self.store.members_of(resolved) if member_id == item_id
            ]
        keys = [
            MembershipKey(item_kind=kind, item_id=item_id, collection_id=resolved)
            for kind in kinds
        ]

        if not keys:
            # Unknown locally; let the remote store decide
            try:
                await self.gateway.remove_membership(item_id, resolved)
            except DomainError as exc:
                return Failure(exc)
            self._committed(
                resolved,
                MembershipChanged(
                    collection_id=resolved, item_kind="", item_id=item_id, added=False
                ),
            )
            return Success(None)

        mutations = [self.store.apply_optimistic(MembershipOp.REMOVE, key) for key in keys]
        return await self._run_membership_call(
            mutations, lambda: self.gateway.remove_membership(item_id, resolved)
        )

    def suppress_next_refresh(self, collection_id: str) -> None:
        """
        Turn the next scheduled refresh of a collection view into a no-op.

        For callers that already stripped a removed item locally and hold the
        post-removal state.
        """
        self.versions.suppress_next_refresh(self.alias_resolver.resolve(collection_id))

    async def _run_membership_call(
        self,
        mutations: list[PendingMutation],
        call: Callable[[], Awaitable[None]],
    ) -> Result[None, DomainError]:
        first = mutations[0]
        # Locks are taken in key order so two multi-key calls cannot deadlock
        keys = sorted({mutation.key for mutation in mutations}, key=_lock_order)
        try:
            # Same-key remote calls reach the store in request order
            async with AsyncExitStack() as held:
                for key in keys:
                    await held.enter_async_context(self._key_locks.setdefault(key, asyncio.Lock()))
                await call()
        except DomainError as exc:
            self._revert(mutations, keys)
            logger.warning(
                "membership_mutation_rolled_back",
                op=first.op,
                item_kinds=[key.item_kind for key in keys],
                item_id=first.key.item_id,
                collection_id=first.key.collection_id,
                error=str(exc),
            )
            return Failure(exc)
        except asyncio.CancelledError:
            self._revert(mutations, keys)
            logger.info(
                "membership_mutation_cancelled",
                op=first.op,
                item_id=first.key.item_id,
                collection_id=first.key.collection_id,
            )
            raise
        except Exception:
            self._revert(mutations, keys)
            logger.exception(
                "membership_mutation_crashed",
                op=first.op,
                item_id=first.key.item_id,
                collection_id=first.key.collection_id,
            )
            raise

        for mutation in mutations:
            self.store.commit(mutation)
        self._release_locks(keys)
        for mutation in mutations:
            key = mutation.key
            logger.info(
                "membership_mutation_committed",
                op=mutation.op,
                item_kind=key.item_kind,
                item_id=key.item_id,
                collection_id=key.collection_id,
            )
            self._committed(
                key.collection_id,
                MembershipChanged(
                    collection_id=key.collection_id,
                    item_kind=key.item_kind,
                    item_id=key.item_id,
                    added=mutation.op is MembershipOp.ADD,
                ),
            )
        return Success(None)

    def _revert(self, mutations: list[PendingMutation], keys: list[MembershipKey]) -> None:
        for mutation in mutations:
            self.store.rollback(mutation)
        self._release_locks(keys)

    # Collection lifecycle
    async def create_collection(
        self, label: str, color: str | None = None
    ) -> Result[Collection, DomainError]:
        """Create a custom collection; reserved system labels are rejected."""
        if self.session.current_user_id() is None:
            return Failure(AuthenticationError())
        if not label or not label.strip():
            return Failure(ValidationError("Collection label cannot be empty", field="label"))
        if is_reserved_label(label):
            return Failure(
                ValidationError(f"'{label.strip()}' is reserved", field="label", value=label)
            )
        try:
            collection = await self.gateway.create_collection(label.strip(), color)
        except DomainError as exc:
            return Failure(exc)

        self.collections[str(collection.id)] = collection
        self._committed(
            str(collection.id),
            CollectionCreated(collection_id=str(collection.id), label=collection.label),
        )
        return Success(collection)

    async def rename_collection(
        self, collection_id: str, new_label: str
    ) -> Result[None, DomainError]:
        """
        Rename a collection.

        Empty labels, and reserved labels on custom collections, are rejected
        locally without a remote call. The known label is changed
        optimistically and restored if the remote call fails.
        """
        if self.session.current_user_id() is None:
            return Failure(AuthenticationError())

        resolved = self.alias_resolver.resolve(collection_id)
        collection = self.collections.get(resolved)
        if not new_label or not new_label.strip():
            return Failure(ValidationError("Collection label cannot be empty", field="label"))

        previous_label = collection.label if collection else None
        if collection is not None:
            try:
                collection.rename(new_label)
            except ValidationError as exc:
                return Failure(exc)
        elif is_reserved_label(new_label):
            return Failure(ValidationError(f"'{new_label.strip()}' is reserved", field="label"))

        label = new_label.strip()
        try:
            await self.gateway.rename_collection(resolved, label)
        except DomainError as exc:
            if collection is not None and previous_label is not None:
                collection.label = previous_label
            logger.warning("collection_rename_failed", collection_id=resolved, error=str(exc))
            return Failure(exc)

        self._committed(resolved, CollectionRenamed(collection_id=resolved, label=label))
        return Success(None)

    async def delete_collection(self, collection_id: str) -> Result[None, DomainError]:
        """
        Delete a custom or organisation collection.

        System collections are refused locally. On success the collection's
        local memberships are dropped and views scoped to it are redirected
        by the CollectionDeleted event.
        """
        if self.session.current_user_id() is None:
            return Failure(AuthenticationError())

        resolved = self.alias_resolver.resolve(collection_id)
        collection = self.collections.get(resolved)
        if collection is not None:
            try:
                collection.ensure_deletable()
            except AuthorizationError as exc:
                return Failure(exc)
        elif self.alias_resolver.alias_for(resolved) is not None:
            return Failure(AuthorizationError("System collections cannot be deleted"))

        try:
            await self.gateway.delete_collection(resolved)
        except DomainError as exc:
            logger.warning("collection_delete_failed", collection_id=resolved, error=str(exc))
            return Failure(exc)

        self.collections.pop(resolved, None)
        self.store.drop_collection(resolved)
        logger.info("collection_deleted", collection_id=resolved)
        self._committed(resolved, CollectionDeleted(collection_id=resolved))
        return Success(None)

    async def delete_note(self, note_id: str) -> Result[None, DomainError]:
        """
        Delete a note itself.

        Distinct from removing it from a collection: the note is gone from
        every collection afterwards.
        """
        if self.session.current_user_id() is None:
            return Failure(AuthenticationError())

        affected = self.store.collections_of(ItemKind.NOTE, note_id)
        try:
            await self.gateway.delete_note(note_id)
        except EntityNotFoundError as exc:
            return Failure(exc)
        except DomainError as exc:
            logger.warning("note_delete_failed", note_id=note_id, error=str(exc))
            return Failure(exc)

        self.store.drop_item(ItemKind.NOTE, note_id)
        for collection_id in affected or {ANY_COLLECTION}:
            self._committed(
                collection_id,
                ItemDeleted(
                    collection_id=collection_id, item_kind=ItemKind.NOTE, item_id=note_id
                ),
            )
        return Success(None)

    def _committed(
        self,
        collection_id: str,
        event: MembershipChanged
        | CollectionCreated
        | CollectionRenamed
        | CollectionDeleted
        | ItemDeleted,
    ) -> None:
        self.versions.bump(collection_id)
        self.channel.publish(event)

    def _release_locks(self, keys: list[MembershipKey]) -> None:
        for key in keys:
            lock = self._key_locks.get(key)
            if lock is not None and not lock.locked() and not self.store.has_pending(key):
                del self._key_locks[key]


def _lock_order(key: MembershipKey) -> tuple[str, str, str]:
    return (key.collection_id, key.item_kind.value, key.item_id)
