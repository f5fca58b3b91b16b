"""Fixtures wiring the collection engine to in-memory fakes."""

import pytest

from learnhub.application.collections.services.collection_store import CollectionStore
from learnhub.application.collections.services.mutation_coordinator import (
    MutationCoordinator,
)
from learnhub.application.collections.services.refresh_channel import RefreshChannel
from learnhub.application.collections.services.scope_versions import ScopeVersions
from learnhub.domain.collections.events import CollectionEvent
from learnhub.domain.collections.services.alias_resolver import AliasResolver
from tests.fakes import FakeGateway, FakeSession, custom_collection, system_collections


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway([*system_collections(), custom_collection("c1", "Reading")])


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def store() -> CollectionStore:
    return CollectionStore()


@pytest.fixture
def channel() -> RefreshChannel:
    return RefreshChannel()


@pytest.fixture
def versions() -> ScopeVersions:
    return ScopeVersions()


@pytest.fixture
def alias_resolver(gateway: FakeGateway) -> AliasResolver:
    return AliasResolver(gateway.collections.values())


@pytest.fixture
def events(channel: RefreshChannel) -> list[CollectionEvent]:
    """Every event published on the channel, in order."""
    received: list[CollectionEvent] = []
    channel.subscribe(received.append)
    return received


@pytest.fixture
def coordinator(
    store: CollectionStore,
    gateway: FakeGateway,
    session: FakeSession,
    alias_resolver: AliasResolver,
    channel: RefreshChannel,
    versions: ScopeVersions,
) -> MutationCoordinator:
    return MutationCoordinator(
        store,
        gateway,
        session,
        alias_resolver,
        channel,
        versions,
        collections=dict(gateway.collections),
    )
