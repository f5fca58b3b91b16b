"""
Client-side wiring of the collection engine.

One container per signed-in user: the store, channel and version counters
are singletons so that the coordinator, every view and the counts all see
the same state.
"""

from dependency_injector import containers, providers

from learnhub.application.collections.services.aggregation_resolver import (
    AggregationResolver,
)
from learnhub.application.collections.services.collection_counts import CollectionCounts
from learnhub.application.collections.services.collection_store import CollectionStore
from learnhub.application.collections.services.collection_view import CollectionView
from learnhub.application.collections.services.mutation_coordinator import (
    MutationCoordinator,
)
from learnhub.application.collections.services.refresh_channel import RefreshChannel
from learnhub.application.collections.services.scope_versions import ScopeVersions
from learnhub.config import Settings, get_settings
from learnhub.domain.collections.services.alias_resolver import AliasResolver
from learnhub.infrastructure.collections.gateways import (
    HttpCollectionGateway,
    HttpConversationSource,
    TokenSession,
)


class EngineContainer(containers.DeclarativeContainer):
    """Dependency injection container for the collection engine."""

    config = providers.Configuration()

    # Remote collaborators
    gateway = providers.Singleton(
        HttpCollectionGateway,
        base_url=config.api_url,
        token=config.token,
        timeout=config.timeout,
    )
    conversation_source = providers.Singleton(HttpConversationSource, gateway=gateway)
    session = providers.Singleton(TokenSession, user_id=config.user_id)

    # Shared engine state
    store = providers.Singleton(CollectionStore)
    channel = providers.Singleton(RefreshChannel)
    versions = providers.Singleton(ScopeVersions)
    alias_resolver = providers.Singleton(AliasResolver)

    # Engine services
    aggregation_resolver = providers.Singleton(
        AggregationResolver,
        gateway=gateway,
        alias_resolver=alias_resolver,
        tagged_sources=providers.List(conversation_source),
    )

    coordinator = providers.Singleton(
        MutationCoordinator,
        store=store,
        gateway=gateway,
        session=session,
        alias_resolver=alias_resolver,
        channel=channel,
        versions=versions,
    )

    counts = providers.Singleton(
        CollectionCounts,
        gateway=gateway,
        session=session,
        alias_resolver=alias_resolver,
        channel=channel,
    )

    # A new view per screen
    view = providers.Factory(
        CollectionView,
        resolver=aggregation_resolver,
        store=store,
        alias_resolver=alias_resolver,
        channel=channel,
        versions=versions,
        default_scope=config.default_scope,
    )


def build_engine(
    token: str, user_id: int | None, settings: Settings | None = None
) -> EngineContainer:
    """
    Build an engine container for one user.

    Args:
        token: Bearer token sent with every request to the collections API
        user_id: ID of the signed-in user, or None when signed out
        settings: Settings to read the API location from; defaults to the
            cached application settings

    Returns:
        The configured container; call ``coordinator().load()`` before use
    """
    settings = settings or get_settings()
    container = EngineContainer()
    container.config.from_dict(
        {
            "api_url": settings.COLLECTIONS_API_URL,
            "timeout": settings.COLLECTIONS_API_TIMEOUT,
            "default_scope": settings.DEFAULT_COLLECTION_SCOPE,
            "token": token,
            "user_id": user_id,
        }
    )
    return container
