from dependency_injector import containers, providers
from sqlalchemy.orm import Session

from learnhub.application.collections.use_cases.collection_items_query_use_case import (
    CollectionItemsQueryUseCase,
)
from learnhub.application.collections.use_cases.collection_management_use_case import (
    CollectionManagementUseCase,
)
from learnhub.application.collections.use_cases.collection_membership_use_case import (
    CollectionMembershipUseCase,
)
from learnhub.application.collections.use_cases.conversation_collections_use_case import (
    ConversationCollectionsUseCase,
)
from learnhub.application.collections.use_cases.note_deletion_use_case import (
    NoteDeletionUseCase,
)
from learnhub.infrastructure.collections.repositories import (
    CollectionRepository,
    ContentItemRepository,
    ConversationRepository,
    MembershipRepository,
    NoteRepository,
)


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    # Declare db as a dependency that will be provided at runtime
    db = providers.Dependency(instance_of=Session)

    # Repositories
    collection_repository = providers.Factory(CollectionRepository, db=db)
    membership_repository = providers.Factory(MembershipRepository, db=db)
    content_item_repository = providers.Factory(ContentItemRepository, db=db)
    conversation_repository = providers.Factory(ConversationRepository, db=db)
    note_repository = providers.Factory(NoteRepository, db=db)

    # Collections module, application use cases
    collection_management_use_case = providers.Factory(
        CollectionManagementUseCase,
        collection_repository=collection_repository,
        conversation_repository=conversation_repository,
    )

    collection_membership_use_case = providers.Factory(
        CollectionMembershipUseCase,
        membership_repository=membership_repository,
        collection_management_use_case=collection_management_use_case,
    )

    collection_items_query_use_case = providers.Factory(
        CollectionItemsQueryUseCase,
        membership_repository=membership_repository,
        content_item_repository=content_item_repository,
        conversation_repository=conversation_repository,
        collection_management_use_case=collection_management_use_case,
    )

    conversation_collections_use_case = providers.Factory(
        ConversationCollectionsUseCase,
        conversation_repository=conversation_repository,
        collection_management_use_case=collection_management_use_case,
    )

    note_deletion_use_case = providers.Factory(
        NoteDeletionUseCase,
        note_repository=note_repository,
        membership_repository=membership_repository,
    )


# Initialize container
container = Container()
