"""Collections context schemas."""

from learnhub.infrastructure.collections.schemas.collection_schemas import (
    CollectionCreateRequest,
    CollectionRenameRequest,
    CollectionResponse,
    ContentItemResponse,
    ConversationCollectionsRequest,
    MembershipRequest,
    MembershipResponse,
)

__all__ = [
    "CollectionCreateRequest",
    "CollectionRenameRequest",
    "CollectionResponse",
    "ContentItemResponse",
    "ConversationCollectionsRequest",
    "MembershipRequest",
    "MembershipResponse",
]
