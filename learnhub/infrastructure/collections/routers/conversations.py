"""API routes for conversations and their self-tags."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from starlette import status

from learnhub.application.collections.use_cases.conversation_collections_use_case import (
    ConversationCollectionsUseCase,
)
from learnhub.core import container
from learnhub.domain.common.exceptions import DomainError
from learnhub.infrastructure.collections.schemas import (
    ContentItemResponse,
    ConversationCollectionsRequest,
)
from learnhub.infrastructure.common.di import inject_use_case
from learnhub.infrastructure.common.errors import http_error_for
from learnhub.infrastructure.identity import CurrentUserId

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.get("", response_model=list[ContentItemResponse], status_code=status.HTTP_200_OK)
def list_conversations(
    user_id: CurrentUserId,
    collection_id: str | None = Query(
        None, description="Only conversations tagged with this collection id or alias"
    ),
    use_case: ConversationCollectionsUseCase = Depends(
        inject_use_case(container.conversation_collections_use_case)
    ),
) -> list[ContentItemResponse]:
    """Get the current user's conversations, newest first."""
    try:
        conversations = use_case.list_conversations(user_id, collection_id)
    except DomainError as e:
        raise http_error_for(e) from e
    except Exception as e:
        logger.error("list_conversations_failed", user_id=user_id, error=str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e
    return [ContentItemResponse.from_domain(c) for c in conversations]


@router.put(
    "/{conversation_id}/collections",
    response_model=ContentItemResponse,
    status_code=status.HTTP_200_OK,
)
def set_conversation_collections(
    conversation_id: str,
    request: ConversationCollectionsRequest,
    user_id: CurrentUserId,
    use_case: ConversationCollectionsUseCase = Depends(
        inject_use_case(container.conversation_collections_use_case)
    ),
) -> ContentItemResponse:
    """
    Replace the collections a conversation is tagged with.

    Raises:
        HTTPException: 404 if the conversation or a collection is not found
    """
    try:
        conversation = use_case.set_collections(
            user_id, conversation_id, request.collection_ids
        )
    except DomainError as e:
        raise http_error_for(e) from e
    except Exception as e:
        logger.error(
            "set_conversation_collections_failed",
            user_id=user_id,
            conversation_id=conversation_id,
            error=str(e),
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e
    return ContentItemResponse.from_domain(conversation)
