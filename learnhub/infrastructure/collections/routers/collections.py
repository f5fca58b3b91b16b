"""API routes for collections and their memberships."""

import structlog
from fastapi import APIRouter, Depends, HTTPException
from starlette import status

from learnhub.application.collections.use_cases.collection_items_query_use_case import (
    CollectionItemsQueryUseCase,
)
from learnhub.application.collections.use_cases.collection_management_use_case import (
    CollectionManagementUseCase,
)
from learnhub.application.collections.use_cases.collection_membership_use_case import (
    CollectionMembershipUseCase,
)
from learnhub.core import container
from learnhub.domain.common.exceptions import DomainError
from learnhub.infrastructure.collections.schemas import (
    CollectionCreateRequest,
    CollectionRenameRequest,
    CollectionResponse,
    ContentItemResponse,
    MembershipRequest,
    MembershipResponse,
)
from learnhub.infrastructure.common.di import inject_use_case
from learnhub.infrastructure.common.errors import http_error_for
from learnhub.infrastructure.identity import CurrentUserId

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/collections", tags=["collections"])

UNEXPECTED_ERROR = "An unexpected error occurred. Please try again later."


def _unexpected(event: str, error: Exception, **context: object) -> HTTPException:
    logger.error(event, error=str(error), exc_info=True, **context)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=UNEXPECTED_ERROR
    )


@router.get("", response_model=list[CollectionResponse], status_code=status.HTTP_200_OK)
def list_collections(
    user_id: CurrentUserId,
    use_case: CollectionManagementUseCase = Depends(
        inject_use_case(container.collection_management_use_case)
    ),
) -> list[CollectionResponse]:
    """
    Get all collections of the current user.

    System collections that do not exist yet are created first.

    Returns:
        List of collections, system collections first
    """
    try:
        collections = use_case.list_collections(user_id)
    except DomainError as e:
        raise http_error_for(e) from e
    except Exception as e:
        raise _unexpected("list_collections_failed", e, user_id=user_id) from e
    return [CollectionResponse.from_domain(c) for c in collections]


@router.post("", response_model=CollectionResponse, status_code=status.HTTP_201_CREATED)
def create_collection(
    request: CollectionCreateRequest,
    user_id: CurrentUserId,
    use_case: CollectionManagementUseCase = Depends(
        inject_use_case(container.collection_management_use_case)
    ),
) -> CollectionResponse:
    """
    Create a custom collection.

    Raises:
        HTTPException: 400 if the label is empty or reserved
    """
    try:
        collection = use_case.create_collection(
            user_id, request.label, request.color, request.org_id
        )
    except DomainError as e:
        raise http_error_for(e) from e
    except Exception as e:
        raise _unexpected("create_collection_failed", e, user_id=user_id) from e
    return CollectionResponse.from_domain(collection)


@router.get("/counts", response_model=dict[str, int], status_code=status.HTTP_200_OK)
def get_collection_counts(
    user_id: CurrentUserId,
    use_case: CollectionItemsQueryUseCase = Depends(
        inject_use_case(container.collection_items_query_use_case)
    ),
) -> dict[str, int]:
    """Get item counts keyed by collection id, alias and pseudo-collection."""
    try:
        return use_case.get_counts(user_id)
    except DomainError as e:
        raise http_error_for(e) from e
    except Exception as e:
        raise _unexpected("collection_counts_failed", e, user_id=user_id) from e


@router.get(
    "/memberships", response_model=list[MembershipResponse], status_code=status.HTTP_200_OK
)
def list_memberships(
    user_id: CurrentUserId,
    use_case: CollectionMembershipUseCase = Depends(
        inject_use_case(container.collection_membership_use_case)
    ),
) -> list[MembershipResponse]:
    """Get every membership row of the current user's collections."""
    try:
        memberships = use_case.list_memberships(user_id)
    except DomainError as e:
        raise http_error_for(e) from e
    except Exception as e:
        raise _unexpected("list_memberships_failed", e, user_id=user_id) from e
    return [MembershipResponse.from_domain(m) for m in memberships]


@router.patch(
    "/{collection_id}", response_model=CollectionResponse, status_code=status.HTTP_200_OK
)
def rename_collection(
    collection_id: str,
    request: CollectionRenameRequest,
    user_id: CurrentUserId,
    use_case: CollectionManagementUseCase = Depends(
        inject_use_case(container.collection_management_use_case)
    ),
) -> CollectionResponse:
    """
    Rename a collection.

    Raises:
        HTTPException: 400 for an empty or reserved label, 404 if not found
    """
    try:
        collection = use_case.rename_collection(user_id, collection_id, request.label)
    except DomainError as e:
        raise http_error_for(e) from e
    except Exception as e:
        raise _unexpected(
            "rename_collection_failed", e, user_id=user_id, collection_id=collection_id
        ) from e
    return CollectionResponse.from_domain(collection)


@router.delete("/{collection_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_collection(
    collection_id: str,
    user_id: CurrentUserId,
    use_case: CollectionManagementUseCase = Depends(
        inject_use_case(container.collection_management_use_case)
    ),
) -> None:
    """
    Delete a custom or organisation collection and its memberships.

    Raises:
        HTTPException: 403 for system collections, 404 if not found
    """
    try:
        use_case.delete_collection(user_id, collection_id)
    except DomainError as e:
        raise http_error_for(e) from e
    except Exception as e:
        raise _unexpected(
            "delete_collection_failed", e, user_id=user_id, collection_id=collection_id
        ) from e


@router.get(
    "/{collection_id}/items",
    response_model=list[ContentItemResponse],
    status_code=status.HTTP_200_OK,
)
def get_collection_items(
    collection_id: str,
    user_id: CurrentUserId,
    use_case: CollectionItemsQueryUseCase = Depends(
        inject_use_case(container.collection_items_query_use_case)
    ),
) -> list[ContentItemResponse]:
    """
    Get the items explicitly joined to a collection.

    Accepts storage ids, aliases and the catalog pseudo-collections. Missing
    tables read as an empty collection.
    """
    try:
        items = use_case.get_items(user_id, collection_id)
    except DomainError as e:
        raise http_error_for(e) from e
    except Exception as e:
        raise _unexpected(
            "collection_items_failed", e, user_id=user_id, collection_id=collection_id
        ) from e
    return [ContentItemResponse.from_domain(item) for item in items]


@router.post(
    "/{collection_id}/items",
    response_model=MembershipResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_collection_item(
    collection_id: str,
    request: MembershipRequest,
    user_id: CurrentUserId,
    use_case: CollectionMembershipUseCase = Depends(
        inject_use_case(container.collection_membership_use_case)
    ),
) -> MembershipResponse:
    """
    Add an item to a collection. Adding an existing item is a no-op.

    Raises:
        HTTPException: 400 for an unknown kind, 404 if the collection is not found
    """
    try:
        key = use_case.add_item(user_id, collection_id, request.item_id, request.item_kind)
    except DomainError as e:
        raise http_error_for(e) from e
    except Exception as e:
        raise _unexpected(
            "add_collection_item_failed", e, user_id=user_id, collection_id=collection_id
        ) from e
    return MembershipResponse.from_domain(key)


@router.delete("/{collection_id}/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_collection_item(
    collection_id: str,
    item_id: str,
    user_id: CurrentUserId,
    use_case: CollectionMembershipUseCase = Depends(
        inject_use_case(container.collection_membership_use_case)
    ),
) -> None:
    """
    Remove an item from a collection.

    Raises:
        HTTPException: 404 if the collection is not found
    """
    try:
        use_case.remove_item(user_id, collection_id, item_id)
    except DomainError as e:
        raise http_error_for(e) from e
    except Exception as e:
        raise _unexpected(
            "remove_collection_item_failed", e, user_id=user_id, collection_id=collection_id
        ) from e
