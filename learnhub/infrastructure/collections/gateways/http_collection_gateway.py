"""Collections REST API client used by the engine."""

from typing import Any

import httpx
import structlog

from learnhub.domain.collections.entities.collection import Collection
from learnhub.domain.collections.entities.content_item import ContentItem
from learnhub.domain.collections.item_kind import CONVERSATION_KINDS, ItemKind
from learnhub.domain.collections.value_objects.membership_key import MembershipKey
from learnhub.domain.common.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    EntityNotFoundError,
    TransientError,
    ValidationError,
)
from learnhub.infrastructure.collections.schemas import (
    CollectionResponse,
    ContentItemResponse,
    MembershipResponse,
)

logger = structlog.get_logger(__name__)

API_PREFIX = "/api/v1"


def error_for_response(response: httpx.Response, operation: str) -> DomainError:
    """
    Translate a failed response into the domain error taxonomy.

    Args:
        response: The non-2xx response
        operation: Name of the gateway call, for the error details

    Returns:
        The matching DomainError subclass
    """
    detail = _detail(response)
    code = response.status_code
    if code == 401:
        return AuthenticationError(detail or "Not authenticated")
    if code == 403:
        return AuthorizationError(detail or "Not authorized to perform this action")
    if code == 404:
        return EntityNotFoundError("Resource", response.request.url.path)
    if code in (400, 409, 422):
        return ValidationError(detail or "Request rejected")
    return TransientError(f"{operation} failed with status {code}", operation=operation)


def _detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, str):
            return detail
        if detail is not None:
            return str(detail)
    return ""


class HttpCollectionGateway:
    """
    HTTP client for the collections service.

    Implements CollectionGatewayProtocol. Every request carries the bearer
    token; failures are raised as domain errors so the engine never sees an
    httpx exception.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Make an authenticated API request and map failures to domain errors."""
        operation = f"{method} {path}"
        headers = {"Authorization": f"Bearer {self.token}"}
        try:
            response = await self._client.request(
                method, f"{API_PREFIX}{path}", headers=headers, **kwargs
            )
        except httpx.HTTPError as e:
            logger.warning("collections_api_unreachable", operation=operation, error=str(e))
            raise TransientError(str(e) or type(e).__name__, operation=operation) from e

        if response.is_error:
            error = error_for_response(response, operation)
            logger.info(
                "collections_api_error",
                operation=operation,
                status_code=response.status_code,
                error_type=type(error).__name__,
            )
            raise error
        return response

    # --- Membership endpoints ---

    async def add_membership(self, item_id: str, item_kind: ItemKind, collection_id: str) -> None:
        await self._request(
            "POST",
            f"/collections/{collection_id}/items",
            json={"item_id": item_id, "item_kind": item_kind.value},
        )

    async def remove_membership(self, item_id: str, collection_id: str) -> None:
        await self._request("DELETE", f"/collections/{collection_id}/items/{item_id}")

    async def fetch_collection_items(self, collection_id: str) -> list[ContentItem]:
        response = await self._request("GET", f"/collections/{collection_id}/items")
        return [ContentItemResponse.model_validate(row).to_domain() for row in response.json()]

    async def fetch_membership_counts(self, owner_id: int) -> dict[str, int]:
        """Get counts for the token's user; ``owner_id`` is only logged."""
        response = await self._request("GET", "/collections/counts")
        counts = {str(key): int(value) for key, value in response.json().items()}
        logger.debug("collection_counts_fetched", owner_id=owner_id, keys=len(counts))
        return counts

    async def list_memberships(self) -> list[MembershipKey]:
        response = await self._request("GET", "/collections/memberships")
        return [MembershipResponse.model_validate(row).to_domain() for row in response.json()]

    # --- Collection endpoints ---

    async def list_collections(self) -> list[Collection]:
        response = await self._request("GET", "/collections")
        return [CollectionResponse.model_validate(row).to_domain() for row in response.json()]

    async def create_collection(self, label: str, color: str | None = None) -> Collection:
        payload: dict[str, Any] = {"label": label}
        if color:
            payload["color"] = color
        response = await self._request("POST", "/collections", json=payload)
        return CollectionResponse.model_validate(response.json()).to_domain()

    async def rename_collection(self, collection_id: str, label: str) -> None:
        await self._request("PATCH", f"/collections/{collection_id}", json={"label": label})

    async def delete_collection(self, collection_id: str) -> None:
        await self._request("DELETE", f"/collections/{collection_id}")

    # --- Note endpoints ---

    async def delete_note(self, note_id: str) -> None:
        await self._request("DELETE", f"/notes/{note_id}")


class HttpConversationSource:
    """Self-tagging source backed by ``/conversations``."""

    def __init__(self, gateway: HttpCollectionGateway) -> None:
        self.gateway = gateway

    @property
    def kinds(self) -> frozenset[ItemKind]:
        return CONVERSATION_KINDS

    async def list_tagged(self, collection_id: str) -> list[ContentItem]:
        return await self._list({"collection_id": collection_id})

    async def list_all(self) -> list[ContentItem]:
        return await self._list({})

    async def _list(self, params: dict[str, str]) -> list[ContentItem]:
        response = await self.gateway._request("GET", "/conversations", params=params)
        return [ContentItemResponse.model_validate(row).to_domain() for row in response.json()]


class TokenSession:
    """SessionProtocol for a gateway acting with a fixed bearer token."""

    def __init__(self, user_id: int | None) -> None:
        self._user_id = user_id

    def current_user_id(self) -> int | None:
        return self._user_id

    def sign_out(self) -> None:
        self._user_id = None
