"""
Use case for reading collection contents and counts.

Membership rows only hold (kind, id) pairs; items are hydrated from the
tables that own each kind. Tables that are not provisioned read as empty.
"""

from collections import defaultdict
from dataclasses import replace

import structlog

from learnhub.application.collections.protocols.content_item_repository import (
    ContentItemRepositoryProtocol,
    ConversationRepositoryProtocol,
)
from learnhub.application.collections.protocols.membership_repository import (
    MembershipRepositoryProtocol,
)
from learnhub.application.collections.use_cases.collection_management_use_case import (
    CollectionManagementUseCase,
)
from learnhub.domain.collections.entities.content_item import ContentItem, Course
from learnhub.domain.collections.item_kind import ItemKind
from learnhub.domain.collections.services.alias_resolver import AliasResolver
from learnhub.domain.collections.system_collections import (
    ALL_CONVERSATIONS,
    CATALOG_SCOPES,
    CERTIFICATIONS,
    CONVERSATION_SCOPES,
    PERSONAL_CONTEXT,
    PROMETHEUS,
    is_alias,
)
from learnhub.domain.common.exceptions import EntityNotFoundError, StoreNotProvisionedError
from learnhub.domain.common.value_objects.ids import UserId

logger = structlog.get_logger(__name__)


class CollectionItemsQueryUseCase:
    """Use case for listing the items of a collection and counting them."""

    def __init__(
        self,
        membership_repository: MembershipRepositoryProtocol,
        content_item_repository: ContentItemRepositoryProtocol,
        conversation_repository: ConversationRepositoryProtocol,
        collection_management_use_case: CollectionManagementUseCase,
    ) -> None:
        """
        Initialize use case with dependencies.

        Args:
            membership_repository: Membership repository protocol implementation
            content_item_repository: Owner of courses, lessons, notes, context...
            conversation_repository: Owner of conversations
            collection_management_use_case: Resolves ids and aliases to collections
        """
        self.membership_repository = membership_repository
        self.content_item_repository = content_item_repository
        self.conversation_repository = conversation_repository
        self.collection_management_use_case = collection_management_use_case

    def get_items(self, user_id: int, collection_id: str) -> list[ContentItem]:
        """
        Get the items explicitly joined to a collection.

        Args:
            user_id: ID of the user
            collection_id: Collection ID, alias or pseudo-collection

        Returns:
            Items in membership order; empty when the alias has no collection
            yet or the membership table is not provisioned

        Raises:
            EntityNotFoundError: If a storage id matches no collection
        """
        user_id_vo = UserId(user_id)

        if collection_id in CATALOG_SCOPES:
            return list(self._annotate_courses(user_id_vo, self._safe_courses()))
        if collection_id == CERTIFICATIONS:
            certified = [c for c in self._safe_courses() if c.badges]
            return list(self._annotate_courses(user_id_vo, certified))
        if collection_id in CONVERSATION_SCOPES:
            return self._safe_conversations(user_id_vo)

        collection = self.collection_management_use_case.resolve(user_id, collection_id)
        if collection is None:
            if is_alias(collection_id):
                return []
            raise EntityNotFoundError("Collection", collection_id)
        resolved = str(collection.id)

        try:
            rows = self.membership_repository.list_for_collection(resolved)
        except StoreNotProvisionedError:
            logger.info("membership_table_missing", collection_id=resolved)
            rows = []

        ids_by_kind: dict[ItemKind, list[str]] = defaultdict(list)
        for row in rows:
            ids_by_kind[row.item_kind].append(row.item_id)

        found: dict[tuple[ItemKind, str], ContentItem] = {}
        for kind, ids in ids_by_kind.items():
            for item in self._safe_find(kind, ids, user_id_vo):
                found[item.key] = item

        items = [found[row.item_key] for row in rows if row.item_key in found]
        items.extend(self._safe_context_items(user_id_vo, resolved))
        return self._annotate_courses(user_id_vo, items)

    def get_counts(self, user_id: int) -> dict[str, int]:
        """
        Count the items of every collection of a user.

        Counts cover membership rows, context entries, the virtual profile
        of an empty personal context, conversation self-tags, and the
        ``conversations``, ``prometheus`` and ``certifications``
        pseudo-collections. System collections are reported under their
        storage id and under their alias.
        """
        user_id_vo = UserId(user_id)
        aliases = AliasResolver(self.collection_management_use_case.list_collections(user_id))
        counts: dict[str, int] = defaultdict(int)

        try:
            for collection_id, count in self.membership_repository.count_by_collection(
                user_id_vo
            ).items():
                counts[collection_id] += count
        except StoreNotProvisionedError:
            logger.info("membership_table_missing", user_id=user_id)

        try:
            context_counts, with_profile = self.content_item_repository.count_context_items(
                user_id_vo
            )
        except StoreNotProvisionedError:
            context_counts, with_profile = {}, set()
        for collection_id, count in context_counts.items():
            counts[collection_id] += count

        personal_context = aliases.resolve(PERSONAL_CONTEXT)
        if personal_context != PERSONAL_CONTEXT and personal_context not in with_profile:
            # The placeholder profile is always shown, so it is counted too
            counts[personal_context] += 1

        conversations = self._safe_conversations(user_id_vo)
        counts[ALL_CONVERSATIONS] = len(conversations)
        counts[PROMETHEUS] = len(conversations)
        for conversation in conversations:
            for collection_id in conversation.collection_ids:
                counts[collection_id] += 1

        try:
            counts[CERTIFICATIONS] = self.content_item_repository.count_certified_courses()
        except StoreNotProvisionedError:
            counts[CERTIFICATIONS] = 0

        for collection_id, count in list(counts.items()):
            alias = aliases.alias_for(collection_id)
            if alias is not None and alias != collection_id:
                counts[alias] = count

        return dict(counts)

    def _annotate_courses(self, user_id: UserId, items: list) -> list:
        if not any(isinstance(item, Course) for item in items):
            return items
        try:
            rows = self.membership_repository.list_for_user(user_id)
        except StoreNotProvisionedError:
            rows = []
        collections_by_course: dict[str, set[str]] = defaultdict(set)
        for row in rows:
            if row.item_kind is ItemKind.COURSE:
                collections_by_course[row.item_id].add(row.collection_id)

        annotated = []
        for item in items:
            if isinstance(item, Course):
                collection_ids = collections_by_course.get(item.id, set())
                item = replace(
                    item, collections=tuple(sorted(collection_ids)), is_saved=bool(collection_ids)
                )
            annotated.append(item)
        return annotated

    def _safe_find(self, kind: ItemKind, ids: list[str], user_id: UserId) -> list[ContentItem]:
        try:
            return self.content_item_repository.find_items(kind, ids, user_id)
        except StoreNotProvisionedError as exc:
            logger.info("item_table_missing", item_kind=kind, table=exc.table)
            return []

    def _safe_courses(self) -> list[Course]:
        try:
            return self.content_item_repository.list_courses()
        except StoreNotProvisionedError:
            return []

    def _safe_conversations(self, user_id: UserId) -> list[ContentItem]:
        try:
            return self.conversation_repository.list_for_user(user_id)
        except StoreNotProvisionedError:
            return []

    def _safe_context_items(self, user_id: UserId, collection_id: str) -> list[ContentItem]:
        try:
            return self.content_item_repository.list_context_items(user_id, collection_id)
        except StoreNotProvisionedError:
            return []
