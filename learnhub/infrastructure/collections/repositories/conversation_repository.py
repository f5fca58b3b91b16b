"""Repository for self-tagging conversations."""

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from learnhub.domain.collections.entities.content_item import ContentItem
from learnhub.domain.common.exceptions import StoreNotProvisionedError
from learnhub.domain.common.value_objects.ids import UserId
from learnhub.infrastructure.collections.mappers.content_item_mapper import ContentItemMapper
from learnhub.infrastructure.common.db_errors import missing_table_guard
from learnhub.models import Conversation as ConversationORM

logger = structlog.get_logger(__name__)

_TABLE = ConversationORM.__tablename__


class ConversationRepository:
    """
    Repository for conversations.

    Collection ids live in the JSON ``metadata`` column, so filtering by
    collection happens in Python rather than in SQL.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = ContentItemMapper()

    def list_for_user(
        self, user_id: UserId, collection_id: str | None = None
    ) -> list[ContentItem]:
        """Get a user's conversations, newest first."""
        stmt = (
            select(ConversationORM)
            .where(ConversationORM.user_id == user_id.value)
            .order_by(ConversationORM.updated_at.desc(), ConversationORM.id)
        )
        with missing_table_guard(self.db, _TABLE):
            orm_models = self.db.execute(stmt).scalars().all()
        conversations = [self.mapper.conversation_to_domain(orm) for orm in orm_models]
        if collection_id is None:
            return conversations
        return [c for c in conversations if c.is_tagged_with(collection_id)]

    def find_by_id(self, conversation_id: str, user_id: UserId) -> ContentItem | None:
        orm_model = self._find_orm(conversation_id, user_id)
        return self.mapper.conversation_to_domain(orm_model) if orm_model else None

    def set_collection_ids(
        self, conversation_id: str, user_id: UserId, collection_ids: list[str]
    ) -> ContentItem | None:
        """Replace a conversation's self-tags, keeping the rest of its metadata."""
        orm_model = self._find_orm(conversation_id, user_id)
        if orm_model is None:
            return None
        # Reassign so the JSON column is flagged as modified
        orm_model.meta = {**(orm_model.meta or {}), "collection_ids": list(collection_ids)}
        self.db.commit()
        self.db.refresh(orm_model)
        return self.mapper.conversation_to_domain(orm_model)

    def remove_collection_id(self, user_id: UserId, collection_id: str) -> int:
        """Untag every conversation of a user from a collection."""
        try:
            with missing_table_guard(self.db, _TABLE):
                orm_models = (
                    self.db.execute(
                        select(ConversationORM).where(ConversationORM.user_id == user_id.value)
                    )
                    .scalars()
                    .all()
                )
        except StoreNotProvisionedError:
            return 0

        untagged = 0
        for orm_model in orm_models:
            meta = orm_model.meta or {}
            collection_ids = meta.get("collection_ids") or []
            if collection_id in collection_ids:
                orm_model.meta = {
                    **meta,
                    "collection_ids": [c for c in collection_ids if c != collection_id],
                }
                untagged += 1
        if untagged:
            self.db.commit()
            logger.debug("conversations_untagged", collection_id=collection_id, count=untagged)
        return untagged

    def _find_orm(self, conversation_id: str, user_id: UserId) -> ConversationORM | None:
        stmt = select(ConversationORM).where(
            ConversationORM.id == conversation_id,
            ConversationORM.user_id == user_id.value,
        )
        with missing_table_guard(self.db, _TABLE):
            return self.db.execute(stmt).scalar_one_or_none()
