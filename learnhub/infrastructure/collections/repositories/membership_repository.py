"""Repository for collection membership rows."""

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from learnhub.domain.collections.item_kind import ItemKind
from learnhub.domain.collections.value_objects.membership_key import MembershipKey
from learnhub.domain.common.value_objects.ids import UserId
from learnhub.infrastructure.common.db_errors import missing_table_guard
from learnhub.models import CollectionItem as CollectionItemORM
from learnhub.models import UserCollection as UserCollectionORM

_TABLE = CollectionItemORM.__tablename__
_KNOWN_KINDS = frozenset(kind.value for kind in ItemKind)


class MembershipRepository:
    """Repository for the collection_items join table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def add(self, key: MembershipKey) -> bool:
        """
        Insert a membership row unless the triple already exists.

        Args:
            key: The (kind, item, collection) triple

        Returns:
            True if a row was inserted
        """
        with missing_table_guard(self.db, _TABLE):
            if self._exists(key):
                return False
            self.db.add(
                CollectionItemORM(
                    collection_id=key.collection_id,
                    item_id=key.item_id,
                    item_type=key.item_kind.value,
                    course_id=_course_id(key),
                )
            )
            try:
                self.db.commit()
            except IntegrityError:
                # Lost a race with a concurrent insert of the same triple
                self.db.rollback()
                return False
        return True

    def remove(self, item_id: str, collection_id: str) -> int:
        """Remove an item from a collection, whatever its kind."""
        conditions = [CollectionItemORM.item_id == item_id]
        if item_id.isdigit():
            conditions.append(CollectionItemORM.course_id == int(item_id))
        stmt = delete(CollectionItemORM).where(
            CollectionItemORM.collection_id == collection_id,
            or_(*conditions),
        )
        with missing_table_guard(self.db, _TABLE):
            result = self.db.execute(stmt)
            self.db.commit()
        return result.rowcount or 0

    def remove_item(self, item_kind: ItemKind, item_id: str) -> int:
        """Remove an item from every collection."""
        stmt = delete(CollectionItemORM).where(
            CollectionItemORM.item_type == item_kind.value,
            CollectionItemORM.item_id == item_id,
        )
        with missing_table_guard(self.db, _TABLE):
            result = self.db.execute(stmt)
            self.db.commit()
        return result.rowcount or 0

    def list_for_collection(self, collection_id: str) -> list[MembershipKey]:
        """Get membership rows of a collection in insertion order."""
        stmt = (
            select(CollectionItemORM)
            .where(CollectionItemORM.collection_id == collection_id)
            .order_by(CollectionItemORM.created_at, CollectionItemORM.id)
        )
        with missing_table_guard(self.db, _TABLE):
            orm_models = self.db.execute(stmt).scalars().all()
        return [_to_key(orm) for orm in orm_models if orm.item_type in _KNOWN_KINDS]

    def list_for_user(self, user_id: UserId) -> list[MembershipKey]:
        """Get every membership row in collections owned by a user."""
        stmt = (
            select(CollectionItemORM)
            .join(UserCollectionORM, UserCollectionORM.id == CollectionItemORM.collection_id)
            .where(UserCollectionORM.user_id == user_id.value)
            .order_by(CollectionItemORM.id)
        )
        with missing_table_guard(self.db, _TABLE):
            orm_models = self.db.execute(stmt).scalars().all()
        return [_to_key(orm) for orm in orm_models if orm.item_type in _KNOWN_KINDS]

    def count_by_collection(self, user_id: UserId) -> dict[str, int]:
        """Get row counts per collection for a user's collections."""
        stmt = (
            select(CollectionItemORM.collection_id, func.count(CollectionItemORM.id))
            .join(UserCollectionORM, UserCollectionORM.id == CollectionItemORM.collection_id)
            .where(UserCollectionORM.user_id == user_id.value)
            .group_by(CollectionItemORM.collection_id)
        )
        with missing_table_guard(self.db, _TABLE):
            rows = self.db.execute(stmt).all()
        return {collection_id: count for collection_id, count in rows}

    def _exists(self, key: MembershipKey) -> bool:
        stmt = select(CollectionItemORM.id).where(
            CollectionItemORM.collection_id == key.collection_id,
            CollectionItemORM.item_id == key.item_id,
            CollectionItemORM.item_type == key.item_kind.value,
        )
        return self.db.execute(stmt).first() is not None


def _course_id(key: MembershipKey) -> int | None:
    if key.item_kind is ItemKind.COURSE and key.item_id.isdigit():
        return int(key.item_id)
    return None


def _to_key(orm_model: CollectionItemORM) -> MembershipKey:
    return MembershipKey(
        item_kind=ItemKind(orm_model.item_type),
        item_id=orm_model.item_id,
        collection_id=orm_model.collection_id,
    )
