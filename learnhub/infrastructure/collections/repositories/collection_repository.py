"""Repository for Collection domain entity."""

from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from learnhub.domain.collections.entities.collection import Collection
from learnhub.domain.collections.system_collections import ALIAS_TO_SPEC
from learnhub.domain.common.value_objects.ids import CollectionId, UserId
from learnhub.infrastructure.collections.mappers.collection_mapper import CollectionMapper
from learnhub.infrastructure.common.db_errors import missing_table_guard
from learnhub.models import CollectionItem as CollectionItemORM
from learnhub.models import UserCollection as UserCollectionORM


class CollectionRepository:
    """Repository for Collection domain entity."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = CollectionMapper()

    def find_by_id(self, collection_id: CollectionId, user_id: UserId) -> Collection | None:
        """
        Get a collection by ID for a specific user.

        Args:
            collection_id: The collection ID
            user_id: The user ID

        Returns:
            Collection entity or None if not found
        """
        stmt = select(UserCollectionORM).where(
            UserCollectionORM.id == str(collection_id),
            UserCollectionORM.user_id == user_id.value,
        )
        with missing_table_guard(self.db, UserCollectionORM.__tablename__):
            orm_model = self.db.execute(stmt).scalar_one_or_none()
        return self.mapper.to_domain(orm_model) if orm_model else None

    def find_system(self, alias: str, user_id: UserId) -> list[Collection]:
        """
        Get the system collections seeded for an alias.

        Rows seeded before aliases were stored are matched by label.
        """
        spec = ALIAS_TO_SPEC[alias]
        stmt = (
            select(UserCollectionORM)
            .where(
                UserCollectionORM.user_id == user_id.value,
                UserCollectionORM.is_system_defined.is_(True),
                or_(
                    UserCollectionORM.system_alias == alias,
                    (UserCollectionORM.system_alias.is_(None))
                    & (UserCollectionORM.label == spec.label),
                ),
            )
            .order_by(UserCollectionORM.created_at, UserCollectionORM.id)
        )
        with missing_table_guard(self.db, UserCollectionORM.__tablename__):
            orm_models = self.db.execute(stmt).scalars().all()
        return [self.mapper.to_domain(orm) for orm in orm_models]

    def list_for_user(self, user_id: UserId) -> list[Collection]:
        """Get all collections of a user, system collections first."""
        stmt = (
            select(UserCollectionORM)
            .where(UserCollectionORM.user_id == user_id.value)
            .order_by(
                UserCollectionORM.is_system_defined.desc(),
                UserCollectionORM.created_at,
                UserCollectionORM.label,
            )
        )
        with missing_table_guard(self.db, UserCollectionORM.__tablename__):
            orm_models = self.db.execute(stmt).scalars().all()
        return [self.mapper.to_domain(orm) for orm in orm_models]

    def save(self, collection: Collection) -> Collection:
        """Insert or update a collection."""
        with missing_table_guard(self.db, UserCollectionORM.__tablename__):
            existing = self.db.get(UserCollectionORM, str(collection.id))
            orm_model = self.mapper.to_orm(collection, existing)
            if existing is None:
                self.db.add(orm_model)
            self.db.commit()
            self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)

    def delete(self, collection_id: CollectionId, user_id: UserId) -> bool:
        """Delete a collection and its membership rows."""
        with missing_table_guard(self.db, UserCollectionORM.__tablename__):
            orm_model = self.db.execute(
                select(UserCollectionORM).where(
                    UserCollectionORM.id == str(collection_id),
                    UserCollectionORM.user_id == user_id.value,
                )
            ).scalar_one_or_none()
            if orm_model is None:
                return False

            # Explicit cascade; SQLite ignores ON DELETE without the pragma
            self.db.execute(
                delete(CollectionItemORM).where(
                    CollectionItemORM.collection_id == str(collection_id)
                )
            )
            self.db.delete(orm_model)
            self.db.commit()
        return True
