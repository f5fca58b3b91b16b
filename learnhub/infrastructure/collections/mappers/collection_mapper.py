"""Mapper for UserCollection ORM ↔ Collection domain conversion."""

from learnhub.domain.collections.entities.collection import Collection
from learnhub.domain.common.value_objects.ids import CollectionId, UserId
from learnhub.models import UserCollection as UserCollectionORM


class CollectionMapper:
    """Mapper for Collection ORM ↔ Domain conversion."""

    def to_domain(self, orm_model: UserCollectionORM) -> Collection:
        """Convert ORM model to domain entity."""
        return Collection.create_with_id(
            id=CollectionId(orm_model.id),
            owner_id=UserId(orm_model.user_id),
            label=orm_model.label,
            color=orm_model.color,
            is_system_defined=orm_model.is_system_defined,
            created_at=orm_model.created_at,
            updated_at=orm_model.updated_at,
            org_id=orm_model.org_id,
            system_alias=orm_model.system_alias,
        )

    def to_orm(
        self, domain_entity: Collection, orm_model: UserCollectionORM | None = None
    ) -> UserCollectionORM:
        """Convert domain entity to ORM model."""
        if orm_model:
            orm_model.label = domain_entity.label
            orm_model.color = domain_entity.color
            orm_model.org_id = domain_entity.org_id
            orm_model.system_alias = domain_entity.system_alias
            return orm_model

        return UserCollectionORM(
            id=str(domain_entity.id),
            user_id=domain_entity.owner_id.value,
            org_id=domain_entity.org_id,
            label=domain_entity.label,
            color=domain_entity.color,
            is_system_defined=domain_entity.is_system_defined,
            system_alias=domain_entity.system_alias,
            created_at=domain_entity.created_at,
            updated_at=domain_entity.updated_at,
        )
