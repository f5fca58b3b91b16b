"""Repository for content items referenced by collections."""

from collections import defaultdict

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from learnhub.domain.collections.entities.content_item import ContentItem, Course
from learnhub.domain.collections.item_kind import KIND_TO_CONTEXT_TYPE, ItemKind
from learnhub.domain.common.exceptions import StoreNotProvisionedError
from learnhub.domain.common.value_objects.ids import UserId
from learnhub.infrastructure.collections.mappers.content_item_mapper import ContentItemMapper
from learnhub.infrastructure.common.db_errors import missing_table_guard
from learnhub.models import ContextItem as ContextItemORM
from learnhub.models import Course as CourseORM
from learnhub.models import Lesson as LessonORM
from learnhub.models import Module as ModuleORM
from learnhub.models import Note as NoteORM
from learnhub.models import Resource as ResourceORM

_PROFILE_TYPE = KIND_TO_CONTEXT_TYPE[ItemKind.CONTEXT_PROFILE]


class ContentItemRepository:
    """Read access to every membership-backed kind of content."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = ContentItemMapper()

    def find_items(
        self, item_kind: ItemKind, item_ids: list[str], user_id: UserId
    ) -> list[ContentItem]:
        """
        Get items of one kind by id.

        Args:
            item_kind: Kind of the items
            item_ids: IDs to look up; unknown ids are skipped
            user_id: Owner, for user-owned kinds (notes, context entries)

        Returns:
            Found items, in no particular order
        """
        if not item_ids:
            return []

        match item_kind:
            case ItemKind.COURSE:
                return self._find_courses(item_ids)
            case ItemKind.LESSON:
                return self._find_lessons(item_ids)
            case ItemKind.MODULE:
                return self._find_modules(item_ids)
            case ItemKind.RESOURCE:
                stmt = select(ResourceORM).where(ResourceORM.id.in_(item_ids))
                with missing_table_guard(self.db, ResourceORM.__tablename__):
                    orm_models = self.db.execute(stmt).scalars().all()
                return [self.mapper.resource_to_domain(orm) for orm in orm_models]
            case ItemKind.NOTE:
                stmt = select(NoteORM).where(
                    NoteORM.id.in_(item_ids), NoteORM.user_id == user_id.value
                )
                with missing_table_guard(self.db, NoteORM.__tablename__):
                    orm_models = self.db.execute(stmt).scalars().all()
                return [self.mapper.note_to_domain(orm) for orm in orm_models]
            case kind if kind.is_context:
                stmt = select(ContextItemORM).where(
                    ContextItemORM.id.in_(item_ids),
                    ContextItemORM.user_id == user_id.value,
                    ContextItemORM.type == KIND_TO_CONTEXT_TYPE[kind],
                )
                with missing_table_guard(self.db, ContextItemORM.__tablename__):
                    orm_models = self.db.execute(stmt).scalars().all()
                return [self.mapper.context_to_domain(orm) for orm in orm_models]
            case _:
                # Conversations tag themselves and are served by their own repository
                return []

    def list_courses(self) -> list[Course]:
        """Get the whole course catalog, newest first."""
        stmt = select(CourseORM).order_by(CourseORM.created_at.desc(), CourseORM.id.desc())
        with missing_table_guard(self.db, CourseORM.__tablename__):
            orm_models = self.db.execute(stmt).scalars().all()
        titles = self._lesson_titles([orm.id for orm in orm_models])
        return [self.mapper.course_to_domain(orm, titles.get(orm.id)) for orm in orm_models]

    def count_certified_courses(self) -> int:
        """Number of courses that carry at least one badge."""
        stmt = select(CourseORM.badges)
        with missing_table_guard(self.db, CourseORM.__tablename__):
            badges = self.db.execute(stmt).scalars().all()
        return sum(1 for value in badges if value)

    def list_context_items(self, user_id: UserId, collection_id: str) -> list[ContentItem]:
        """Get personal-context entries filed under a collection."""
        stmt = (
            select(ContextItemORM)
            .where(
                ContextItemORM.user_id == user_id.value,
                ContextItemORM.collection_id == collection_id,
            )
            .order_by(ContextItemORM.created_at, ContextItemORM.id)
        )
        with missing_table_guard(self.db, ContextItemORM.__tablename__):
            orm_models = self.db.execute(stmt).scalars().all()
        return [self.mapper.context_to_domain(orm) for orm in orm_models]

    def count_context_items(self, user_id: UserId) -> tuple[dict[str, int], set[str]]:
        """Count personal-context entries per collection, and where profiles live."""
        stmt = (
            select(ContextItemORM.collection_id, ContextItemORM.type, func.count())
            .where(
                ContextItemORM.user_id == user_id.value,
                ContextItemORM.collection_id.is_not(None),
            )
            .group_by(ContextItemORM.collection_id, ContextItemORM.type)
        )
        with missing_table_guard(self.db, ContextItemORM.__tablename__):
            rows = self.db.execute(stmt).all()

        counts: dict[str, int] = defaultdict(int)
        with_profile: set[str] = set()
        for collection_id, item_type, count in rows:
            counts[collection_id] += count
            if item_type == _PROFILE_TYPE:
                with_profile.add(collection_id)
        return dict(counts), with_profile

    def _find_courses(self, item_ids: list[str]) -> list[ContentItem]:
        numeric_ids = [int(i) for i in item_ids if i.isdigit()]
        if not numeric_ids:
            return []
        stmt = select(CourseORM).where(CourseORM.id.in_(numeric_ids))
        with missing_table_guard(self.db, CourseORM.__tablename__):
            orm_models = self.db.execute(stmt).scalars().all()
        titles = self._lesson_titles([orm.id for orm in orm_models])
        return [self.mapper.course_to_domain(orm, titles.get(orm.id)) for orm in orm_models]

    def _find_lessons(self, item_ids: list[str]) -> list[ContentItem]:
        stmt = (
            select(LessonORM, CourseORM.title)
            .outerjoin(CourseORM, CourseORM.id == LessonORM.course_id)
            .where(LessonORM.id.in_(item_ids))
        )
        with missing_table_guard(self.db, LessonORM.__tablename__):
            rows = self.db.execute(stmt).all()
        return [self.mapper.lesson_to_domain(lesson, course_title) for lesson, course_title in rows]

    def _find_modules(self, item_ids: list[str]) -> list[ContentItem]:
        stmt = (
            select(ModuleORM, CourseORM.title)
            .outerjoin(CourseORM, CourseORM.id == ModuleORM.course_id)
            .where(ModuleORM.id.in_(item_ids))
        )
        with missing_table_guard(self.db, ModuleORM.__tablename__):
            rows = self.db.execute(stmt).all()
        return [self.mapper.module_to_domain(module, course_title) for module, course_title in rows]

    def _lesson_titles(self, course_ids: list[int]) -> dict[int, list[str]]:
        if not course_ids:
            return {}
        stmt = (
            select(LessonORM.course_id, LessonORM.title)
            .where(LessonORM.course_id.in_(course_ids))
            .order_by(LessonORM.course_id, LessonORM.created_at)
        )
        try:
            with missing_table_guard(self.db, LessonORM.__tablename__):
                rows = self.db.execute(stmt).all()
        except StoreNotProvisionedError:
            return {}
        titles: dict[int, list[str]] = defaultdict(list)
        for course_id, title in rows:
            titles[course_id].append(title)
        return titles
