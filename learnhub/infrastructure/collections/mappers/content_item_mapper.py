"""Mapper for content ORM rows → ContentItem domain values."""

from learnhub.domain.collections.entities.content_item import ContentItem, Course
from learnhub.domain.collections.item_kind import CONTEXT_TYPE_TO_KIND, ItemKind
from learnhub.models import ContextItem as ContextItemORM
from learnhub.models import Conversation as ConversationORM
from learnhub.models import Course as CourseORM
from learnhub.models import Lesson as LessonORM
from learnhub.models import Module as ModuleORM
from learnhub.models import Note as NoteORM
from learnhub.models import Resource as ResourceORM


class ContentItemMapper:
    """Mapper for content ORM → Domain conversion. Content is read-only here."""

    def course_to_domain(
        self, orm_model: CourseORM, lesson_titles: list[str] | None = None
    ) -> Course:
        return Course(
            id=str(orm_model.id),
            title=orm_model.title,
            created_at=orm_model.created_at,
            updated_at=orm_model.updated_at,
            author=orm_model.author or "",
            description=orm_model.description or "",
            category=orm_model.category or "",
            badges=frozenset(orm_model.badges or ()),
            progress=orm_model.progress,
            rating=orm_model.rating,
            date_added=orm_model.date_added,
            lesson_titles=tuple(lesson_titles or ()),
        )

    def lesson_to_domain(
        self, orm_model: LessonORM, course_title: str | None = None
    ) -> ContentItem:
        return ContentItem(
            kind=ItemKind.LESSON,
            id=orm_model.id,
            title=orm_model.title,
            created_at=orm_model.created_at,
            updated_at=orm_model.updated_at,
            details={
                "course_id": orm_model.course_id,
                "course_title": course_title,
                "duration": orm_model.duration,
            },
        )

    def module_to_domain(
        self, orm_model: ModuleORM, course_title: str | None = None
    ) -> ContentItem:
        return ContentItem(
            kind=ItemKind.MODULE,
            id=orm_model.id,
            title=orm_model.title,
            created_at=orm_model.created_at,
            updated_at=orm_model.updated_at,
            details={"course_id": orm_model.course_id, "course_title": course_title},
        )

    def resource_to_domain(self, orm_model: ResourceORM) -> ContentItem:
        return ContentItem(
            kind=ItemKind.RESOURCE,
            id=orm_model.id,
            title=orm_model.title,
            created_at=orm_model.created_at,
            updated_at=orm_model.updated_at,
            details={"course_id": orm_model.course_id, "url": orm_model.url},
        )

    def conversation_to_domain(self, orm_model: ConversationORM) -> ContentItem:
        meta = orm_model.meta or {}
        tool_slug = meta.get("tool_slug")
        is_tool = bool(meta.get("is_tool_conversation") or tool_slug)
        collection_ids = meta.get("collection_ids") or []
        if not isinstance(collection_ids, list):
            collection_ids = []
        return ContentItem(
            kind=ItemKind.TOOL_CONVERSATION if is_tool else ItemKind.CONVERSATION,
            id=orm_model.id,
            title=orm_model.title,
            created_at=orm_model.created_at,
            updated_at=orm_model.updated_at,
            collection_ids=tuple(str(c) for c in collection_ids),
            details={"tool_slug": tool_slug} if tool_slug else {},
        )

    def note_to_domain(self, orm_model: NoteORM) -> ContentItem:
        return ContentItem(
            kind=ItemKind.NOTE,
            id=orm_model.id,
            title=orm_model.title,
            created_at=orm_model.created_at,
            updated_at=orm_model.updated_at,
            details={"content": orm_model.content, "course_id": orm_model.course_id},
        )

    def context_to_domain(self, orm_model: ContextItemORM) -> ContentItem:
        return ContentItem(
            kind=CONTEXT_TYPE_TO_KIND.get(orm_model.type, ItemKind.CONTEXT_CUSTOM),
            id=orm_model.id,
            title=orm_model.title,
            created_at=orm_model.created_at,
            updated_at=orm_model.updated_at,
            details={"content": orm_model.content},
        )
