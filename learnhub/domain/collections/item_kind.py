"""Kinds of content that can belong to a collection."""

from enum import StrEnum


class ItemKind(StrEnum):
    """Discriminator of the ContentItem union."""

    COURSE = "COURSE"
    LESSON = "LESSON"
    MODULE = "MODULE"
    RESOURCE = "RESOURCE"
    CONVERSATION = "CONVERSATION"
    TOOL_CONVERSATION = "TOOL_CONVERSATION"
    NOTE = "NOTE"
    CONTEXT_PROFILE = "CONTEXT_PROFILE"
    CONTEXT_INSIGHT = "CONTEXT_INSIGHT"
    CONTEXT_CUSTOM = "CONTEXT_CUSTOM"
    CONTEXT_FILE = "CONTEXT_FILE"

    @property
    def is_context(self) -> bool:
        return self in CONTEXT_KINDS


CONTEXT_KINDS = frozenset(
    {
        ItemKind.CONTEXT_PROFILE,
        ItemKind.CONTEXT_INSIGHT,
        ItemKind.CONTEXT_CUSTOM,
        ItemKind.CONTEXT_FILE,
    }
)

CONVERSATION_KINDS = frozenset({ItemKind.CONVERSATION, ItemKind.TOOL_CONVERSATION})

# Context rows are stored with their own type column
CONTEXT_TYPE_TO_KIND: dict[str, ItemKind] = {
    "PROFILE": ItemKind.CONTEXT_PROFILE,
    "AI_INSIGHT": ItemKind.CONTEXT_INSIGHT,
    "CUSTOM_CONTEXT": ItemKind.CONTEXT_CUSTOM,
    "FILE": ItemKind.CONTEXT_FILE,
}
KIND_TO_CONTEXT_TYPE: dict[ItemKind, str] = {v: k for k, v in CONTEXT_TYPE_TO_KIND.items()}
