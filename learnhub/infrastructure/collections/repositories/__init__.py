from .collection_repository import CollectionRepository
from .content_item_repository import ContentItemRepository
from .conversation_repository import ConversationRepository
from .membership_repository import MembershipRepository
from .note_repository import NoteRepository

__all__ = [
    "CollectionRepository",
    "ContentItemRepository",
    "ConversationRepository",
    "MembershipRepository",
    "NoteRepository",
]
