"""Use case for deleting a note together with its memberships."""

import structlog

from learnhub.application.collections.protocols.content_item_repository import (
    NoteRepositoryProtocol,
)
from learnhub.application.collections.protocols.membership_repository import (
    MembershipRepositoryProtocol,
)
from learnhub.domain.collections.item_kind import ItemKind
from learnhub.domain.common.exceptions import EntityNotFoundError, StoreNotProvisionedError
from learnhub.domain.common.value_objects.ids import UserId

logger = structlog.get_logger(__name__)


class NoteDeletionUseCase:
    """Use case for deleting notes."""

    def __init__(
        self,
        note_repository: NoteRepositoryProtocol,
        membership_repository: MembershipRepositoryProtocol,
    ) -> None:
        self.note_repository = note_repository
        self.membership_repository = membership_repository

    def delete_note(self, user_id: int, note_id: str) -> None:
        """
        Delete a note and remove it from every collection.

        Raises:
            EntityNotFoundError: If the note does not exist
        """
        if not self.note_repository.delete(note_id, UserId(user_id)):
            raise EntityNotFoundError("Note", note_id)

        try:
            removed = self.membership_repository.remove_item(ItemKind.NOTE, note_id)
        except StoreNotProvisionedError:
            removed = 0
        logger.info("note_deleted", user_id=user_id, note_id=note_id, memberships_removed=removed)
