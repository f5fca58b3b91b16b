"""API routes for notes."""

import structlog
from fastapi import APIRouter, Depends, HTTPException
from starlette import status

from learnhub.application.collections.use_cases.note_deletion_use_case import (
    NoteDeletionUseCase,
)
from learnhub.core import container
from learnhub.domain.common.exceptions import DomainError
from learnhub.infrastructure.common.di import inject_use_case
from learnhub.infrastructure.common.errors import http_error_for
from learnhub.infrastructure.identity import CurrentUserId

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/notes", tags=["notes"])


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_note(
    note_id: str,
    user_id: CurrentUserId,
    use_case: NoteDeletionUseCase = Depends(inject_use_case(container.note_deletion_use_case)),
) -> None:
    """
    Delete a note and remove it from every collection.

    Raises:
        HTTPException: 404 if the note is not found
    """
    try:
        use_case.delete_note(user_id, note_id)
    except DomainError as e:
        raise http_error_for(e) from e
    except Exception as e:
        logger.error("delete_note_failed", user_id=user_id, note_id=note_id, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e
