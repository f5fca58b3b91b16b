"""Repository for notes."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from learnhub.domain.common.value_objects.ids import UserId
from learnhub.infrastructure.common.db_errors import missing_table_guard
from learnhub.models import Note as NoteORM


class NoteRepository:
    """Repository for notes. Only deletion goes through the collections engine."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def delete(self, note_id: str, user_id: UserId) -> bool:
        """
        Delete a note owned by the user.

        Returns:
            True if the note existed and was deleted
        """
        stmt = select(NoteORM).where(NoteORM.id == note_id, NoteORM.user_id == user_id.value)
        with missing_table_guard(self.db, NoteORM.__tablename__):
            orm_model = self.db.execute(stmt).scalar_one_or_none()
            if orm_model is None:
                return False
            self.db.delete(orm_model)
            self.db.commit()
        return True
