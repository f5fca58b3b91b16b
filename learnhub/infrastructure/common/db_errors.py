"""Translation of driver errors for tables that were never migrated."""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import Session

from learnhub.domain.common.exceptions import StoreNotProvisionedError

logger = structlog.get_logger(__name__)

# SQLite, PostgreSQL
_MISSING_TABLE_MARKERS = ("no such table", "does not exist", "undefinedtable")


def is_missing_table(error: Exception) -> bool:
    message = str(getattr(error, "orig", error)).lower()
    return any(marker in message for marker in _MISSING_TABLE_MARKERS)


@contextmanager
def missing_table_guard(db: Session, table: str) -> Iterator[None]:
    """
    Raise StoreNotProvisionedError when ``table`` does not exist.

    Any other database error propagates unchanged.
    """
    try:
        yield
    except (OperationalError, ProgrammingError) as exc:
        if not is_missing_table(exc):
            raise
        # PostgreSQL aborts the transaction on the failed statement
        db.rollback()
        logger.warning("table_not_provisioned", table=table)
        raise StoreNotProvisionedError(table) from exc
