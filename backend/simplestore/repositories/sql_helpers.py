import logging

from sqlalchemy.exc import IntegrityError

from simplestore.core.exceptions import ConflictError

logger = logging.getLogger(__name__)


def commit_or_conflict(db, message: str) -> None:
    """Commit the session, turning constraint violations into ConflictError.

    Covers duplicate unique codes and deletes of rows that other records still
    reference. The session is rolled back before raising.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(
            "Integrity error on commit",
            extra={"context": {"message": message, "error": str(e.orig)}},
        )
        raise ConflictError(message) from e
