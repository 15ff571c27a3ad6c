"""Profile reads and updates for the signed-in user."""
import logging

from sqlalchemy.orm import Session

from flashcards.records import UserRecord, UserStats
from flashcards.repositories import users
from flashcards.services.auth import validate_display_name
from flashcards.services.errors import ServiceError, not_found_error, validation_error

logger = logging.getLogger(__name__)


def user_not_found() -> ServiceError:
    return not_found_error("USER_NOT_FOUND", "User not found")


def get_profile(db: Session, user_id: str) -> tuple[UserRecord, UserStats] | ServiceError:
    user = users.find_by_id(db, user_id)
    if user is None:
        return user_not_found()
    return user, users.get_stats(db, user_id)


def update_display_name(
    db: Session,
    user_id: str,
    display_name: str | None = None,
) -> tuple[UserRecord, UserStats] | ServiceError:
    """Apply a partial profile update. At least one field must be given."""
    if display_name is None:
        return validation_error("NO_UPDATES", "No fields to update")

    error = validate_display_name(display_name)
    if error:
        return error

    if not users.update_display_name(db, user_id, display_name):
        return user_not_found()
    db.commit()
    logger.info(f"Updated profile for user {user_id}")
    return get_profile(db, user_id)
