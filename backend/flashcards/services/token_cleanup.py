"""Periodic purge of refresh tokens past their retention window.

Run from cron via the ``flashcards-purge-tokens`` console script.
"""
from datetime import timedelta
import logging

from flashcards.config import get_settings
from flashcards.database import ensure_database_directory, get_db_context
from flashcards.repositories import refresh_tokens

logger = logging.getLogger(__name__)


def purge_expired_refresh_tokens() -> int:
    """Delete refresh tokens that expired or were revoked before the retention cutoff."""
    retention = timedelta(days=get_settings().refresh_token_retention_days)
    with get_db_context() as db:
        purged = refresh_tokens.purge_expired_and_revoked(db, retention)
    logger.info(f"Purged {purged} expired or revoked refresh tokens")
    return purged


def main() -> None:
    logging.basicConfig(level=get_settings().log_level)
    ensure_database_directory()
    purge_expired_refresh_tokens()


if __name__ == "__main__":
    main()
