"""Password hashing with bcrypt."""
from functools import lru_cache

import bcrypt

from flashcards.config import get_settings

# bcrypt only looks at the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """Self-describing bcrypt hashes (algorithm, cost and salt live in the hash)."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_hash: bytes | None = None

    def hash(self, password: str) -> str:
        """Hash a password."""
        return bcrypt.hashpw(
            password.encode("utf-8"),
            bcrypt.gensalt(rounds=self.rounds),
        ).decode("utf-8")

    def verify(self, password: str, hashed_password: str) -> bool:
        """Verify a password against its hash in constant time."""
        password_bytes = password.encode("utf-8")
        if len(password_bytes) > BCRYPT_MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
        except ValueError:
            # Malformed or placeholder hash
            return False

    def verify_dummy(self, password: str) -> bool:
        """Spend the same time as a real verification; always False.

        Used when no account matches so unknown emails and wrong passwords
        take the same time to reject.
        """
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=self.rounds))
        bcrypt.checkpw(password.encode("utf-8")[:BCRYPT_MAX_BYTES], self._dummy_hash)
        return False


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=get_settings().bcrypt_rounds)
