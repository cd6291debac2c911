import logging

import bcrypt

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72

# Valid bcrypt hash used when the account does not exist, so a failed login
# costs the same whether or not the username is registered.
_DUMMY_HASH = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(10))


class PasswordHashError(Exception):
    pass


def _password_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes; newer releases refuse longer input
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """bcrypt hashing with a per-record salt"""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        try:
            hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(self.rounds))
        except (ValueError, TypeError) as exc:
            logger.error(f"Password hashing failed: {exc}")
            raise PasswordHashError("Could not hash password") from exc
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            # Malformed stored hash
            return False

    def burn(self, password: str) -> None:
        """Spend one verification's worth of time without a real hash"""
        bcrypt.checkpw(_password_bytes(password), _DUMMY_HASH)
