import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from jose import JWTError, jwt

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
DEFAULT_LIFETIME_HOURS = 72


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    username: str
    issued_at: int
    expires_at: int


class JWTManager:
    """
    Mints and verifies HS256 bearer tokens.

    Claims: user_id, username, iat, exp. Every verification failure
    (malformed, wrong algorithm, bad signature, expired, missing or
    mistyped claims) yields None so callers cannot tell them apart.
    """

    def __init__(
        self,
        secret: str,
        lifetime_hours: int = DEFAULT_LIFETIME_HOURS,
        clock: Callable[[], float] = time.time,
    ):
        self.secret = secret
        self.lifetime_seconds = lifetime_hours * 3600
        self.clock = clock

    def generate_jwt(self, user_id: str, username: str) -> str:
        """
        Generate JWT access token

        Args:
            user_id: User ID
            username: Username at issuance

        Returns:
            JWT token string (HS256, 72-hour expiry by default)
        """
        now = int(self.clock())
        payload = {
            "user_id": str(user_id),
            "username": username,
            "iat": now,
            "exp": now + self.lifetime_seconds,
        }
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def verify_jwt(self, token: str) -> Optional[TokenClaims]:
        """
        Verify and decode JWT token

        Args:
            token: JWT token string

        Returns:
            TokenClaims or None if invalid
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") != ALGORITHM:
                return None

            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[ALGORITHM],
                # exp is checked below against our own clock
                options={"verify_exp": False, "require_exp": True, "require_iat": True},
            )
        except JWTError:
            return None

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            return None
        if self.clock() >= exp:
            return None

        user_id = payload.get("user_id")
        username = payload.get("username")
        if not isinstance(user_id, str) or not isinstance(username, str):
            return None

        return TokenClaims(
            user_id=user_id,
            username=username,
            issued_at=int(payload["iat"]),
            expires_at=int(exp),
        )
