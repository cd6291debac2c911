from datetime import timedelta

from vortex_auth.api.utils.jwt import JWTManager
from vortex_auth.domain.base import utc_now
from vortex_auth.domain.entities import Session


def new_session(user_id: str, jwt_manager: JWTManager) -> Session:
    """Audit row for a freshly minted token; expires together with it"""
    return Session(
        user_id=user_id,
        expires_at=utc_now() + timedelta(seconds=jwt_manager.lifetime_seconds),
    )
