from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from vortex_auth.api.utils.jwt import JWTManager
from vortex_auth.app.services.password_hasher import PasswordHasher
from vortex_auth.domain.base import utc_now
from vortex_auth.domain.entities import Session, User

TEST_SECRET = "unit-test-secret"


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.create = AsyncMock(side_effect=lambda user: user)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.get_by_username = AsyncMock(return_value=None)
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.update = AsyncMock()
    uow.users.delete = AsyncMock(return_value=1)

    uow.sessions = MagicMock()
    uow.sessions.create = AsyncMock(side_effect=lambda session: session)
    uow.sessions.get_by_id = AsyncMock(return_value=None)
    uow.sessions.delete = AsyncMock(return_value=True)
    uow.sessions.delete_expired = AsyncMock(return_value=0)

    uow.password_reset_tokens = MagicMock()
    uow.password_reset_tokens.create = AsyncMock(side_effect=lambda token: token)
    uow.password_reset_tokens.get_by_token_hash = AsyncMock(return_value=None)
    uow.password_reset_tokens.mark_used = AsyncMock()
    uow.password_reset_tokens.delete_expired_or_used = AsyncMock(return_value=0)

    return uow


@pytest.fixture
def hasher():
    # Lowest cost bcrypt accepts; keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def jwt_manager():
    return JWTManager(TEST_SECRET)


@pytest.fixture
def mailer():
    return MagicMock()


@pytest.fixture
def background():
    return MagicMock()


@pytest.fixture
def make_user(hasher):
    def _make_user(username="alice", email="a@x.io", password="p@ssw0rd!", **kwargs):
        return User(
            username=username,
            email=email,
            password_hash=hasher.hash(password),
            **kwargs,
        )

    return _make_user


@pytest.fixture
def make_session():
    def _make_session(user_id: str, expires_in: timedelta = timedelta(hours=72)):
        return Session(user_id=user_id, expires_at=utc_now() + expires_in)

    return _make_session
