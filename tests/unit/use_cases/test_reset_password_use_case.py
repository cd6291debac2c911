from datetime import timedelta

import pytest

from vortex_auth.app.repositories.errors import NotFoundError
from vortex_auth.app.use_cases.auth import ResetPasswordUseCase, hash_reset_token
from vortex_auth.domain.base import utc_now
from vortex_auth.domain.entities import PasswordResetToken

TOKEN = "ab" * 32
NOW = utc_now()


@pytest.fixture
def reset_token():
    return PasswordResetToken(
        user_id="user-1",
        token_hash=hash_reset_token(TOKEN),
        expires_at=NOW + timedelta(hours=1),
    )


@pytest.fixture
def use_case(mock_uow, hasher):
    return ResetPasswordUseCase(mock_uow, hasher, clock=lambda: NOW)


@pytest.mark.asyncio
async def test_successful_reset(use_case, mock_uow, hasher, reset_token):
    mock_uow.password_reset_tokens.get_by_token_hash.return_value = reset_token

    result = await use_case.execute(TOKEN, "newp@ss12")

    assert result.is_ok()
    assert result.value.message == "Password reset successfully"
    mock_uow.password_reset_tokens.get_by_token_hash.assert_called_once_with(hash_reset_token(TOKEN))

    user_id, updates = mock_uow.users.update.call_args[0]
    assert user_id == "user-1"
    assert updates.changes().keys() == {"password_hash"}
    assert hasher.verify("newp@ss12", updates.password_hash)

    mock_uow.password_reset_tokens.mark_used.assert_called_once_with(reset_token.id)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_unknown_token(use_case, mock_uow):
    result = await use_case.execute(TOKEN, "newp@ss12")

    assert result.is_err()
    assert result.error.code == "TOKEN_NOT_FOUND"
    assert result.error.message == "Invalid or expired token"


@pytest.mark.asyncio
async def test_expiry_instant_counts_as_expired(use_case, mock_uow, reset_token):
    reset_token.expires_at = NOW
    mock_uow.password_reset_tokens.get_by_token_hash.return_value = reset_token

    result = await use_case.execute(TOKEN, "newp@ss12")

    assert result.is_err()
    assert result.error.code == "TOKEN_EXPIRED"
    mock_uow.users.update.assert_not_called()


@pytest.mark.asyncio
async def test_expired_wins_over_used(use_case, mock_uow, reset_token):
    reset_token.expires_at = NOW - timedelta(seconds=1)
    reset_token.used = True
    mock_uow.password_reset_tokens.get_by_token_hash.return_value = reset_token

    result = await use_case.execute(TOKEN, "newp@ss12")

    assert result.error.code == "TOKEN_EXPIRED"


@pytest.mark.asyncio
async def test_used_token(use_case, mock_uow, reset_token):
    reset_token.used = True
    mock_uow.password_reset_tokens.get_by_token_hash.return_value = reset_token

    result = await use_case.execute(TOKEN, "newp@ss12")

    assert result.is_err()
    assert result.error.code == "TOKEN_USED"
    assert result.error.message == "Token has already been used"
    mock_uow.users.update.assert_not_called()


@pytest.mark.asyncio
async def test_lost_race_rolls_back_password_change(use_case, mock_uow, reset_token):
    mock_uow.password_reset_tokens.get_by_token_hash.return_value = reset_token
    mock_uow.password_reset_tokens.mark_used.side_effect = NotFoundError("already used")

    result = await use_case.execute(TOKEN, "newp@ss12")

    assert result.is_err()
    assert result.error.code == "TOKEN_USED"
    mock_uow.rollback.assert_called_once()
    mock_uow.commit.assert_not_called()
