import pytest

from vortex_auth.app.repositories.errors import BackendError
from vortex_auth.app.use_cases.auth import LogoutUseCase
from vortex_auth.app.use_cases.maintenance import CleanupExpiredTokensUseCase


@pytest.mark.asyncio
async def test_logout_deletes_own_session(mock_uow, make_session):
    session = make_session("user-1")
    mock_uow.sessions.get_by_id.return_value = session

    result = await LogoutUseCase(mock_uow).execute("user-1", session.id)

    assert result.is_ok()
    mock_uow.sessions.delete.assert_called_once_with(session.id)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_logout_refuses_foreign_session(mock_uow, make_session):
    mock_uow.sessions.get_by_id.return_value = make_session("user-2")

    result = await LogoutUseCase(mock_uow).execute("user-1", "session-of-user-2")

    assert result.is_err()
    assert result.error.code == "SESSION_NOT_FOUND"
    mock_uow.sessions.delete.assert_not_called()


@pytest.mark.asyncio
async def test_logout_unknown_session(mock_uow):
    result = await LogoutUseCase(mock_uow).execute("user-1", "nope")

    assert result.error.code == "SESSION_NOT_FOUND"


@pytest.mark.asyncio
async def test_cleanup_reports_counts(mock_uow):
    mock_uow.password_reset_tokens.delete_expired_or_used.return_value = 3
    mock_uow.sessions.delete_expired.return_value = 2

    result = await CleanupExpiredTokensUseCase(mock_uow).execute()

    assert result.is_ok()
    assert result.value.password_reset_tokens_deleted == 3
    assert result.value.sessions_deleted == 2
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_cleanup_failure(mock_uow):
    mock_uow.sessions.delete_expired.side_effect = BackendError("locked")

    result = await CleanupExpiredTokensUseCase(mock_uow).execute()

    assert result.error.code == "BACKEND_ERROR"
    mock_uow.commit.assert_not_called()
