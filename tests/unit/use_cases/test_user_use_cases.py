import pytest

from vortex_auth.app.repositories.errors import BackendError, ConflictError, NotFoundError
from vortex_auth.app.repositories.user_repository import UserUpdate
from vortex_auth.app.use_cases.users import DeleteUserUseCase, GetUserUseCase, UpdateUserUseCase


@pytest.mark.asyncio
async def test_get_user(mock_uow, make_user):
    user = make_user(age=30)
    mock_uow.users.get_by_id.return_value = user

    result = await GetUserUseCase(mock_uow).execute(user.id)

    assert result.is_ok()
    assert result.value.id == user.id
    assert result.value.age == 30
    assert not hasattr(result.value, "password_hash")


@pytest.mark.asyncio
async def test_get_missing_user(mock_uow):
    result = await GetUserUseCase(mock_uow).execute("missing")

    assert result.is_err()
    assert result.error.code == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_update_returns_refetched_user(mock_uow, make_user):
    updated = make_user(username="alice2")
    mock_uow.users.get_by_id.return_value = updated
    updates = UserUpdate(username="alice2")

    result = await UpdateUserUseCase(mock_uow).execute(updated.id, updates)

    assert result.is_ok()
    assert result.value.username == "alice2"
    mock_uow.users.update.assert_called_once_with(updated.id, updates)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_update_missing_user(mock_uow):
    mock_uow.users.update.side_effect = NotFoundError("gone")

    result = await UpdateUserUseCase(mock_uow).execute("missing", UserUpdate(age=3))

    assert result.error.code == "USER_NOT_FOUND"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("field, expected_code", [("username", "USER_EXISTS"), ("email", "EMAIL_EXISTS")])
async def test_update_conflict(mock_uow, field, expected_code):
    mock_uow.users.update.side_effect = ConflictError(field)

    result = await UpdateUserUseCase(mock_uow).execute("user-1", UserUpdate(**{field: "taken@x.io"}))

    assert result.error.code == expected_code


@pytest.mark.asyncio
async def test_update_backend_failure(mock_uow):
    mock_uow.users.update.side_effect = BackendError("locked")

    result = await UpdateUserUseCase(mock_uow).execute("user-1", UserUpdate(age=3))

    assert result.error.code == "BACKEND_ERROR"


def test_update_record_tracks_explicit_none():
    assert UserUpdate(email=None).changes() == {"email": None}
    assert UserUpdate(age=4).changes() == {"age": 4}
    assert UserUpdate().changes() == {}


@pytest.mark.asyncio
async def test_delete_user(mock_uow, make_user):
    user = make_user()
    mock_uow.users.get_by_id.return_value = user

    result = await DeleteUserUseCase(mock_uow).execute(user.id)

    assert result.is_ok()
    mock_uow.users.delete.assert_called_once_with(user.id)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_delete_missing_user(mock_uow):
    result = await DeleteUserUseCase(mock_uow).execute("missing")

    assert result.error.code == "USER_NOT_FOUND"
    mock_uow.users.delete.assert_not_called()
