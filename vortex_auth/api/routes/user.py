from fastapi import APIRouter, Depends, status

from vortex_auth.api.error import FORBIDDEN, ClientError, raise_for_error
from vortex_auth.api.responses import ApiResponse
from vortex_auth.app.services.unit_of_work import UnitOfWork
from vortex_auth.app.use_cases.auth import MessageResponse, UserInfo
from vortex_auth.app.use_cases.users import DeleteUserUseCase, GetUserUseCase, UpdateUserUseCase
from vortex_auth.depends import CurrentUser, get_current_user, get_unit_of_work
from .schemas import UserUpdateRequest

router = APIRouter(prefix="/api/users", tags=["User"])


def ensure_owner(user_id: str, current_user: CurrentUser) -> None:
    """Users may only act on their own record"""
    if user_id != current_user.user_id:
        raise ClientError(FORBIDDEN, status_code=status.HTTP_403_FORBIDDEN)


@router.get(
    "/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[UserInfo],
    response_model_exclude_none=True,
)
async def get_user(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Get a user by id

    Raises:
        - 403 Forbidden: Not the caller's own id
        - 404 Not Found: User does not exist
    """
    ensure_owner(user_id, current_user)

    result = await GetUserUseCase(uow).execute(user_id)

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse(data=result.value)


@router.put(
    "/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[UserInfo],
    response_model_exclude_none=True,
)
async def update_user(
    user_id: str,
    request: UserUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    ensure_owner(user_id, current_user)

    result = await UpdateUserUseCase(uow).execute(user_id, request.to_update())

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse(data=result.value)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[MessageResponse],
    response_model_exclude_none=True,
)
async def delete_user(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    ensure_owner(user_id, current_user)

    result = await DeleteUserUseCase(uow).execute(user_id)

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse(data=result.value)
