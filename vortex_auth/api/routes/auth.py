from fastapi import APIRouter, BackgroundTasks, Depends, status

from vortex_auth.api.error import raise_for_error
from vortex_auth.api.responses import ApiResponse
from vortex_auth.api.utils.jwt import JWTManager
from vortex_auth.app.services.email_dispatcher import EmailDispatcher
from vortex_auth.app.services.password_hasher import PasswordHasher
from vortex_auth.app.services.unit_of_work import UnitOfWork
from vortex_auth.app.use_cases.auth import (
    AuthResponse,
    LoginUseCase,
    LogoutUseCase,
    MessageResponse,
    RegisterCommand,
    RegisterUseCase,
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
    UserInfo,
)
from vortex_auth.app.use_cases.users import DeleteUserUseCase, GetUserUseCase, UpdateUserUseCase
from vortex_auth.depends import (
    CurrentUser,
    get_current_user,
    get_email_dispatcher,
    get_jwt_manager,
    get_password_hasher,
    get_reset_ttl_hours,
    get_unit_of_work,
)
from .schemas import (
    LoginRequest,
    LogoutRequest,
    PasswordResetConfirmRequest,
    PasswordResetRequest,
    RegisterRequest,
    UserUpdateRequest,
)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post(
    "/register",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[AuthResponse],
    response_model_exclude_none=True,
)
async def register(
    request: RegisterRequest,
    background: BackgroundTasks,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
    jwt_manager: JWTManager = Depends(get_jwt_manager),
    mailer: EmailDispatcher = Depends(get_email_dispatcher),
):
    """
    Register a new account

    Command/Response Flow:
    1. RegisterRequest validates HTTP input
    2. Map to RegisterCommand (business intent)
    3. Execute RegisterUseCase
    4. Wrap AuthResponse in the response envelope

    Raises:
        - 400 Bad Request: Validation failed
        - 409 Conflict: Username or email already exists
        - 500 Internal Server Error: Server error
    """
    command = RegisterCommand(
        username=request.username,
        email=str(request.email) if request.email else None,
        password=request.password,
    )

    use_case = RegisterUseCase(uow, hasher, jwt_manager, mailer, background)
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse(data=result.value)


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[AuthResponse],
    response_model_exclude_none=True,
)
async def login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
    jwt_manager: JWTManager = Depends(get_jwt_manager),
):
    """
    Authenticate and receive a bearer token

    Raises:
        - 401 Unauthorized: Invalid credentials
    """
    use_case = LoginUseCase(uow, hasher, jwt_manager)
    result = await use_case.execute(request.username, request.password)

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse(data=result.value)


@router.post(
    "/password-reset",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[MessageResponse],
    response_model_exclude_none=True,
)
async def request_password_reset(
    request: PasswordResetRequest,
    background: BackgroundTasks,
    uow: UnitOfWork = Depends(get_unit_of_work),
    mailer: EmailDispatcher = Depends(get_email_dispatcher),
    reset_ttl_hours: int = Depends(get_reset_ttl_hours),
):
    """
    Request a password reset link

    Answers the same way whether or not the email is registered.
    """
    use_case = RequestPasswordResetUseCase(uow, mailer, background, reset_ttl_hours)
    result = await use_case.execute(str(request.email))

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse(data=result.value)


@router.post(
    "/password-reset/{token}",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[MessageResponse],
    response_model_exclude_none=True,
)
async def reset_password(
    token: str,
    request: PasswordResetConfirmRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    Set a new password with a reset token

    Raises:
        - 400 Bad Request: Token expired or already used, or validation failed
        - 404 Not Found: Unknown token
    """
    use_case = ResetPasswordUseCase(uow, hasher)
    result = await use_case.execute(token, request.password)

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse(data=result.value)


@router.post(
    "/logout",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[MessageResponse],
    response_model_exclude_none=True,
)
async def logout(
    request: LogoutRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Drop the audit session returned at login; the token itself stays valid until expiry"""
    use_case = LogoutUseCase(uow)
    result = await use_case.execute(current_user.user_id, request.session_id)

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse(data=result.value)


@router.get(
    "/profile",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[UserInfo],
    response_model_exclude_none=True,
)
async def get_profile(
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Return the caller's user projection"""
    result = await GetUserUseCase(uow).execute(current_user.user_id)

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse(data=result.value)


@router.put(
    "/profile",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[UserInfo],
    response_model_exclude_none=True,
)
async def update_profile(
    request: UserUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update username, email or age

    Raises:
        - 404 Not Found: Account no longer exists
        - 409 Conflict: Username or email already taken
    """
    result = await UpdateUserUseCase(uow).execute(current_user.user_id, request.to_update())

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse(data=result.value)


@router.delete(
    "/account",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[MessageResponse],
    response_model_exclude_none=True,
)
async def delete_account(
    current_user: CurrentUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Delete the caller's account with its sessions and reset tokens"""
    result = await DeleteUserUseCase(uow).execute(current_user.user_id)

    if result.is_err():
        raise_for_error(result.error)

    return ApiResponse(data=MessageResponse(message="Account deleted successfully"))
