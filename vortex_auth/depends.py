from dataclasses import dataclass
from typing import AsyncIterator, Optional

from fastapi import Depends, Request, status

from vortex_auth.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from vortex_auth.api.error import (
    UNAUTHORIZED_HEADER_FORMAT,
    UNAUTHORIZED_HEADER_MISSING,
    UNAUTHORIZED_TOKEN,
    ClientError,
)
from vortex_auth.api.utils.jwt import JWTManager, TokenClaims
from vortex_auth.app.services.email_dispatcher import EmailDispatcher
from vortex_auth.app.services.password_hasher import PasswordHasher
from vortex_auth.app.services.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class CurrentUser:
    user_id: str
    username: str


async def get_unit_of_work(request: Request) -> AsyncIterator[UnitOfWork]:
    database = request.app.state.database
    async with database.session_factory() as session:
        yield SqlAlchemyUnitOfWork(session, database)


def get_jwt_manager(request: Request) -> JWTManager:
    return request.app.state.jwt_manager


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_email_dispatcher(request: Request) -> EmailDispatcher:
    return request.app.state.email_dispatcher


def get_reset_ttl_hours(request: Request) -> int:
    return request.app.state.config.PASSWORD_RESET_TOKEN_EXPIRY


def _unauthorized(error) -> ClientError:
    return ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)


def _bearer_claims(request: Request, jwt_manager: JWTManager) -> TokenClaims:
    header = request.headers.get("Authorization")
    if not header:
        raise _unauthorized(UNAUTHORIZED_HEADER_MISSING)

    parts = header.split()
    if len(parts) != 2 or parts[0] != "Bearer":
        raise _unauthorized(UNAUTHORIZED_HEADER_FORMAT)

    claims = jwt_manager.verify_jwt(parts[1])
    if claims is None:
        raise _unauthorized(UNAUTHORIZED_TOKEN)

    return claims


async def get_current_user(
    request: Request, jwt_manager: JWTManager = Depends(get_jwt_manager)
) -> CurrentUser:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Returns:
        CurrentUser with the user_id and username claims; both are also
        attached to request.state

    Raises:
        ClientError: 401 if the header is missing, malformed or the token is invalid
    """
    claims = _bearer_claims(request, jwt_manager)
    request.state.user_id = claims.user_id
    request.state.username = claims.username
    return CurrentUser(user_id=claims.user_id, username=claims.username)


async def get_optional_user(
    request: Request, jwt_manager: JWTManager = Depends(get_jwt_manager)
) -> Optional[CurrentUser]:
    """Like get_current_user, but any failure yields None instead of a 401"""
    try:
        return await get_current_user(request, jwt_manager)
    except ClientError:
        return None
