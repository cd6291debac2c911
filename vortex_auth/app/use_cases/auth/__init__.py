from .dtos import AuthResponse, CleanupResponse, MessageResponse, RegisterCommand, UserInfo
from .login_use_case import LoginUseCase
from .logout_use_case import LogoutUseCase
from .register_use_case import RegisterUseCase
from .request_password_reset_use_case import (
    RESET_REQUESTED_MESSAGE,
    RequestPasswordResetUseCase,
    hash_reset_token,
)
from .reset_password_use_case import ResetPasswordUseCase

__all__ = [
    "AuthResponse",
    "CleanupResponse",
    "MessageResponse",
    "RegisterCommand",
    "UserInfo",
    "LoginUseCase",
    "LogoutUseCase",
    "RegisterUseCase",
    "RequestPasswordResetUseCase",
    "ResetPasswordUseCase",
    "RESET_REQUESTED_MESSAGE",
    "hash_reset_token",
]
