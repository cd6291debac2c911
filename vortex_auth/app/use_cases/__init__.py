"""
Use Cases

Organized into domain folders:
- auth/: Registration, login, password reset, logout
- users/: Profile read, update and deletion
- maintenance/: Periodic cleanup
"""

from .auth import (
    LoginUseCase,
    LogoutUseCase,
    RegisterCommand,
    RegisterUseCase,
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
)
from .maintenance import CleanupExpiredTokensUseCase
from .users import DeleteUserUseCase, GetUserUseCase, UpdateUserUseCase

__all__ = [
    # Auth
    "LoginUseCase",
    "LogoutUseCase",
    "RegisterCommand",
    "RegisterUseCase",
    "RequestPasswordResetUseCase",
    "ResetPasswordUseCase",
    # Users
    "DeleteUserUseCase",
    "GetUserUseCase",
    "UpdateUserUseCase",
    # Maintenance
    "CleanupExpiredTokensUseCase",
]
