from .delete_user_use_case import DeleteUserUseCase
from .get_user_use_case import GetUserUseCase
from .update_user_use_case import UpdateUserUseCase

__all__ = [
    "DeleteUserUseCase",
    "GetUserUseCase",
    "UpdateUserUseCase",
]
