from .cleanup_expired_tokens_use_case import CleanupExpiredTokensUseCase

__all__ = ["CleanupExpiredTokensUseCase"]
