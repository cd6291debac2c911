from fastapi import status

from vortex_auth.domain.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


UNAUTHORIZED_HEADER_MISSING = Error("UNAUTHORIZED", "Authorization header required")
UNAUTHORIZED_HEADER_FORMAT = Error("UNAUTHORIZED", "Invalid authorization header format")
UNAUTHORIZED_TOKEN = Error("UNAUTHORIZED", "Invalid token")
FORBIDDEN = Error("FORBIDDEN", "Access denied")

# Domain error code -> HTTP status; anything else is a server error
ERROR_STATUS = {
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "TOKEN_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "SESSION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "USER_EXISTS": status.HTTP_409_CONFLICT,
    "EMAIL_EXISTS": status.HTTP_409_CONFLICT,
    "TOKEN_EXPIRED": status.HTTP_400_BAD_REQUEST,
    "TOKEN_USED": status.HTTP_400_BAD_REQUEST,
}


def raise_for_error(error: Error):
    status_code = ERROR_STATUS.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
