"""
Response envelope.

Every body is {"success", "data"?, "error"?, "message"?}; error bodies also
carry the domain error code. Validation failures list one entry per field.
"""

from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel
from starlette.responses import JSONResponse

T = TypeVar("T")

VALIDATION_FAILED = "Validation failed"
INVALID_BODY = "Invalid request body"
INTERNAL_ERROR = "Internal server error"


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None


class FieldError(BaseModel):
    field: str
    message: str


def error_body(message: str, code: Optional[str] = None) -> dict:
    body = {"success": False, "error": message}
    if code:
        body["code"] = code
    return body


def internal_error_response() -> JSONResponse:
    """The 500 sent for any unhandled error; engine detail never leaves the process"""
    return JSONResponse(status_code=500, content=error_body(INTERNAL_ERROR, "INTERNAL_ERROR"))


def _field_name(loc) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path", "header")]
    return ".".join(parts) or "body"


def _field_message(field: str, error: dict) -> str:
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}

    if kind == "missing":
        return f"{field} is required"
    if kind == "string_too_short":
        if ctx.get("min_length") == 1:
            return f"{field} is required"
        return f"{field} must be at least {ctx.get('min_length')} characters"
    if kind == "string_too_long":
        return f"{field} must be at most {ctx.get('max_length')} characters"
    if kind == "greater_than_equal":
        return f"{field} must be at least {ctx.get('ge')}"
    if kind == "less_than_equal":
        return f"{field} must be at most {ctx.get('le')}"
    if kind == "value_error" and field == "email":
        return f"{field} must be a valid email address"
    return f"{field} is invalid"


def validation_details(errors: List[Any]) -> List[FieldError]:
    details = []
    for error in errors:
        field = _field_name(error.get("loc", ()))
        details.append(FieldError(field=field, message=_field_message(field, error)))
    return details


def is_malformed_body(errors: List[Any]) -> bool:
    return any(error.get("type") == "json_invalid" for error in errors)
