"""
Error taxonomy for the annotation service.

Services raise these exceptions; FastAPI's exception handler turns them into
a JSON body of the form:

    {"error": "用户ID已存在", "code": "CONFLICT_001"}

The message is the user-facing (localized) text; the code is stable and
meant for clients that branch on the failure kind.
"""
from enum import Enum
from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    """Standardized error codes for the entire application."""

    # Validation errors (VAL_xxx)
    VAL_MISSING_FIELD = "VAL_001"
    VAL_ROLE_MISMATCH = "VAL_002"
    VAL_INVALID_ROLE = "VAL_003"
    VAL_NO_FILES = "VAL_004"
    VAL_TOO_MANY_FILES = "VAL_005"
    VAL_MALFORMED_BODY = "VAL_006"

    # Conflict errors (CONFLICT_xxx)
    CONFLICT_USER_EXISTS = "CONFLICT_001"
    CONFLICT_ADMIN_EXISTS = "CONFLICT_002"
    CONFLICT_COMMENT_EXISTS = "CONFLICT_003"

    # Auth errors (AUTH_xxx)
    AUTH_INVALID_CREDENTIALS = "AUTH_001"

    # Upload errors (UPLOAD_xxx)
    UPLOAD_FILE_TOO_LARGE = "UPLOAD_001"
    UPLOAD_INVALID_TYPE = "UPLOAD_002"

    # Storage errors (STORAGE_xxx)
    STORAGE_WRITE_FAILED = "STORAGE_001"


class ServiceError(HTTPException):
    """
    Base class for business logic errors.

    Subclasses fix the HTTP status so services only pick a code and a message.
    """

    http_status: int = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=self.http_status, detail=message)
        self.code = code
        self.message = message
        self.details = details or {}


class ValidationError(ServiceError):
    """Missing or empty fields, unknown roles, role mismatch on login."""


class ConflictError(ServiceError):
    """Duplicate user id, a second admin, or a repeated comment."""


class AuthError(ServiceError):
    """No user matches the supplied credentials."""

    http_status = status.HTTP_401_UNAUTHORIZED


class PayloadTooLarge(ServiceError):
    """An uploaded file exceeds the size limit.

    Reported as 400 rather than 413 to match what clients already handle.
    """


class UnsupportedMediaType(ServiceError):
    """An uploaded file is not an image."""


class StorageError(ServiceError):
    """Writing an uploaded file to disk failed."""

    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
