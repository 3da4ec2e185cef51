"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    TEST_DATA_RESET_DISABLED = "TEST_DATA_RESET_DISABLED"

    # Not found errors (404)
    TASK_NOT_FOUND = "TASK_NOT_FOUND"
    SUB_AREA_NOT_FOUND = "SUB_AREA_NOT_FOUND"
    BUSINESS_NOT_FOUND = "BUSINESS_NOT_FOUND"

    # Validation errors (400/422)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    CONFIRMATION_REQUIRED = "CONFIRMATION_REQUIRED"
    SUB_AREA_PROTECTED = "SUB_AREA_PROTECTED"

    # Conflict errors (409)
    FILE_ALREADY_MAPPED = "FILE_ALREADY_MAPPED"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500/502)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    REMOTE_FAILURE = "REMOTE_FAILURE"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed or no active session."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class TodoNotFoundError(AppException):
    """Todo not found."""

    def __init__(self, todo_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.TASK_NOT_FOUND,
            message=f"Task not found: {todo_id}",
            status_code=404,
            details={"todo_id": todo_id},
        )


class SubAreaNotFoundError(AppException):
    """Sub-area not found."""

    def __init__(self, sub_area_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.SUB_AREA_NOT_FOUND,
            message=f"Sub-area not found: {sub_area_id}",
            status_code=404,
            details={"sub_area_id": sub_area_id},
        )


class BusinessNotFoundError(AppException):
    """Business not found or owned by someone else."""

    def __init__(self, business_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.BUSINESS_NOT_FOUND,
            message=f"Business not found: {business_id}",
            status_code=404,
            details={"business_id": business_id},
        )


class ValidationFailedError(AppException):
    """Malformed input, e.g. a generated task missing required fields."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=422,
            details=details,
        )


class RemoteFailureError(AppException):
    """A collaborator (AI function, remote API) failed or was unreachable."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.REMOTE_FAILURE,
            message=message,
            status_code=502,
            details=details,
        )


class InvalidStatusTransitionError(AppException):
    """Status change rejected because strict transitions are enabled."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_STATUS_TRANSITION,
            message=f"Cannot move task from '{current}' to '{requested}'",
            status_code=400,
            details={"current": current, "requested": requested},
        )


class TestDataResetDisabledError(AppException):
    """Destructive reset operations are switched off."""

    __test__ = False  # not a pytest test class

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.TEST_DATA_RESET_DISABLED,
            message="Test data reset is disabled in this environment",
            status_code=403,
        )


class ConfirmationRequiredError(AppException):
    """A destructive operation was called without explicit confirmation."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            error_code=ErrorCode.CONFIRMATION_REQUIRED,
            message=f"Explicit confirmation required for {operation}",
            status_code=400,
            details={"operation": operation},
        )


class SubAreaProtectedError(AppException):
    """Default sub-areas cannot be deleted."""

    def __init__(self, sub_area_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.SUB_AREA_PROTECTED,
            message="Only user-created sub-areas can be deleted",
            status_code=400,
            details={"sub_area_id": sub_area_id},
        )


class FileAlreadyMappedError(AppException):
    """File is already mapped to a different task."""

    def __init__(self, file_id: str, task_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.FILE_ALREADY_MAPPED,
            message=f"File {file_id} is already mapped to another task",
            status_code=409,
            details={"file_id": file_id, "task_id": task_id},
        )
