"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"

    # Not found errors (404)
    TASK_NOT_FOUND = "TASK_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Conflict errors (409)
    EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    CYCLE_DETECTED = "CYCLE_DETECTED"
    TREE_TOO_DEEP = "TREE_TOO_DEEP"


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
    """Authentication failed."""

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


class ValidationError(AppException):
    """Input rejected by a domain rule."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details=[{"field": field, "message": message}] if field else None,
        )


class TaskNotFoundError(AppException):
    """Task not found."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.TASK_NOT_FOUND,
            message=f"Task not found: {task_id}",
            status_code=404,
            details={"task_id": task_id},
        )


class UserNotFoundError(AppException):
    """User not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.USER_NOT_FOUND,
            message="User not found",
            status_code=404,
            details={"user_id": user_id},
        )


class EmailAlreadyRegisteredError(AppException):
    """A user with this email already exists."""

    def __init__(self, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.EMAIL_ALREADY_REGISTERED,
            message="Email already registered",
            status_code=409,
            details={"email": email},
        )


class CycleDetectedError(AppException):
    """Stored parent references form a cycle."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CYCLE_DETECTED,
            message="Task hierarchy contains a cycle",
            status_code=500,
            details={"task_id": task_id},
        )


class TaskTreeTooDeepError(AppException):
    """Task hierarchy is nested deeper than the configured limit."""

    def __init__(self, task_id: str, max_depth: int) -> None:
        super().__init__(
            error_code=ErrorCode.TREE_TOO_DEEP,
            message=f"Task hierarchy exceeds maximum depth of {max_depth}",
            status_code=500,
            details={"task_id": task_id, "max_depth": max_depth},
        )


class PersistenceError(AppException):
    """The database rejected or failed an operation."""

    def __init__(self, message: str = "A database error occurred") -> None:
        super().__init__(
            error_code=ErrorCode.DATABASE_ERROR,
            message=message,
            status_code=500,
        )
