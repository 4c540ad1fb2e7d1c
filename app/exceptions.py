# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error carries a human-readable message and a machine-readable code.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class SkillSwapException(Exception):
    """
    Base exception for the SkillSwap API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "SKILLSWAP_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Request Exceptions (4xx)
# =============================================================================

class InvalidRequestError(SkillSwapException):
    """Raised when query parameters or body fields fail validation."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="INVALID_REQUEST",
            status_code=400,
            details=details,
        )


class AuthenticationFailedError(SkillSwapException):
    """Raised when the hosted auth service rejects credentials."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(
            message=message,
            code="AUTHENTICATION_FAILED",
            status_code=401,
        )


class PermissionDeniedError(SkillSwapException):
    """Raised when the caller doesn't own the resource they're changing."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message="Permission denied",
            code="PERMISSION_DENIED",
            status_code=403,
            suggestion=f"Only the owner of this {resource} can change it",
            details={"resource": resource, "id": resource_id},
        )


class ResourceNotFoundError(SkillSwapException):
    """Raised when a row doesn't exist (or RLS hides it)."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource.replace('_', ' ').capitalize()} not found",
            code=f"{resource.upper()}_NOT_FOUND",
            status_code=404,
            details={"id": resource_id},
        )


class ConflictError(SkillSwapException):
    """Raised when a write conflicts with existing data or the current state."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="CONFLICT",
            status_code=409,
            details=details,
        )


class InvalidFileTypeError(SkillSwapException):
    """Raised when an uploaded profile image has a disallowed type."""

    def __init__(self, content_type: str | None, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {content_type}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"content_type": content_type, "allowed_types": allowed},
        )


class FileTooLargeError(SkillSwapException):
    """Raised when an uploaded profile image exceeds the size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb},
        )


# =============================================================================
# Upstream Exceptions (5xx)
# =============================================================================

class UpstreamError(SkillSwapException):
    """
    Raised when the hosted data client fails.

    The message returned to the caller is generic; the underlying
    error is only logged.
    """

    def __init__(self, message: str, code: str = "UPSTREAM_ERROR"):
        super().__init__(
            message=message,
            code=code,
            status_code=500,
        )


class StorageUploadError(SkillSwapException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message="Failed to upload file to storage",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def skillswap_exception_handler(
    request: Request,
    exc: SkillSwapException
) -> JSONResponse:
    """
    Convert SkillSwapException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors.

    Malformed query parameters and bodies are client errors (400),
    reported in the same shape as every other error.
    """
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": jsonable_encoder(exc.errors()),
        }
    )
