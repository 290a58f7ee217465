"""
Error envelope shared by the edge functions.

Every edge function answers failures with the same JSON envelope:

    {"success": false, "error": "<message>", "error_code": "...", "request_id": "..."}

``error`` is the human readable message the browser client displays; the
remaining fields are for tracing. Handlers raise ``APIException`` (or one of
its subclasses) and the application-level exception handler renders it.
"""

import uuid
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Configuration errors (missing credentials)
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Resource errors
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Upstream rejections that are passed through to the caller
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    PAYMENT_REQUIRED = "PAYMENT_REQUIRED"

    # Service errors
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    SERVICE_UPSTREAM_ERROR = "SERVICE_UPSTREAM_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"
    TRANSCRIPTION_FAILED = "TRANSCRIPTION_FAILED"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class APIError(BaseModel):
    """One failed edge-function call.

    ``message`` is what the browser shows the user; the code, request id and
    service name exist for log correlation and never reach the UI.
    """

    error_code: str = Field(..., examples=["CONFIGURATION_ERROR", "RATE_LIMIT_EXCEEDED"])
    message: str = Field(..., examples=["Rate limits exceeded, please try again later."])
    details: dict[str, Any] | None = None
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")
    service: str = "edge-functions"

    def to_payload(self) -> dict[str, Any]:
        """Render the wire envelope expected by the browser client."""
        payload: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "error_code": self.error_code,
            "request_id": self.request_id,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class APIException(Exception):
    """Exception wrapper for APIError responses.

    Example:
        >>> raise APIException(
        ...     error_code=ErrorCode.CONFIGURATION_ERROR,
        ...     message="AI_GATEWAY_API_KEY is not configured",
        ... )
    """

    def __init__(
        self,
        error_code: str,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
        service: str = "edge-functions",
    ):
        self.error = APIError(
            error_code=error_code.value if isinstance(error_code, ErrorCode) else error_code,
            message=message,
            details=details,
            service=service,
        )
        self.status_code = status_code or get_status_code(self.error.error_code)
        super().__init__(message)

    def to_response(self) -> dict[str, Any]:
        """Body for the JSONResponse rendered by the app's handler."""
        return self.error.to_payload()


class ConfigurationError(APIException):
    """A required credential or setting is absent."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.CONFIGURATION_ERROR, message)


class UpstreamError(APIException):
    """A third-party API answered with a non-success status.

    429 and 402 keep their status so the client can tell the user to slow
    down or top up; every other upstream status collapses to 500.
    """

    def __init__(self, message: str, upstream_status: int | None = None, body: str = ""):
        if upstream_status == 429:
            code = ErrorCode.RATE_LIMIT_EXCEEDED
        elif upstream_status == 402:
            code = ErrorCode.PAYMENT_REQUIRED
        else:
            code = ErrorCode.SERVICE_UPSTREAM_ERROR
        self.upstream_status = upstream_status
        self.body = body
        super().__init__(code, message, details={"upstream_status": upstream_status} if upstream_status else None)


class StorageError(APIException):
    """Storage download/upload or database write failed."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.STORAGE_ERROR, message)


# error_code -> HTTP status
ERROR_STATUS_CODES: dict[str, int] = {
    ErrorCode.VALIDATION_ERROR.value: 400,
    ErrorCode.CONFIGURATION_ERROR.value: 500,
    ErrorCode.RESOURCE_NOT_FOUND.value: 404,
    ErrorCode.RATE_LIMIT_EXCEEDED.value: 429,
    ErrorCode.PAYMENT_REQUIRED.value: 402,
    ErrorCode.SERVICE_UNAVAILABLE.value: 503,
    ErrorCode.SERVICE_UPSTREAM_ERROR.value: 500,
    ErrorCode.STORAGE_ERROR.value: 500,
    ErrorCode.TRANSCRIPTION_FAILED.value: 500,
    ErrorCode.INTERNAL_ERROR.value: 500,
}


def get_status_code(error_code: str) -> int:
    """HTTP status for an error code; unknown codes are 500."""
    return ERROR_STATUS_CODES.get(error_code, 500)


def internal_error(exc: Exception, service: str = "edge-functions") -> APIError:
    """Wrap an unexpected exception, keeping its message for the client."""
    return APIError(
        error_code=ErrorCode.INTERNAL_ERROR.value,
        message=str(exc) or "Unknown error",
        service=service,
    )
