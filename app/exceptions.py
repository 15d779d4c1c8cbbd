from typing import Any, Mapping, Optional


class ServiceError(Exception):
    """Base class for errors raised by services and adapters.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, upstream payload)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "Service error"
    default_code = "SERVICE_ERROR"

    def __init__(self, message: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(ServiceError):
    """Raised when input data is invalid or a precondition for a service call is not met."""

    http_status = 400
    default_message = "Invalid input"
    default_code = "SERVICE_VALIDATION_ERROR"


class UnauthorizedError(ServiceError):
    """Raised when the caller identity is missing or unknown."""

    http_status = 401
    default_message = "Unauthorized"
    default_code = "UNAUTHORIZED"


class ForbiddenError(ServiceError):
    """Raised when the caller is known but may not touch the resource (wrong role, not linked, not owner)."""

    http_status = 403
    default_message = "Forbidden"
    default_code = "FORBIDDEN"


class NotFoundError(ServiceError):
    """Raised when a requested resource was not found."""

    http_status = 404
    default_message = "Not found"
    default_code = "NOT_FOUND"


class ConflictError(ServiceError):
    """Raised when a resource conflict occurs (e.g., duplicate entry)."""

    http_status = 409
    default_message = "Conflict"
    default_code = "CONFLICT"


class LLMServiceError(ServiceError):
    """Raised when the chat completion API is unreachable, misconfigured or returns no content."""

    http_status = 500
    default_message = "LLM request failed"
    default_code = "LLM_ERROR"


class LLMOutputError(ServiceError):
    """Raised when the model answered but its output could not be normalized."""

    http_status = 500
    default_message = "Invalid JSON from model"
    default_code = "LLM_OUTPUT_ERROR"


class StorageServiceError(ServiceError):
    """Raised when the hosted storage API fails."""

    http_status = 500
    default_message = "Storage request failed"
    default_code = "STORAGE_ERROR"


class OCRServiceError(ServiceError):
    """Raised when a lab report image cannot be fetched or recognized."""

    http_status = 500
    default_message = "Text recognition failed"
    default_code = "OCR_ERROR"
