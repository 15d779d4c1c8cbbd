"""
App package - Application configuration and core utilities.
Contains settings and exception types shared by every layer.
"""

from app.config import settings
from app.exceptions import (
    ServiceError,
    ServiceValidationError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
    LLMServiceError,
    LLMOutputError,
    StorageServiceError,
)

__all__ = [
    "settings",
    "ServiceError",
    "ServiceValidationError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "LLMServiceError",
    "LLMOutputError",
    "StorageServiceError",
]
