"""
Standardized API response models.
Documents the error envelope and health payload in the OpenAPI schema.
"""

from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime, timezone


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ErrorDetail(BaseModel):
    """Detailed error information"""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    details: Optional[dict] = Field(None, description="Additional error details")


class ErrorResponse(BaseModel):
    """Standardized error response"""

    success: bool = Field(False, description="Always false for errors")
    error: ErrorDetail = Field(..., description="Error details")
    timestamp: datetime = Field(default_factory=_now, description="Error timestamp")


class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(..., description="Service status")
    service: str = Field(..., description="Service name")
    version: Optional[str] = Field(None, description="Service version")
    timestamp: datetime = Field(default_factory=_now, description="Check timestamp")


class DeletedResponse(BaseModel):
    status: str = "ok"
    deleted: str


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    401: {"model": ErrorResponse, "description": "Missing or unknown identity"},
    403: {"model": ErrorResponse, "description": "Wrong role or not linked"},
    404: {"model": ErrorResponse, "description": "Not found"},
}
