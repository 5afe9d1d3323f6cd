"""
Error response models.

Standardized error responses for the API.
"""

from pydantic import BaseModel
from typing import Any, Optional


class ErrorResponse(BaseModel):
    """Standard error response format."""

    success: bool = False
    error: str
    details: Optional[Any] = None
    code: Optional[str] = None


class ValidationErrorResponse(BaseModel):
    """Validation error response format."""

    success: bool = False
    error: str = "Invalid input data"
    code: str = "VALIDATION_ERROR"
    details: list[dict]
