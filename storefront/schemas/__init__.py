"""Pydantic schemas for request/response validation."""

from storefront.schemas.common import (
    ErrorResponse,
    HealthResponse,
    PaginatedResponse,
    SuccessResponse,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "PaginatedResponse",
    "SuccessResponse",
]
