# Pydantic schemas package
from keepnotes.backend.schemas.base import (
    ApiResponse,
    CamelModel,
    ErrorResponse,
    FieldError,
)

__all__ = [
    "ApiResponse",
    "CamelModel",
    "ErrorResponse",
    "FieldError",
]
