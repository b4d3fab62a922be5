"""
Shared schema primitives used across the API.
"""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """A single field-level validation error."""
    field: str
    message: str
    type: str


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all 4xx/5xx responses."""
    model_config = ConfigDict(from_attributes=True)

    code: str
    message: str
    details: Optional[dict[str, Any]] = None


ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Raid, award or ban not found in this guild."},
    409: {"model": ErrorResponse, "description": "Operation not allowed in the current state."},
    422: {"model": ErrorResponse, "description": "Invalid input."},
}
