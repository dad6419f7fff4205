"""
Pydantic models for API responses.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MessageResponse(BaseModel):
    """Response model for successful operations."""
    message: str = Field(..., description="Outcome of the operation")


class ErrorResponse(BaseModel):
    """Response model for failed operations."""
    error: str = Field(..., description="Human-readable error message")
    operation: Optional[str] = Field(default=None, description="Operation that failed")
    file_path: Optional[str] = Field(default=None, alias="filePath", description="Path involved")

    model_config = ConfigDict(populate_by_name=True)


class HealthResponse(BaseModel):
    """Response model for the health check."""
    status: str = "healthy"
