"""
Common Pydantic Schemas
========================

Shared response models for the service endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Health status")
    timestamp: str = Field(..., description="Timestamp (ISO format)")
    version: str = Field(..., description="API version")


class VersionResponse(BaseModel):
    """API version information."""
    version: str
    environment: str
    market: str = Field(..., description="Price area code, e.g. EE")

    model_config = ConfigDict(json_schema_extra={
        "example": {"version": "1.0.0", "environment": "production", "market": "EE"}
    })
