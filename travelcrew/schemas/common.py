"""
Travel Crew Backend — Shared Response Schemas
===============================================

Error, confirmation and health payloads used by every router.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g. "validation_error", "not_found")
        message: Human-readable description for display to users
        details: Optional extra context (e.g. which field failed validation)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "validation_error",
            "message": "title is required",
            "details": {"field": "title"},
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class MessageResponse(BaseModel):
    """Confirmation body returned by DELETE endpoints."""
    message: str = Field(description="Human-readable confirmation")


class StatusResponse(BaseModel):
    """Body of the root status endpoint."""
    status: str
    message: str


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    asset_store: str = Field(description="Asset store status: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
