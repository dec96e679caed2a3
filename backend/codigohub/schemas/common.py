"""
CodigoHub Backend — Shared Pydantic Schemas
============================================

What:  Envelope, error and health models shared by every router.
Why:   Every success body is `{success: true, message, ...payload}` and
       every error body has the same shape, so clients parse one format.
"""

from typing import Optional

from pydantic import BaseModel, Field


class MessageResult(BaseModel):
    """Success envelope with no payload (deletes, link/unlink)."""
    success: bool = Field(default=True)
    message: str = Field(description="Human-readable outcome")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body for all API errors.

    Fields:
        message:    Human-readable description for display
        error:      Raw error string from the failing layer
        code:       Taxonomy tag (NOT_FOUND, FORBIDDEN, DUPLICATE, ...)
        details:    Optional extra context (e.g. which field failed)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "success": false,
            "message": "You do not have permission to perform this action",
            "error": "You can only add codes to your own collections",
            "code": "FORBIDDEN",
            "request_id": "a1b2c3d4"
        }
    """
    success: bool = Field(default=False)
    message: str = Field(description="Human-readable error description")
    error: str = Field(description="Raw error string")
    code: Optional[str] = Field(default=None, description="Error taxonomy tag")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
