"""
DSM Gateway — Shared Response Schemas
=======================================

What:  Response models reused across route groups: confirmation messages,
       error envelopes, bucket results and the health report.
Who:   Referenced by route decorators (response_model / responses=) so the
       generated /swagger documentation shows every status code's body.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Confirmation body of DELETE routes."""
    message: str = Field(description="Mensagem de confirmação")


class ErrorResponse(BaseModel):
    """
    Error envelope for users/products and for validation/not-found errors.

    Fields:
        error: Machine-readable error code (e.g. "not_found", "server_error")
        message: Human-readable description
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class StorageErrorResponse(BaseModel):
    """Error envelope for bucket routes; `details` carries the storage API error (absent on list)."""
    error: str = Field(description="Mensagem estática da operação")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Erro da API de armazenamento")
    request_id: Optional[str] = None


class StorageResultResponse(BaseModel):
    """Success body of upload and replicate."""
    message: str
    result: Dict[str, Any] = Field(description="Descritor retornado pela API de armazenamento")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="MySQL connectivity: connected, disconnected")
    mongodb: str = Field(description="MongoDB connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
