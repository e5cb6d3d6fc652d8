"""
Base Schemas.

Standard error envelope and the flat action reply.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from studyshare.backend.core.utils import utc_now


class ResponseMetadata(BaseModel):
    """Metadata included in all API responses."""

    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = None


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class ActionResult(BaseModel):
    """Flat `{success, message}` reply used by the browser-facing JSON endpoints."""

    success: bool
    message: str | None = None
