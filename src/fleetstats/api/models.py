"""Pydantic models for HTTP API requests and responses."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from fleetstats.models.breakdown import VersionEntry


class ClassifyRequest(BaseModel):
    """POST /api/v1.0/status/classify payload.

    Example:
        {"status_code": 3, "version": "3510.2.0", "error_code": 1073741833}
    """

    status_code: int = Field(..., description="Lifecycle code reported by the instance")
    version: str = Field(default="", description="Version reported with the status")
    error_code: Optional[int] = Field(None, description="Packed error code, if any")


class DecodeRequest(BaseModel):
    """POST /api/v1.0/errors/decode payload."""

    error_code: Optional[int] = Field(None, description="Packed error code")


class DecodedError(BaseModel):
    """Decoded error code."""

    primary: str = Field(..., description="Primary error message")
    flags: List[str] = Field(default_factory=list, description="Flag phrases, ascending bit order")
    message: str = Field(..., description="Single-line rendering")


class ColorsRequest(BaseModel):
    """POST /api/v1.0/versions/colors payload."""

    versions: List[str] = Field(..., description="Versions to color")
    reference_version: Optional[str] = Field(None, description="Channel's current version")


class BreakdownRequest(BaseModel):
    """POST /api/v1.0/versions/breakdown payload.

    Example:
        {
            "entries": [
                {"version": "3510.2.0", "percentage": 82.0},
                {"version": "3374.2.5", "percentage": 18.0}
            ],
            "reference_version": "3510.2.0"
        }
    """

    entries: List[VersionEntry] = Field(default_factory=list)
    reference_version: Optional[str] = None
    significance_threshold_pct: Optional[float] = Field(
        None, description="Defaults to the configured threshold"
    )


class TicksRequest(BaseModel):
    """POST /api/v1.0/timeline/ticks payload."""

    timestamps: List[datetime] = Field(..., description="Ordered sample instants")
    desired_tick_count: Optional[int] = Field(
        None, description="Defaults to the configured tick count"
    )


class VersionTimelineRequest(BaseModel):
    """POST /api/v1.0/timeline/versions payload."""

    timeline: Dict[str, Dict[str, int]] = Field(
        ..., description="{timestamp: {version: instances}}"
    )
    reference_version: Optional[str] = None
    selected: int = Field(default=-1, description="Point to break down, -1 for latest")


class StatusTimelineRequest(BaseModel):
    """POST /api/v1.0/timeline/statuses payload."""

    timeline: Dict[str, Dict[str, Dict[str, int]]] = Field(
        ..., description="{timestamp: {status: {version: instances}}}"
    )
    selected: int = Field(default=-1, description="Point to break down, -1 for latest")


class SuccessResponse(BaseModel):
    """Success envelope for all endpoints."""

    code: int = Field(default=200, description="Application-level status code (200)")
    msg: str = Field(default="success", description="Success message")
    data: Optional[Any] = Field(None, description="Response data")


class ErrorResponse(BaseModel):
    """Error envelope.

    HTTP status code is always 200, real status in 'code' field.
    """

    code: int = Field(..., description="Application-level error code (400)")
    msg: str = Field(..., description="Error description")
