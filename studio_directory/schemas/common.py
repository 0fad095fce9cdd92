"""Schemas shared by every router: health probes and the error envelope."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Liveness probe body."""

    status: HealthStatus
    service: str = Field(description="Service name from settings")
    timestamp: datetime = Field(default_factory=_utcnow)


class CheckResult(BaseModel):
    """One dependency probed by the readiness check."""

    name: str
    healthy: bool
    latency_ms: float | None = None
    error: str | None = None


class ReadinessResponse(BaseModel):
    status: HealthStatus
    timestamp: datetime = Field(default_factory=_utcnow)
    checks: list[CheckResult] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    """Field-level detail attached to an error, e.g. which input was rejected."""

    loc: list[str] | None = None
    msg: str
    type: str = "error"


class ErrorResponse(BaseModel):
    """JSON body returned for every failed request.

    ``message`` is the user-facing text (for example "This claim link is
    invalid, already used, or expired."); ``error`` is the stable category
    clients switch on.
    """

    error: str = Field(description="Error category, e.g. not_found or conflict")
    message: str = Field(description="Human-readable error description")
    details: list[ErrorDetail] | None = None
    request_id: str | None = Field(default=None, description="Echo of the X-Request-ID header")
    timestamp: datetime = Field(default_factory=_utcnow)

    @classmethod
    def build(
        cls,
        error_type: str,
        message: str,
        details: list[dict[str, Any]] | None = None,
        request_id: str | None = None,
    ) -> "ErrorResponse":
        """Create the envelope from raw error details.

        Details without a ``msg`` key are stringified so nothing is dropped.
        """
        parsed = None
        if details:
            parsed = [
                ErrorDetail(loc=d.get("loc"), msg=d.get("msg", str(d)), type=d.get("type", "error"))
                for d in details
            ]
        return cls(error=error_type, message=message, details=parsed, request_id=request_id)
