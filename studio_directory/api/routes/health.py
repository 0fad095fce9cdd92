"""Liveness and readiness probes."""

import time

from fastapi import APIRouter, Response, status

from studio_directory.core.config import get_settings
from studio_directory.core.supabase import check_database_connection
from studio_directory.schemas.common import CheckResult, HealthResponse, HealthStatus, ReadinessResponse

router = APIRouter(tags=["health"])

# Tables the claim flows cannot work without.
READINESS_TABLES = ("profiles", "profile_claim_requests")


@router.get("/health", response_model=HealthResponse, summary="Liveness check")
async def health_check() -> HealthResponse:
    """Report that the process is up, without touching the database."""
    return HealthResponse(status=HealthStatus.HEALTHY, service=get_settings().app_name)


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "A required table is unreachable"}},
    summary="Readiness check",
)
async def readiness_check(response: Response) -> ReadinessResponse:
    """Probe each table the claim flows read, answering 503 if any fails."""
    checks = []
    for table in READINESS_TABLES:
        started = time.perf_counter()
        result = await check_database_connection(table)
        checks.append(
            CheckResult(
                name=table,
                healthy=result["healthy"],
                latency_ms=round((time.perf_counter() - started) * 1000, 2),
                error=result.get("error"),
            )
        )

    healthy = all(check.healthy for check in checks)
    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(status=HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY, checks=checks)
