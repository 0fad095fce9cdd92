"""Request latency logging middleware."""

import logging
import time
from typing import Callable

from fastapi import Request, Response

logger = logging.getLogger(__name__)

# Thresholds for log levels (in milliseconds)
SLOW_REQUEST_THRESHOLD_MS = 1000
VERY_SLOW_REQUEST_THRESHOLD_MS = 3000

HEALTH_PATHS = ("/health", "/health/ready")

# Query parameters that carry bearer secrets and must never reach the logs.
REDACTED_PARAMS = frozenset({"token", "access_token", "code"})


def redact_query_params(request: Request) -> str:
    """Render the query string with secret-bearing values masked."""
    return "&".join(
        f"{key}={'[redacted]' if key.lower() in REDACTED_PARAMS else value}"
        for key, value in request.query_params.multi_items()
    )


def _level_for(path: str, status_code: int, latency_ms: float, failed: bool) -> tuple[int, str]:
    if path in HEALTH_PATHS:
        return logging.DEBUG, ""
    if failed or status_code >= 500:
        return logging.ERROR, ""
    if latency_ms > VERY_SLOW_REQUEST_THRESHOLD_MS:
        return logging.ERROR, "VERY SLOW REQUEST: "
    if latency_ms > SLOW_REQUEST_THRESHOLD_MS:
        return logging.WARNING, "SLOW REQUEST: "
    if status_code >= 400:
        return logging.WARNING, ""
    return logging.INFO, ""


async def latency_logging_middleware(request: Request, call_next: Callable) -> Response:
    """Log one line per request, raising the level for slow or failed ones.

    Claim links arrive with the secret in the query string, so only the
    redacted rendering of the query is ever logged.
    """
    start_time = time.perf_counter()
    response = None
    failed = False

    try:
        response = await call_next(request)
        return response
    except Exception:
        failed = True
        raise
    finally:
        latency_ms = (time.perf_counter() - start_time) * 1000
        status_code = response.status_code if response else 500
        path = request.url.path

        log_data = {
            "method": request.method,
            "path": path,
            "status_code": status_code,
            "latency_ms": round(latency_ms, 2),
            "error": failed,
        }
        if path not in HEALTH_PATHS and request.query_params:
            log_data["query_params"] = redact_query_params(request)

        level, prefix = _level_for(path, status_code, latency_ms, failed)
        logger.log(level, "%s%s %s - %s - %.2fms", prefix, request.method, path, status_code, latency_ms, extra=log_data)
