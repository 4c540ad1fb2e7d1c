# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
#
# /health races a trivial database read against a timeout:
# - probe answers first  -> 200, status "healthy"
# - probe errors/times out -> 503, status "degraded"
# =============================================================================

import asyncio
import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.config import settings
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()

# Process start, for the uptime field
_STARTED_AT = time.monotonic()

NO_STORE_HEADERS = {"Cache-Control": "no-store, max-age=0"}


# =============================================================================
# Response Models
# =============================================================================

class ServiceStatus(BaseModel):
    """Status of one dependency."""
    status: str
    response_time: float | None = None
    error: str | None = None


class ServicesResponse(BaseModel):
    """Individual service checks."""
    api: ServiceStatus
    database: ServiceStatus


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    timestamp: str
    environment: str
    services: ServicesResponse
    uptime: float


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


# =============================================================================
# Probe
# =============================================================================

def probe_database() -> None:
    """
    Trivial read against the hosted database.

    Blocking; run it in a worker thread. Raises on any failure.
    """
    client = SupabaseClient.get_anon_client()
    client.table("system_health").select("last_check_time").limit(1).execute()


async def check_database(timeout: float) -> ServiceStatus:
    """Run the probe against a timeout and report how it went."""
    started = time.perf_counter()
    try:
        await asyncio.wait_for(asyncio.to_thread(probe_database), timeout=timeout)
    except asyncio.TimeoutError:
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.warning(f"Database health probe timed out after {timeout}s")
        return ServiceStatus(
            status="unhealthy",
            response_time=elapsed_ms,
            error=f"Database connection timeout after {timeout}s",
        )
    except Exception as e:
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.error(f"Database health probe failed: {e}")
        return ServiceStatus(status="unhealthy", response_time=elapsed_ms, error=str(e))

    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
    return ServiceStatus(status="healthy", response_time=elapsed_ms)


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns 200 when the database answers within the timeout,
    503 otherwise. Responses are never cached.
    """
    started = time.perf_counter()
    database = await check_database(settings.HEALTH_CHECK_TIMEOUT_SECONDS)
    healthy = database.status == "healthy"

    body = HealthResponse(
        status="healthy" if healthy else "degraded",
        version=settings.APP_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        environment=settings.ENVIRONMENT,
        services=ServicesResponse(
            api=ServiceStatus(
                status="healthy",
                response_time=round((time.perf_counter() - started) * 1000, 2),
            ),
            database=database,
        ),
        uptime=round(time.monotonic() - _STARTED_AT, 3),
    )

    return JSONResponse(
        status_code=200 if healthy else 503,
        content=body.model_dump(),
        headers=NO_STORE_HEADERS,
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    Used by Kubernetes/Docker for restart decisions.
    """
    return LivenessResponse(
        status="alive",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
