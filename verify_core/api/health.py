"""
Health Check Router
===================
Component status for the record store, counter store and SMS sender.
"""

import time
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = structlog.get_logger(__name__)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    status: str
    latency_ms: Optional[float] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: HealthStatus
    service: str
    version: str
    components: Dict[str, ComponentHealth]
    timestamp: float


async def check_component(name: str, ping: Callable[[], Awaitable[bool]]) -> ComponentHealth:
    """Run one ping and time it."""
    try:
        start = time.time()
        reachable = await ping()
        latency = (time.time() - start) * 1000
        if reachable is False:
            logger.warning("Health check failed", component=name, error="unreachable")
            return ComponentHealth(status="error", error="unreachable")
        return ComponentHealth(status="connected", latency_ms=round(latency, 2))
    except Exception as e:
        logger.error("Health check failed", component=name, error=str(e))
        return ComponentHealth(status="error", error=str(e))


def create_health_router(
    service_name: str,
    version: str,
    counter_store_ping: Callable[[], Awaitable[bool]],
    record_store_ping: Callable[[], Awaitable[bool]],
    sender_check: Optional[Callable[[], Awaitable[bool]]] = None,
) -> APIRouter:
    """
    Create a health check router.

    The record store is critical (unhealthy when down). The counter store
    and the SMS sender only degrade the service, since verification keeps
    working without either.

    Returns:
        FastAPI router with /health, /health/live, and /health/ready endpoints
    """
    router = APIRouter(tags=["Health"])

    @router.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check with all component statuses."""
        components = {
            "record_store": await check_component("record_store", record_store_ping),
            "counter_store": await check_component("counter_store", counter_store_ping),
        }
        if sender_check is not None:
            components["sender"] = await check_component("sender", sender_check)

        overall_status = HealthStatus.HEALTHY
        if components["record_store"].status == "error":
            overall_status = HealthStatus.UNHEALTHY
        elif any(c.status == "error" for c in components.values()):
            overall_status = HealthStatus.DEGRADED

        return HealthResponse(
            status=overall_status,
            service=service_name,
            version=version,
            components=components,
            timestamp=time.time(),
        )

    @router.get("/health/live")
    async def liveness_probe():
        """Liveness probe - always returns 200 if the process is running."""
        return {"status": "alive"}

    @router.get("/health/ready")
    async def readiness_probe():
        """Readiness probe - the record store must be reachable."""
        record_health = await check_component("record_store", record_store_ping)
        if record_health.status == "error":
            return JSONResponse(
                {"status": "not_ready", "reason": "record_store_unavailable"},
                status_code=503,
            )
        return {"status": "ready"}

    return router
