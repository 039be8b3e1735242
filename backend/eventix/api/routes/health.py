"""Health & Readiness Probes — liveness plus the registry backend in service.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 only when no registry is initialized;
      a degraded registry is still ready and reports backend="fallback"
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from eventix.infrastructure import registry as registry_module

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe."""
    return {"status": "healthy", "service": "eventix-api", "version": "1.0.0"}


@router.get("/ready")
async def readiness_check():
    facade = registry_module.registry
    if facade is None:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "registry_uninitialized"},
        )
    return {
        "status": "ready",
        "checks": {
            "registry": facade.backend.value,
            "degraded": facade.degraded,
        },
    }
