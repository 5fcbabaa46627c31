"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 unless the engine session is active (readiness)

Design Decisions:
    - Separate liveness/readiness: a failed engine bootstrap removes the instance
      from the load balancer without restarting it in a loop
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "healthy", "service": "sourcegate-api", "version": "0.1.0"}


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe — the engine session must exist and be active."""
    session = getattr(request.app.state, "engine_session", None)
    if session is None or not session.is_active:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "engine_unavailable"},
        )
    return {"status": "ready", "checks": {"engine": session.status.value}}
