"""
CatVote: Health Check Route
===========================

What:  GET /api/health liveness probe.
How:   Answers a constant {"status": "ok"}. It does not query the
       store, so it keeps answering even when the store file never opened.
Who:   Docker health checks, load balancers, the client on startup.
"""

from fastapi import APIRouter

from catvote.schemas.common import HealthResponse

router = APIRouter(prefix="/api", tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service liveness check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok")
