"""Health check endpoints."""

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse
from starlette import status

from core.database import check_db_connection, inspect_database
from core.ratelimit import HEALTH_LIMIT, limiter
from core.telemetry import SERVICE_NAME
from schemas import DetailedHealthResponse, HealthResponse, PoolStatusResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_class=PlainTextResponse)
async def health() -> str:
    """Liveness check. Never touches the database."""
    return "Hello SEKAI!"


@router.get("/system/health", response_class=PlainTextResponse)
async def system_health() -> str:
    return "hello"


@router.get("/health/detailed", response_model=DetailedHealthResponse)
@limiter.limit(HEALTH_LIMIT)
async def health_detailed(request: Request) -> DetailedHealthResponse:
    """Database reachability and pool counters (pool is null on SQLite).

    Always 200; callers read ``status`` and ``database``.
    """
    health = await inspect_database(request.app.state.engine)
    pool = health.pool

    return DetailedHealthResponse(
        status="healthy" if health.reachable else "unhealthy",
        service=SERVICE_NAME,
        database=health.reachable,
        pool=PoolStatusResponse(**pool._asdict()) if pool else None,
    )


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"description": "Init failed or DB unreachable"}},
)
@limiter.limit(HEALTH_LIMIT)
async def ready(request: Request) -> HealthResponse:
    """Readiness endpoint.

    Returns 200 only when startup has completed and the database is reachable.
    """
    init_error = getattr(request.app.state, "init_error", None)
    if init_error:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Initialization failed: {init_error}",
        )

    if not getattr(request.app.state, "init_done", False):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Starting",
        )

    try:
        await check_db_connection(request.app.state.engine, timeout=5)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        ) from e

    return HealthResponse(status="ready", service=SERVICE_NAME)
