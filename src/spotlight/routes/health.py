"""Health check endpoints for liveness and readiness probes."""
from typing import Literal

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from spotlight.events.router import get_router

router = APIRouter(prefix="/health", tags=["health"])


class LivenessResponse(BaseModel):
    """Response model for liveness probe.

    Attributes:
        status: Always 'alive' when process is running.
    """

    status: Literal["alive"]


class ReadinessCheck(BaseModel):
    """Individual dependency check result.

    Attributes:
        name: Identifier for the dependency being checked.
        status: Result of the check ('ok' or 'failed').
        message: Error details when status is 'failed'.
    """

    name: str
    status: Literal["ok", "failed"]
    message: str | None = None


class ReadinessResponse(BaseModel):
    """Response model for readiness probe.

    Attributes:
        status: Overall readiness ('ready' or 'not_ready').
        checks: List of individual dependency check results.
        active_queries: Queries currently registered with the router.
    """

    status: Literal["ready", "not_ready"]
    checks: list[ReadinessCheck]
    active_queries: int


def _check_substrate(request: Request) -> ReadinessCheck:
    """Verify a native search substrate was resolved at startup.

    Args:
        request: Incoming request carrying app state.

    Returns:
        Check result with status and optional error message.
    """
    if getattr(request.app.state, "substrate", None) is not None:
        return ReadinessCheck(name="substrate", status="ok")
    return ReadinessCheck(
        name="substrate",
        status="failed",
        message=getattr(request.app.state, "substrate_error", None)
        or "Substrate not initialized",
    )


@router.get("/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """Liveness probe endpoint.

    Returns:
        Liveness status response.
    """
    return LivenessResponse(status="alive")


@router.get("/ready", response_model=ReadinessResponse)
async def readiness(request: Request) -> JSONResponse:
    """Readiness probe endpoint.

    Returns 200 when Spotlight queries can run, 503 otherwise.

    Args:
        request: Incoming request carrying app state.

    Returns:
        Readiness status with individual check results.
    """
    checks = [_check_substrate(request)]
    all_ok = all(c.status == "ok" for c in checks)
    response = ReadinessResponse(
        status="ready" if all_ok else "not_ready",
        checks=checks,
        active_queries=len(get_router().registry),
    )
    code = status.HTTP_200_OK if all_ok else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=response.model_dump(), status_code=code)
