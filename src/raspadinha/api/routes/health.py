"""Health check routes — liveness, readiness, and general health."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from raspadinha.api.schemas.common import HealthResponse

router = APIRouter()


@router.get("/health")
def health_check(request: Request) -> HealthResponse:
    """Application health check endpoint."""
    settings = getattr(request.app.state, "settings", None)
    env = settings.app_env if settings else "unknown"

    engine = getattr(request.app.state, "prize_engine", None)
    return HealthResponse(
        status="ok",
        environment=env,
        tiers_loaded=len(engine.tiers) if engine is not None else 0,
    )


@router.get("/health/live")
def liveness_probe() -> dict[str, Any]:
    """Liveness probe — is the process alive and responding?"""
    return {"status": "alive"}


@router.get("/health/ready")
def readiness_probe(request: Request) -> Any:
    """Readiness probe — are the prize engine and session in place?"""
    checks: dict[str, Any] = {}

    engine = getattr(request.app.state, "prize_engine", None)
    checks["prize_engine"] = {"status": "ok" if engine is not None else "missing"}

    session = getattr(request.app.state, "ticket_session", None)
    if session is not None:
        checks["ticket_session"] = {"status": "ok", "state": session.state.value}
    else:
        checks["ticket_session"] = {"status": "missing"}

    overall_ready = engine is not None and session is not None
    body = {
        "status": "ready" if overall_ready else "not_ready",
        "checks": checks,
    }
    if not overall_ready:
        return JSONResponse(content=body, status_code=503)
    return body
