"""Liveness probe."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel
from studio_core.state.database import ping

from api import __version__
from api.dependencies import SessionDep

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: Literal["healthy"] = "healthy"
    version: str
    db: Literal["ok", "degraded"]


@router.get("/health", response_model=HealthResponse)
async def health(session: SessionDep) -> HealthResponse:
    """Report the process as alive; ``db`` says whether the database answered."""
    reachable = await ping(session)
    return HealthResponse(version=__version__, db="ok" if reachable else "degraded")
