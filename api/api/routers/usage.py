"""Usage counters and history for the authenticated caller."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Query
from studio_core.state.repository import UsageHistoryRepository, UserUsageRepository

from api.dependencies import CallerDep, SessionDep
from api.schemas import UsageHistoryItemResponse, UsageResponse
from api.services.usage_service import UsageService

router = APIRouter(prefix="/usage", tags=["usage"])


@router.get("", response_model=list[UsageResponse])
async def get_usage(user_id: CallerDep, session: SessionDep) -> list[UsageResponse]:
    """One entry per plan the caller has consumed generations on.

    Expired monthly windows are rolled forward before reporting.
    """
    rows = await UserUsageRepository(session).list_for_user(user_id)
    now = datetime.now(UTC)
    rolled = [UsageService.roll_period(row, now) for row in rows]
    if any(rolled):
        await session.flush()
    return [UsageResponse.model_validate(row) for row in rows]


@router.get("/history", response_model=list[UsageHistoryItemResponse])
async def get_usage_history(
    user_id: CallerDep,
    session: SessionDep,
    limit: int = Query(default=50, ge=1, le=500, description="Maximum entries to return"),
) -> list[UsageHistoryItemResponse]:
    """Most recent history entries first."""
    rows = await UsageHistoryRepository(session).list_for_user(user_id, limit=limit)
    return [UsageHistoryItemResponse.model_validate(row) for row in rows]
