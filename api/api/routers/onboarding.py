"""Onboarding intake endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from studio_core.state.repository import OnboardingRepository

from api.dependencies import CallerDep, SessionDep
from api.schemas import OnboardingResponse, OnboardingUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


@router.get("", response_model=OnboardingResponse)
async def get_onboarding(user_id: CallerDep, session: SessionDep) -> OnboardingResponse:
    row = await OnboardingRepository(session).get_for_user(user_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Onboarding data not found")
    return OnboardingResponse.model_validate(row)


@router.post("", response_model=OnboardingResponse)
async def save_onboarding(
    payload: OnboardingUpdateRequest,
    user_id: CallerDep,
    session: SessionDep,
) -> OnboardingResponse:
    """Merge one step's answers into the caller's onboarding record."""
    row = await OnboardingRepository(session).save_step(
        user_id,
        payload.answers(),
        step=payload.onboarding_step,
        completed=payload.completed,
    )
    logger.info("Onboarding for user %s now at step %d", user_id, row.onboarding_step)
    return OnboardingResponse.model_validate(row)
