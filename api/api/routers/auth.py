"""Authenticated user profile endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request
from studio_core.state.repository import UserRepository

from api.dependencies import CallerDep, SessionDep
from api.schemas import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/user", response_model=UserResponse)
async def get_current_user(request: Request, user_id: CallerDep, session: SessionDep) -> UserResponse:
    """Return the caller's user record, creating it on first authentication.

    Profile fields are refreshed from the token claims on every call.
    """
    claims = request.state.claims
    try:
        row = await UserRepository(session).upsert(
            user_id,
            email=claims.email,
            first_name=claims.first_name,
            last_name=claims.last_name,
            profile_image_url=claims.profile_image_url,
        )
        return UserResponse.model_validate(row)
    except Exception:
        logger.exception("Error fetching user %s", user_id)
        raise HTTPException(status_code=500, detail="Failed to fetch user")
