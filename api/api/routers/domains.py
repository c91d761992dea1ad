"""Custom domain registration and connection endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Body
from studio_core.models import ConnectedResource
from studio_core.state.repository import DomainRepository

from api.dependencies import CallerDep, SessionDep
from api.schemas import CreateDomainRequest, DomainResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/domains", tags=["domains"])


@router.get("", response_model=list[DomainResponse])
async def list_domains(user_id: CallerDep, session: SessionDep) -> list[DomainResponse]:
    rows = await DomainRepository(session).list_for_user(user_id)
    return [DomainResponse.model_validate(row) for row in rows]


@router.post("", response_model=DomainResponse, status_code=201)
async def create_domain(
    payload: CreateDomainRequest,
    user_id: CallerDep,
    session: SessionDep,
) -> DomainResponse:
    """Register a domain.  A taken domain or subdomain answers 409."""
    row = await DomainRepository(session).create(
        user_id,
        payload.domain,
        subdomain=payload.subdomain,
        dns_records=payload.dns_records,
    )
    logger.info("User %s registered domain %s", user_id, row.domain)
    return DomainResponse.model_validate(row)


@router.put("/{domain_id}/connection", response_model=DomainResponse)
async def connect_domain(
    domain_id: int,
    user_id: CallerDep,
    session: SessionDep,
    resource: ConnectedResource = Body(...),
) -> DomainResponse:
    """Point the domain at one of the caller's brandbook, dashboard or landing pages.

    Answers 404 when the domain or the target is missing or owned by
    another user.
    """
    row = await DomainRepository(session).connect(user_id, domain_id, resource)
    return DomainResponse.model_validate(row)
