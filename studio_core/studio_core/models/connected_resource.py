"""Typed reference from a domain to the published artifact it serves.

A domain points at exactly one brandbook, dashboard, or landing page.  The
``domains`` table stores the reference as ``(connected_to, resource_id)``;
everything above the repository works with the :data:`ConnectedResource`
union so a kind and its id can never disagree.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import ConfigDict, Field, TypeAdapter

from studio_core.models.base import CamelModel


class ResourceKind(str, Enum):
    """Storage tags for the ``domains.connected_to`` column."""

    BRANDBOOK = "brandbook"
    DASHBOARD = "dashboard"
    LANDING_PAGE = "landing-page"


class BrandbookConnection(CamelModel):
    """Domain serves the user's brandbook."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["brandbook"] = "brandbook"
    brandbook_id: int = Field(..., ge=1)

    @property
    def resource_id(self) -> int:
        return self.brandbook_id


class DashboardConnection(CamelModel):
    """Domain serves the user's dashboard."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["dashboard"] = "dashboard"
    dashboard_id: int = Field(..., ge=1)

    @property
    def resource_id(self) -> int:
        return self.dashboard_id


class LandingPageConnection(CamelModel):
    """Domain serves one of the user's landing pages."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["landing-page"] = "landing-page"
    landing_page_id: int = Field(..., ge=1)

    @property
    def resource_id(self) -> int:
        return self.landing_page_id


ConnectedResource = Annotated[
    BrandbookConnection | DashboardConnection | LandingPageConnection,
    Field(discriminator="kind"),
]

_connected_resource_adapter: TypeAdapter[ConnectedResource] = TypeAdapter(ConnectedResource)


def to_storage(resource: ConnectedResource) -> tuple[str, int]:
    """Encode *resource* as the ``(connected_to, resource_id)`` column pair."""
    return resource.kind, resource.resource_id


def from_storage(connected_to: str | None, resource_id: int | None) -> ConnectedResource | None:
    """Decode the column pair back into a typed reference.

    Returns ``None`` when the domain is not connected.  Raises
    ``ValueError`` for an unknown kind tag.
    """
    if connected_to is None or resource_id is None:
        return None
    try:
        kind = ResourceKind(connected_to)
    except ValueError as exc:
        raise ValueError(f"Unknown connected resource kind: {connected_to!r}") from exc

    if kind is ResourceKind.BRANDBOOK:
        return BrandbookConnection(brandbook_id=resource_id)
    if kind is ResourceKind.DASHBOARD:
        return DashboardConnection(dashboard_id=resource_id)
    return LandingPageConnection(landing_page_id=resource_id)


def parse_connected_resource(payload: object) -> ConnectedResource:
    """Validate an untyped payload (e.g. a request body) into the union."""
    return _connected_resource_adapter.validate_python(payload)
