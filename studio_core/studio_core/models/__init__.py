"""Value objects shared by the repository layer and the API."""

from studio_core.models.base import CamelModel
from studio_core.models.connected_resource import (
    BrandbookConnection,
    ConnectedResource,
    DashboardConnection,
    LandingPageConnection,
    ResourceKind,
)
from studio_core.models.enums import (
    GenerationStatus,
    ProcessingStatus,
    ProjectStatus,
    SslStatus,
    SubscriptionPlan,
    SubscriptionStatus,
    TrainingStatus,
)

__all__ = [
    "CamelModel",
    "BrandbookConnection",
    "ConnectedResource",
    "DashboardConnection",
    "GenerationStatus",
    "LandingPageConnection",
    "ProcessingStatus",
    "ProjectStatus",
    "ResourceKind",
    "SslStatus",
    "SubscriptionPlan",
    "SubscriptionStatus",
    "TrainingStatus",
]
