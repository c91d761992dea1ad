"""State persistence layer (PostgreSQL in production, SQLite locally)."""

from studio_core.state.database import get_engine, get_session, get_session_factory
from studio_core.state.repository import (
    AiImageRepository,
    BrandbookRepository,
    DashboardRepository,
    DomainRepository,
    GeneratedImageRepository,
    LandingPageRepository,
    OnboardingRepository,
    ProjectRepository,
    SelfieUploadRepository,
    StyleguideRepository,
    SubscriptionRepository,
    TemplateRecordRepository,
    UsageHistoryRepository,
    UserModelRepository,
    UserProfileRepository,
    UserRepository,
    UserUsageRepository,
)

__all__ = [
    "AiImageRepository",
    "BrandbookRepository",
    "DashboardRepository",
    "DomainRepository",
    "GeneratedImageRepository",
    "LandingPageRepository",
    "OnboardingRepository",
    "ProjectRepository",
    "SelfieUploadRepository",
    "StyleguideRepository",
    "SubscriptionRepository",
    "TemplateRecordRepository",
    "UsageHistoryRepository",
    "UserModelRepository",
    "UserProfileRepository",
    "UserRepository",
    "UserUsageRepository",
    "get_engine",
    "get_session",
    "get_session_factory",
]
