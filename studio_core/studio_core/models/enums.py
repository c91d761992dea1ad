"""Enumerated status domains for the persisted entities.

The database stores these as plain strings and does not reject values
outside the enumerations; the enums document the known states and supply
the values that Brand Studio itself writes.
"""

from __future__ import annotations

from enum import Enum


class ProjectStatus(str, Enum):
    """Lifecycle of a user's brand/site project."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class GenerationStatus(str, Enum):
    """Progress of an external image generation request."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ProcessingStatus(str, Enum):
    """Progress of a selfie upload through pre-processing."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class TrainingStatus(str, Enum):
    """Training state of a user's personal generation model."""

    PENDING = "pending"
    TRAINING = "training"
    COMPLETED = "completed"
    FAILED = "failed"


class SubscriptionStatus(str, Enum):
    """Billing state mirrored from the payment provider."""

    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class SubscriptionPlan(str, Enum):
    """Purchasable plans."""

    AI_PACK = "ai-pack"
    STUDIO_FOUNDING = "studio-founding"
    STUDIO_STANDARD = "studio-standard"


class SslStatus(str, Enum):
    """Certificate provisioning state for a custom domain."""

    PENDING = "pending"
    ACTIVE = "active"
    FAILED = "failed"
